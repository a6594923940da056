"""
twitter_client.py — OAuth1-signed HTTP client for the Twitter API.

Tokens are pre-provisioned, so no request-token/authorize round trip happens;
the three OAuth1 endpoints are still carried on the client.
"""

from requests_oauthlib import OAuth1Session

from config import (
    ACCESS_TOKEN_URL, AUTHORIZE_TOKEN_URL, REQUEST_TIMEOUT, REQUEST_TOKEN_URL,
)
from upload_errors import CredentialError


class TwitterClient:
    """A requests session that signs every call with the user's OAuth1 tokens."""

    request_token_url = REQUEST_TOKEN_URL
    authorize_url = AUTHORIZE_TOKEN_URL
    access_token_url = ACCESS_TOKEN_URL

    def __init__(self, session: OAuth1Session, timeout: float = REQUEST_TIMEOUT):
        self.session = session
        self.timeout = timeout

    def request(self, method: str, url: str, **kwargs):
        kwargs.setdefault("timeout", self.timeout)
        return self.session.request(method, url, **kwargs)

    def post(self, url: str, **kwargs):
        return self.request("POST", url, **kwargs)

    def get(self, url: str, **kwargs):
        return self.request("GET", url, **kwargs)

    def close(self):
        self.session.close()


def make_client(consumer_key: str, consumer_secret: str,
                access_token: str, access_secret: str,
                timeout: float = REQUEST_TIMEOUT) -> TwitterClient:
    """
    Build a signed client from the four OAuth1 credentials.

    Raises:
        CredentialError: a credential is empty or rejected by the signer.
    """
    credentials = {
        "consumer key": consumer_key,
        "consumer secret": consumer_secret,
        "access token": access_token,
        "access secret": access_secret,
    }
    for label, value in credentials.items():
        if not isinstance(value, str) or not value:
            raise CredentialError(f"Twitter {label} is missing")

    try:
        session = OAuth1Session(
            consumer_key,
            client_secret=consumer_secret,
            resource_owner_key=access_token,
            resource_owner_secret=access_secret,
        )
    except (ValueError, TypeError) as e:
        raise CredentialError(f"Could not build OAuth1 client: {e}") from e

    return TwitterClient(session, timeout=timeout)
