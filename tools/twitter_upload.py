"""
twitter_upload.py — Upload a video with Twitter's chunked media API and tweet it.

Runs the upload in strict order:
    INIT → APPEND (fixed-size segments, ascending index) → FINALIZE
    → STATUS polling until processing finishes → status update with media_ids

Any phase failure aborts the remaining phases. The final status update is
best-effort: if it fails the upload itself still counts as done.
"""

import logging
import math
import time
from dataclasses import dataclass

import requests

from config import (
    LOGGER_NAME, MAX_STATUS_ATTEMPTS, MEDIA_CATEGORY, MEDIA_TYPE,
    MEDIA_UPLOAD_URL, SEGMENT_FILENAME, SEGMENT_SIZE, STATUS_UPDATE_URL,
)
from upload_errors import (
    AppendError, FileReadError, FinalizeError, InitError, MaxAttemptsError,
    PostStatusError, ProcessingFailedError, ProtocolError, StatusError,
)

SUCCEEDED = "succeeded"
FAILED = "failed"


@dataclass
class UploadSession:
    """State of one chunked upload, created from the INIT response."""

    media_id: int
    total_bytes: int
    segment_size: int = SEGMENT_SIZE
    expires_after_secs: int | None = None
    posted: bool = False

    @property
    def segment_count(self) -> int:
        return math.ceil(self.total_bytes / self.segment_size)


@dataclass
class ProcessingState:
    """Server-side processing status from a FINALIZE or STATUS response."""

    state: str = ""
    check_after_secs: int = 0
    progress_percent: int | None = None
    error: str | None = None
    attempts: int = 0

    @classmethod
    def from_response(cls, body: dict, attempts: int = 0) -> "ProcessingState":
        info = body.get("processing_info") or {}
        if not isinstance(info, dict):
            raise ValueError(f"processing_info is not an object: {info!r}")

        check_after_secs = int(info.get("check_after_secs") or 0)
        if check_after_secs < 0:
            raise ValueError(f"check_after_secs is negative: {check_after_secs}")

        error = info.get("error")
        if isinstance(error, dict):
            error = error.get("message") or error.get("name")

        return cls(
            state=info.get("state") or "",
            check_after_secs=check_after_secs,
            progress_percent=info.get("progress_percent"),
            error=error,
            attempts=attempts,
        )


def iter_segments(payload: bytes, segment_size: int = SEGMENT_SIZE):
    """Yield (segment_index, chunk) pairs covering payload in order."""
    if segment_size <= 0:
        raise ValueError(f"segment_size must be positive, got {segment_size}")
    for index, start in enumerate(range(0, len(payload), segment_size)):
        yield index, payload[start:start + segment_size]


def read_video(video_path: str) -> bytes:
    """Read the whole video file into memory."""
    if not video_path:
        raise FileReadError("file to upload is required")
    try:
        with open(video_path, "rb") as f:
            return f.read()
    except OSError as e:
        raise FileReadError(f"Could not read {video_path}: {e}") from e


def _json_body(resp) -> dict:
    body = resp.json()
    if not isinstance(body, dict):
        raise ValueError(f"expected a JSON object, got {type(body).__name__}")
    return body


class VideoUploader:
    """
    Drives the INIT/APPEND/FINALIZE/STATUS protocol over a signed client.

    Args:
        client: a TwitterClient (anything with post/get returning responses)
        logger: logger for debug output; configured by the caller beforehand
        sleep: called with the delay in seconds between status checks
        segment_size: bytes per APPEND request
        max_attempts: status checks allowed after the first one
    """

    def __init__(self, client, logger: logging.Logger | None = None, sleep=time.sleep,
                 segment_size: int = SEGMENT_SIZE, max_attempts: int = MAX_STATUS_ATTEMPTS):
        self.client = client
        self.log = logger or logging.getLogger(LOGGER_NAME)
        self.sleep = sleep
        self.segment_size = segment_size
        self.max_attempts = max_attempts

    def upload_video(self, payload: bytes, status: str) -> UploadSession:
        """
        Upload payload as a video and post a tweet with it attached.

        Returns:
            The finished UploadSession; session.posted tells whether the
            tweet went out.

        Raises:
            UploadError: any of the upload phases failed.
        """
        self.log.debug("bytes %d", len(payload))

        print("Initializing...", end=" ", flush=True)
        session = self.media_init(payload)

        print("Uploading...", end=" ", flush=True)
        self.media_append(session, payload)

        print("Finalizing...", end=" ", flush=True)
        processing = self.media_finalize(session)
        self.check_status(session, processing)

        print("Posting...", end=" ", flush=True)
        try:
            self.update_status(status, session)
        except PostStatusError as e:
            self.log.error("Can't update status: %s", e)
            print(f"(status not posted: {e})", end=" ", flush=True)

        print("Upload Complete!", flush=True)
        return session

    def media_init(self, payload: bytes) -> UploadSession:
        form = {
            "command": "INIT",
            "media_type": MEDIA_TYPE,
            "check_progress": "True",
            "media_category": MEDIA_CATEGORY,
            "total_bytes": str(len(payload)),
        }
        try:
            resp = self.client.post(MEDIA_UPLOAD_URL, data=form)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise InitError(f"INIT request failed: {e}") from e

        self.log.debug("init response %s", resp.text)

        try:
            body = _json_body(resp)
            media_id = int(body.get("media_id", body.get("media_id_string")))
        except (ValueError, TypeError) as e:
            raise InitError(f"Unexpected INIT response: {resp.text}") from e
        if not 0 <= media_id < 2**64:
            raise InitError(f"media_id out of unsigned 64-bit range: {media_id}")

        session = UploadSession(
            media_id=media_id,
            total_bytes=len(payload),
            segment_size=self.segment_size,
            expires_after_secs=body.get("expires_after_secs"),
        )
        self.log.debug("initialized media %d (%d segments, expires after %ss)",
                       session.media_id, session.segment_count, session.expires_after_secs)
        return session

    def media_append(self, session: UploadSession, payload: bytes) -> None:
        # Segment order decides assembly order on Twitter's side: never reorder.
        for index, chunk in iter_segments(payload, session.segment_size):
            start = index * session.segment_size
            self.log.debug("try to append %d-%d", start, start + len(chunk))

            form = {
                "command": "APPEND",
                "media_id": str(session.media_id),
                "segment_index": str(index),
            }
            try:
                resp = self.client.post(
                    MEDIA_UPLOAD_URL,
                    data=form,
                    files={"media": (SEGMENT_FILENAME, chunk)},
                )
                resp.raise_for_status()
            except requests.RequestException as e:
                raise AppendError(
                    f"APPEND of segment {index}/{session.segment_count} failed: {e}"
                ) from e

            self.log.debug("append response %d (len %d) %s", index, len(chunk), resp.text)

    def media_finalize(self, session: UploadSession) -> ProcessingState:
        form = {"command": "FINALIZE", "media_id": str(session.media_id)}
        try:
            resp = self.client.post(MEDIA_UPLOAD_URL, data=form)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise FinalizeError(f"FINALIZE request failed: {e}") from e

        self.log.debug("final response %s", resp.text)

        try:
            return ProcessingState.from_response(_json_body(resp), attempts=0)
        except (ValueError, TypeError) as e:
            raise FinalizeError(f"Unexpected FINALIZE response: {resp.text}") from e

    def check_status(self, session: UploadSession, processing: ProcessingState) -> ProcessingState:
        """
        Poll STATUS until processing succeeds or fails.

        Sleeps 2 * check_after_secs before each check. Gives up with
        MaxAttemptsError once more than max_attempts checks were made.
        """
        while True:
            if processing.state == SUCCEEDED:
                self.log.debug("media %d processed after %d status checks",
                               session.media_id, processing.attempts)
                return processing
            if processing.state == FAILED:
                reason = processing.error or "no reason given"
                raise ProcessingFailedError(f"Media processing failed: {reason}")
            if processing.attempts > self.max_attempts:
                raise MaxAttemptsError(
                    f"Max attempts reached: media {session.media_id} still "
                    f"{processing.state or 'unknown'} after {processing.attempts} status checks"
                )

            delay = 2 * processing.check_after_secs
            self.log.debug("state %r (%s%%), next check in %ss",
                           processing.state, processing.progress_percent, delay)
            self.sleep(delay)
            processing = self.fetch_status(session, attempts=processing.attempts + 1)

    def fetch_status(self, session: UploadSession, attempts: int) -> ProcessingState:
        params = {"command": "STATUS", "media_id": str(session.media_id)}
        try:
            resp = self.client.get(MEDIA_UPLOAD_URL, params=params)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise StatusError(f"STATUS request failed: {e}") from e

        self.log.debug("status %s", resp.text)

        try:
            processing = ProcessingState.from_response(_json_body(resp), attempts=attempts)
        except (ValueError, TypeError) as e:
            raise ProtocolError(f"Unexpected STATUS response: {resp.text}") from e
        if not processing.state:
            raise ProtocolError(f"STATUS response has no processing state: {resp.text}")
        return processing

    def update_status(self, status: str, session: UploadSession) -> None:
        form = {"status": status, "media_ids": str(session.media_id)}
        try:
            resp = self.client.post(STATUS_UPDATE_URL, data=form)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise PostStatusError(f"Status update failed: {e}") from e

        self.log.debug("update status response %s", resp.text)
        session.posted = True
