"""
post_twitter.py — Post a video to Twitter via the chunked media upload API.

Requires TWITTER_CONSUMER_KEY, TWITTER_CONSUMER_SECRET, TWITTER_ACCESS_TOKEN
and TWITTER_ACCESS_SECRET in .env (or the environment).

A failed upload is printed as "Upload Failure: ..." and still exits 0; only
setup problems (credentials, subcommand, missing file argument) exit 1.

Usage:
    python tools/post_twitter.py upload -s "status text" <video_path>
    python tools/post_twitter.py upload -d <video_path>     # debug logging
"""

import argparse
import logging
import sys
from pathlib import Path

from config import (
    LOGGER_NAME, VIDEO_EXTENSIONS, get_logger, load_credentials, missing_credentials,
)
from twitter_client import make_client
from twitter_upload import VideoUploader, read_video
from upload_errors import CredentialError, UploadError


def post_video(video_path: str, status: str, client=None,
               logger: logging.Logger | None = None) -> dict:
    """
    Upload a video to Twitter and tweet it.

    Args:
        video_path: Local path to the video file
        status: The tweet text
        client: Signed TwitterClient; built from the environment if omitted
        logger: Logger handed to the uploader

    Returns:
        dict with keys: success, platform, media_id and posted (or error)
    """
    logger = logger or logging.getLogger(LOGGER_NAME)
    owns_client = client is None

    try:
        if owns_client:
            client = make_client(*load_credentials())

        payload = read_video(video_path)
        if Path(video_path).suffix.lower() not in VIDEO_EXTENSIONS:
            logger.warning("%s does not look like a video file, uploading as video/mp4", video_path)

        session = VideoUploader(client, logger=logger).upload_video(payload, status)
    except UploadError as e:
        return {"success": False, "platform": "twitter", "error": str(e)}
    finally:
        if owns_client and client is not None:
            client.close()

    return {"success": True, "platform": "twitter",
            "media_id": str(session.media_id), "posted": session.posted}


def build_upload_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="post_twitter.py upload",
        description="Upload a video to Twitter and post it with a status.",
    )
    parser.add_argument("-s", dest="status", default="", help="Status to tweet")
    parser.add_argument("-d", dest="debug", action="store_true", help="Enable debug logging")
    parser.add_argument("videos", nargs="*", metavar="video", help="Video file to upload")
    return parser


def main(argv: list[str] | None = None):
    argv = sys.argv[1:] if argv is None else argv

    if missing_credentials():
        print("Consumer key/secret and Access token/secret required. "
              "These must be saved as environment variables.")
        sys.exit(1)

    if not argv or argv[0] != "upload":
        print("expected 'upload' subcommand")
        sys.exit(1)

    args = build_upload_parser().parse_args(argv[1:])
    logger = get_logger(args.debug)

    if len(args.videos) != 1:
        logger.error("please include a video to upload")
        sys.exit(1)

    try:
        client = make_client(*load_credentials())
    except CredentialError as e:
        print(f"Upload Failure: {e}")
        sys.exit(1)

    try:
        result = post_video(args.videos[0], args.status, client=client, logger=logger)
    finally:
        client.close()

    if result["success"]:
        print(f"Success! Media ID: {result['media_id']}")
    else:
        print(f"Upload Failure: {result['error']}")
    sys.exit(0)


if __name__ == "__main__":
    main()
