"""
upload_errors.py — Error types raised by the Twitter video uploader.

Every failure of the upload pipeline is an UploadError subclass, so callers
can catch the whole family or a single phase.
"""


class UploadError(Exception):
    """Base class for all upload failures."""


class CredentialError(UploadError):
    """The signed client could not be built from the given credentials."""


class FileReadError(UploadError):
    """The video file is missing or unreadable."""


class InitError(UploadError):
    """INIT failed or returned no usable media_id."""


class AppendError(UploadError):
    """An APPEND segment failed; the upload must restart from segment 0."""


class FinalizeError(UploadError):
    """FINALIZE failed or returned an unparseable body."""


class StatusError(UploadError):
    """A STATUS request could not be completed."""


class ProcessingFailedError(UploadError):
    """Twitter reported the media processing job as failed."""


class MaxAttemptsError(UploadError):
    """Processing did not finish within the status poll budget."""


class ProtocolError(UploadError):
    """A response did not have the expected shape."""


class PostStatusError(UploadError):
    """The tweet referencing the uploaded media could not be posted."""
