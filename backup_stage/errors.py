"""Errors raised by the backup stage.

Every failure is terminal for the process. The core raises these; only the
CLI turns them into an error line and a non-zero exit.
"""


class StageError(Exception):
    """Base class for all backup stage failures."""


class ConfigLoadError(StageError):
    """Required environment variables are missing or malformed."""


class StdinReadError(StageError):
    """Standard input could not be read or decoded."""


class StoreConnectError(StageError):
    """The backup record store could not be reached."""


class StoreDisconnectError(StageError):
    """Closing the backup record store connection failed."""


class BackupUploadError(StageError):
    """A file could not be uploaded to object storage.

    ``uploaded`` holds the descriptors of files written before the failure.
    Those objects are left in place.
    """

    def __init__(self, message: str, uploaded=None):
        super().__init__(message)
        self.uploaded = list(uploaded or [])


class RecordInsertError(StageError):
    """The backup record could not be inserted."""
