"""Exception types for SharePoint Uploader (spupload).

Errors come in two scopes. Run-scoped errors (preconditions, authentication,
destination lookup) stop the run before any file is touched. File-scoped
errors derive from ``UploadError``; they fail one file and leave the others
running.
"""


class SharePointUploadError(Exception):
    """Base exception for all spupload errors.

    ``raw_response`` keeps the server body, when there is one, so the
    operator can see exactly what Graph answered.
    """

    def __init__(self, message, raw_response=None):
        super().__init__(message)
        self.message = message
        self.raw_response = raw_response


class PreconditionError(SharePointUploadError):
    """Raised when the run cannot start (bad input files, no connectivity)."""


class ConfigurationError(PreconditionError):
    """Raised when settings are missing, placeholders, or out of range."""

    def __init__(self, message, missing=None):
        super().__init__(message)
        self.missing = list(missing or [])


class AuthError(SharePointUploadError):
    """Raised when no access token can be acquired."""


class ResolutionError(SharePointUploadError):
    """Raised when the SharePoint site or drive cannot be found."""


class UploadError(SharePointUploadError):
    """Base class for failures that only affect one file."""

    def __init__(self, message, raw_response=None, file_name=None):
        super().__init__(message, raw_response)
        self.file_name = file_name


class SimpleUploadError(UploadError):
    """Raised when a single-request upload fails."""


class SessionCreationError(UploadError):
    """Raised when Graph does not hand out a usable upload session."""


class ChunkUploadError(UploadError):
    """Raised when one byte range of an upload session is rejected.

    Covers transport failures as well as error payloads returned with a
    successful HTTP status.
    """

    def __init__(
        self,
        message,
        byte_range=None,
        status_code=None,
        error_code=None,
        raw_response=None,
        file_name=None,
    ):
        super().__init__(message, raw_response, file_name)
        self.byte_range = byte_range
        self.status_code = status_code
        self.error_code = error_code


class AmbiguousCompletionError(UploadError):
    """Raised when every chunk was accepted but no item URL came back."""


class EmptyUploadError(UploadError):
    """Raised when an upload session is asked to send a zero-byte file."""


class TruncatedFileError(UploadError, IOError):
    """Raised when a file is shorter than the byte range being read."""

    def __init__(self, message, file_path=None, expected=None, actual=None, file_name=None):
        UploadError.__init__(self, message, file_name=file_name)
        self.file_path = file_path
        self.expected = expected
        self.actual = actual
