"""Custom exception classes for the upload and mint pipeline."""

from typing import Optional


class MinterError(Exception):
    """
    Base exception class for all pipeline errors.
    """
    pass


class UninitializedError(MinterError):
    """
    Raised when a required collaborator (ledger client, active account,
    target collection) is missing.
    """
    pass


class ConfigurationError(MinterError, ValueError):
    """
    Raised when a CLI configuration value is out of range or unparseable.
    """
    pass


class MintConfigValidationError(MinterError, ValueError):
    """
    Raised when a mint configuration is malformed.
    """

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []


class FileReadError(MinterError, OSError):
    """
    Raised when the source file cannot be fully read.
    """
    pass


class MissingHeaderMappingError(MinterError):
    """
    Raised when no encoded header is registered for a media type.
    """

    def __init__(self, media_type: str):
        super().__init__(f"No encoded header registered for media type '{media_type}'")
        self.media_type = media_type


class ChainCallFailureError(MinterError):
    """
    Raised when a ledger call was rejected or could not be confirmed.
    """

    def __init__(self, message: str, op_hash: Optional[str] = None):
        super().__init__(message)
        self.op_hash = op_hash


class AmbiguousExistenceCheckError(MinterError):
    """
    Raised when an existence view failed for a reason other than a revert,
    so the pipeline cannot tell whether the record exists.
    """

    def __init__(self, subject: str, cause: Exception):
        super().__init__(f"Existence check for {subject} failed: {cause}")
        self.subject = subject
        self.cause = cause


class AmbiguousSubmissionError(MinterError):
    """
    Raised when a batch was handed to the ledger but its outcome is unknown.
    The mint may or may not have happened; inspect the operation hash.
    """

    def __init__(self, message: str, op_hash: Optional[str] = None):
        super().__init__(message)
        self.op_hash = op_hash
