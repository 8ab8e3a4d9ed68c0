"""
Error conditions raised by the registration services.
"""


class RegistrationError(Exception):
    """Base class for gateway errors surfaced to callers."""
    pass


class InvalidRequest(RegistrationError):
    """Raised when a required request field is missing or malformed."""
    pass


class Forbidden(RegistrationError):
    """Raised when a non-administrator calls an administrator-only operation."""
    pass


class StorageUnavailable(RegistrationError):
    """Raised when the backing database cannot be read or written."""
    pass


class MirrorServerError(Exception):
    """Raised when the spreadsheet API answers with a 5xx status."""
    pass
