from typing import Optional

__all__ = (
    'HTTPacketException',
    'InvalidArgument',
    'InvalidSetting',
    'EncodingError',
)

class HTTPacketException(Exception):
    """Base inheritance class for errors raised while building a request."""

class InvalidArgument(HTTPacketException, ValueError):
    """Raised when a method, path, header or protocol is malformed."""

class InvalidSetting(HTTPacketException, ValueError):
    """Raised when a :class:`~httpacket.Settings` value is invalid."""

class EncodingError(HTTPacketException, UnicodeError):
    """
    Raised when text cannot be converted to or from bytes with the configured encoding.

    Attributes
    ----------
    encoding: :class:`str`
        The encoding that failed.
    """
    def __init__(self, encoding: str, reason: Optional[str] = None) -> None:
        self.encoding = encoding
        self.reason = reason

        message = f'Could not convert text using {encoding!r}'
        if reason:
            message += f': {reason}'

        super().__init__(message)
