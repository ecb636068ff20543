from __future__ import annotations

from typing import Union
import enum

from .errors import InvalidArgument

__all__ = (
    'HTTPMethod',
)

class HTTPMethod(str, enum.Enum):
    """
    The request methods defined by HTTP/1.1.
    """
    OPTIONS = 'OPTIONS'
    GET = 'GET'
    HEAD = 'HEAD'
    POST = 'POST'
    PUT = 'PUT'
    DELETE = 'DELETE'
    TRACE = 'TRACE'
    CONNECT = 'CONNECT'

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_value(cls, value: Union[str, HTTPMethod]) -> HTTPMethod:
        """
        Converts a string or an :class:`HTTPMethod` into an :class:`HTTPMethod`.

        Parameters
        ----------
        value: Union[:class:`str`, :class:`HTTPMethod`]
            The method. Strings are matched case-insensitively.

        Raises
        ------
        :exc:`~httpacket.errors.InvalidArgument`
            If the value does not name a supported method.
        """
        if isinstance(value, cls):
            return value

        if not isinstance(value, str):
            raise InvalidArgument(f'Expected str or HTTPMethod but got {value.__class__.__name__} instead')

        try:
            return cls(value.upper())
        except ValueError:
            raise InvalidArgument(f'{value!r} is not a supported HTTP method') from None
