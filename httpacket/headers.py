from __future__ import annotations

from typing import Dict, Iterator, List, MutableMapping, Optional
from collections.abc import Mapping

from .types import Header, HeadersLike
from . import utils

__all__ = 'Headers',

class Headers(MutableMapping[str, str]):
    """
    An ordered, case-insensitive mapping of header fields.

    Every name appears at most once. Assigning to an existing name replaces its
    value in place, so a field keeps the position it was first added at while the
    most recently given spelling of its name is the one that gets serialized.

    Example
    -------

    .. code-block:: python

        headers = Headers({'Host': 'a'})
        headers['host'] = 'b'

        print(list(headers.items())) # [('host', 'b')]

    Parameters
    ----------
    headers: Optional[Union[Mapping[:class:`str`, :class:`str`], Iterable[Tuple[:class:`str`, :class:`str`]]]]
        The initial header fields.
    """
    def __init__(self, headers: Optional[HeadersLike] = None) -> None:
        self._dict: Dict[str, Header] = {}

        if headers is not None:
            self.update(headers)

    def __repr__(self) -> str:
        return f'<Headers {self.to_list()!r}>'

    def __setitem__(self, name: str, value: str) -> None:
        """
        Sets a header field, replacing any previous value.

        Raises
        ------
        :exc:`~httpacket.errors.InvalidArgument`
            If the name is not a valid token or the value contains a line break.
        """
        header = utils.validate_header(name, value)
        self._dict[name.casefold()] = header

    def __getitem__(self, name: str) -> str:
        if not isinstance(name, str):
            raise KeyError(name)

        return self._dict[name.casefold()].value

    def __delitem__(self, name: str) -> None:
        if not isinstance(name, str):
            raise KeyError(name)

        del self._dict[name.casefold()]

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False

        return name.casefold() in self._dict

    def __iter__(self) -> Iterator[str]:
        for header in self._dict.values():
            yield header.name

    def __len__(self) -> int:
        return len(self._dict)

    def update(self, *args: HeadersLike, **kwargs: str) -> None:  # type: ignore
        """
        Sets several header fields at once. Nothing is changed if any field is invalid.
        """
        fields: List[Header] = []

        for headers in args:
            pairs = headers.items() if isinstance(headers, Mapping) else headers
            fields.extend(utils.validate_header(name, value) for name, value in pairs)

        fields.extend(utils.validate_header(name, value) for name, value in kwargs.items())

        for name, value in fields:
            self._dict[name.casefold()] = Header(name, value)

    def to_list(self) -> List[Header]:
        """
        Returns the header fields in serialization order.
        """
        return list(self._dict.values())

    def copy(self) -> Headers:
        return Headers(self.to_list())

    def encode(self, encoding: str = utils.DEFAULT_ENCODING) -> bytes:
        """
        Encodes every field as a ``Name: value`` line terminated by CRLF.

        Parameters
        ----------
        encoding: :class:`str`
            The encoding to use.
        """
        lines = [f'{name}: {value}' for name, value in self._dict.values()]
        return b''.join(utils.encode(line, encoding) + utils.CRLF for line in lines)

    @property
    def user_agent(self) -> Optional[str]:
        return self.get('User-Agent')

    @property
    def accept_charset(self) -> Optional[str]:
        return self.get('Accept-Charset')

    @property
    def host(self) -> Optional[str]:
        return self.get('Host')

    @property
    def from_(self) -> Optional[str]:
        return self.get('From')

    @property
    def content_length(self) -> Optional[int]:
        length = self.get('Content-Length')
        if length and length.isascii() and length.isdigit():
            return int(length)

        return None
