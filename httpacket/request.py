from __future__ import annotations

from typing import Optional, Union
from typing_extensions import Self
import logging

from .enums import HTTPMethod
from .headers import Headers
from .settings import Settings
from .types import Body
from . import utils

__all__ = (
    'RequestBuilder',
)

log = logging.getLogger(__name__)

class RequestBuilder:
    """
    Builds a raw HTTP/1.1 request packet.

    A builder is created for a method and a path, configured through chained
    ``with_*`` calls, and serialized with :meth:`to_bytes` or :meth:`to_text`.
    Serialization does not consume the builder and can be repeated.

    Example
    -------

    .. code-block:: python

        request = (
            RequestBuilder.post('search.php')
                .with_host('http://example.com')
                .with_from('lukebrodowski@gmail.com')
                .with_body('Some sample data.')
        )

        data = request.to_bytes()

    .. note::

        ``Content-Length`` is never computed automatically. Use
        :meth:`with_content_length` to opt in.

    Parameters
    ----------
    method: Union[:class:`str`, :class:`~httpacket.HTTPMethod`]
        The request method.
    path: :class:`str`
        The request target. Must be non-empty and free of whitespace.
    settings: Optional[:class:`~httpacket.Settings`]
        The defaults to use. A fresh :class:`~httpacket.Settings` is used if omitted.

    Raises
    ------
    :exc:`~httpacket.errors.InvalidArgument`
        If the method is not supported or the path is malformed.
    """
    def __init__(
        self,
        method: Union[str, HTTPMethod],
        path: str,
        *,
        settings: Optional[Settings] = None
    ) -> None:
        self.settings = settings or Settings()
        self._protocol = self.settings.protocol
        self._encoding = self.settings.encoding

        self._method = HTTPMethod.from_value(method)
        self._path = utils.validate_path(path)

        self._headers = Headers()
        self._body = bytearray()
        self._content_length = False

        # everything serialized later must be encodable now
        self._encode(self._path)
        self._encode(self.settings.user_agent)
        self._encode(self.settings.accept_charset)

        self._headers['User-Agent'] = self.settings.user_agent
        self._headers['Accept-Charset'] = self.settings.accept_charset

        log.debug(f'[RequestBuilder] Created a {self._method.value} request for {self._path!r}.')

    def __repr__(self) -> str:
        return '<RequestBuilder method={0.method!r} path={0.path!r} protocol={0.protocol!r}>'.format(self)

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def __str__(self) -> str:
        return self.to_text()

    @classmethod
    def create(
        cls,
        method: Union[str, HTTPMethod],
        path: str,
        *,
        settings: Optional[Settings] = None
    ) -> Self:
        """
        Creates a new request for the given method and path.

        Parameters
        ----------
        method: Union[:class:`str`, :class:`~httpacket.HTTPMethod`]
            The request method.
        path: :class:`str`
            The request target.
        settings: Optional[:class:`~httpacket.Settings`]
            The defaults to use.
        """
        return cls(method, path, settings=settings)

    @classmethod
    def options(cls, path: str, *, settings: Optional[Settings] = None) -> Self:
        return cls(HTTPMethod.OPTIONS, path, settings=settings)

    @classmethod
    def get(cls, path: str = '/', *, settings: Optional[Settings] = None) -> Self:
        """
        Creates a new ``GET`` request. The path defaults to ``/``.
        """
        return cls(HTTPMethod.GET, path, settings=settings)

    @classmethod
    def head(cls, path: str, *, settings: Optional[Settings] = None) -> Self:
        return cls(HTTPMethod.HEAD, path, settings=settings)

    @classmethod
    def post(cls, path: str, *, settings: Optional[Settings] = None) -> Self:
        return cls(HTTPMethod.POST, path, settings=settings)

    @classmethod
    def put(cls, path: str, *, settings: Optional[Settings] = None) -> Self:
        return cls(HTTPMethod.PUT, path, settings=settings)

    @classmethod
    def delete(cls, path: str, *, settings: Optional[Settings] = None) -> Self:
        return cls(HTTPMethod.DELETE, path, settings=settings)

    @classmethod
    def trace(cls, path: str, *, settings: Optional[Settings] = None) -> Self:
        return cls(HTTPMethod.TRACE, path, settings=settings)

    @classmethod
    def connect(cls, path: str, *, settings: Optional[Settings] = None) -> Self:
        return cls(HTTPMethod.CONNECT, path, settings=settings)

    @property
    def method(self) -> HTTPMethod:
        return self._method

    @property
    def path(self) -> str:
        return self._path

    @property
    def protocol(self) -> str:
        """
        The protocol version of the request line, ``HTTP/1.1`` unless changed.
        """
        return self._protocol

    @protocol.setter
    def protocol(self, value: str) -> None:
        self._protocol = utils.validate_protocol(value)

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def headers(self) -> Headers:
        """
        A copy of the current header fields, in serialization order.
        """
        return self._headers.copy()

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    def _encode(self, text: str) -> bytes:
        return utils.encode(text, self._encoding)

    def with_header(self, name: str, value: str) -> Self:
        """
        Sets a header field, replacing any previous value for the same name.

        Parameters
        ----------
        name: :class:`str`
            The header name. Names are matched case-insensitively.
        value: :class:`str`
            The header value.

        Raises
        ------
        :exc:`~httpacket.errors.InvalidArgument`
            If the name or value is malformed.
        :exc:`~httpacket.errors.EncodingError`
            If the field cannot be encoded with the builder's encoding.
        """
        header = utils.validate_header(name, value)
        self._encode(f'{header.name}: {header.value}')

        self._headers[header.name] = header.value
        return self

    def without_header(self, name: str) -> Self:
        """
        Removes a header field if present.
        """
        self._headers.pop(name, None)
        return self

    def with_host(self, host: str) -> Self:
        return self.with_header('Host', host)

    def with_from(self, email: str) -> Self:
        return self.with_header('From', email)

    def with_user_agent(self, user_agent: str) -> Self:
        return self.with_header('User-Agent', user_agent)

    def with_accept_charset(self, charset: str) -> Self:
        return self.with_header('Accept-Charset', charset)

    def with_body(self, data: Body) -> Self:
        """
        Appends data to the body. Repeated calls accumulate.

        Parameters
        ----------
        data: Union[:class:`str`, :class:`bytes`, :class:`bytearray`, :class:`memoryview`]
            The data to append. Strings are encoded with the builder's encoding.

        Raises
        ------
        :exc:`TypeError`
            If the data is neither text nor bytes-like.
        :exc:`~httpacket.errors.EncodingError`
            If a string cannot be encoded.
        """
        if isinstance(data, str):
            data = self._encode(data)
        elif not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f'Expected str or bytes-like object but got {data.__class__.__name__} instead')

        self._body.extend(data)
        return self

    def with_content_length(self, enabled: bool = True) -> Self:
        """
        Toggles emitting a ``Content-Length`` header computed from the body at
        serialization time. A ``Content-Length`` set through :meth:`with_header`
        always takes precedence.
        """
        self._content_length = enabled
        return self

    def copy(self) -> Self:
        """
        Returns an independent builder with the same state.
        """
        request = self.__class__.__new__(self.__class__)

        request._method = self._method
        request._path = self._path
        request.settings = self.settings
        request._protocol = self._protocol
        request._encoding = self._encoding
        request._headers = self._headers.copy()
        request._body = bytearray(self._body)
        request._content_length = self._content_length

        return request

    def _build_headers(self) -> Headers:
        headers = self._headers
        if self._content_length and 'Content-Length' not in headers:
            headers = headers.copy()
            headers['Content-Length'] = str(len(self._body))

        return headers

    def to_bytes(self) -> bytes:
        """
        Serializes the request into a raw packet.

        The packet consists of the request line, one line per header field in
        insertion order, an empty line and the body. Every line ends with CRLF.
        """
        request_line = f'{self._method.value} {self._path} {self._protocol}'

        packet = bytearray(self._encode(request_line))
        packet += utils.CRLF
        packet += self._build_headers().encode(self._encoding)
        packet += utils.CRLF
        packet += self._body

        log.debug(f'[RequestBuilder] Serialized {request_line!r} into {len(packet)} bytes.')
        return bytes(packet)

    def to_text(self) -> str:
        """
        Serializes the request and decodes it with the builder's encoding.

        Body bytes that are not valid in the encoding are replaced with U+FFFD.
        """
        return utils.decode(self.to_bytes(), self._encoding, errors='replace')
