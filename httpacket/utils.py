from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator, Optional
import codecs
import json
import platform
import re

try:
    import orjson
except ImportError:
    HAS_ORJSON = False
else:
    HAS_ORJSON = True

from .types import BytesLike, Header, RequestLine
from .errors import EncodingError, InvalidArgument

if TYPE_CHECKING:
    from .request import RequestBuilder
    from .settings import Settings

__all__ = (
    'CRLF',
    'HEADER_SEPARATOR',
    'DEFAULT_PROTOCOL',
    'DEFAULT_ACCEPT_CHARSET',
    'DEFAULT_ENCODING',
    'SUPPORTED_PROTOCOLS',
    'SETTING_ENV_PREFIX',
    'loads',
    'default_user_agent',
    'is_valid_encoding',
    'encode',
    'decode',
    'validate_path',
    'validate_header',
    'validate_protocol',
    'parse_headers',
    'parse_request_line',
    'parse_request',
)

CRLF = b'\r\n'
HEADER_SEPARATOR = b'\r\n\r\n'
DEFAULT_PROTOCOL = 'HTTP/1.1'
DEFAULT_ACCEPT_CHARSET = 'ISO-8859-1,UTF-8;q=0.7,*;q=0.7'
DEFAULT_ENCODING = 'utf-8'
SUPPORTED_PROTOCOLS = (
    'HTTP/1.0',
    'HTTP/1.1',
)
SETTING_ENV_PREFIX = 'HTTPACKET_'

# RFC 7230 token characters
TOKEN_REGEX = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
WHITESPACE_REGEX = re.compile(r'\s')

if HAS_ORJSON:
    def loads(obj: str, **kwargs: Any) -> Any:
        return orjson.loads(obj)
else:
    def loads(obj: str, **kwargs: Any) -> Any:
        return json.loads(obj, **kwargs)

def default_user_agent() -> str:
    """
    Returns the default ``User-Agent`` value, derived from the running Python version.
    """
    return f'Python/{platform.python_version()}'

def is_valid_encoding(encoding: str) -> bool:
    """
    Checks if the given name refers to a text codec that encodes ASCII
    unchanged, so request lines and CRLF separators stay byte-compatible.

    Parameters
    ----------
    encoding: :class:`str`
        The name of the encoding.
    """
    try:
        info = codecs.lookup(encoding)
    except LookupError:
        return False

    if not getattr(info, '_is_text_encoding', True):
        return False

    try:
        return info.encode('A\r\n')[0] == b'A\r\n'
    except UnicodeError:
        return False

def encode(text: str, encoding: str = DEFAULT_ENCODING) -> bytes:
    """
    Encodes text into bytes.

    Parameters
    ----------
    text: :class:`str`
        The text to encode.
    encoding: :class:`str`
        The encoding to use. Defaults to ``utf-8``.

    Raises
    ------
    :exc:`~httpacket.errors.EncodingError`
        If the text cannot be represented in the given encoding.
    """
    try:
        return text.encode(encoding)
    except (UnicodeError, LookupError) as exc:
        raise EncodingError(encoding, str(exc)) from exc

def decode(data: BytesLike, encoding: str = DEFAULT_ENCODING, *, errors: str = 'strict') -> str:
    """
    Decodes bytes into text.

    Parameters
    ----------
    data: Union[:class:`bytes`, :class:`bytearray`, :class:`memoryview`]
        The data to decode.
    encoding: :class:`str`
        The encoding to use. Defaults to ``utf-8``.
    errors: :class:`str`
        The codec error handler, e.g. ``replace``. Defaults to ``strict``.

    Raises
    ------
    :exc:`~httpacket.errors.EncodingError`
        If the data is not valid in the given encoding.
    """
    try:
        return bytes(data).decode(encoding, errors)
    except (UnicodeError, LookupError) as exc:
        raise EncodingError(encoding, str(exc)) from exc

def validate_path(path: str) -> str:
    """
    Validates a request target.

    Parameters
    ----------
    path: :class:`str`
        The request target, e.g. ``/index.html``.

    Raises
    ------
    :exc:`~httpacket.errors.InvalidArgument`
        If the path is not a string, is empty or contains whitespace.
    """
    if not isinstance(path, str):
        raise InvalidArgument(f'Expected str but got {path.__class__.__name__} instead')

    if not path:
        raise InvalidArgument('The request path must not be empty')

    if WHITESPACE_REGEX.search(path):
        raise InvalidArgument(f'{path!r} is not a valid request path')

    return path

def validate_header(name: str, value: str) -> Header:
    """
    Validates a header field so that it produces a well-formed header line.

    Parameters
    ----------
    name: :class:`str`
        The header name. Must be a non-empty token.
    value: :class:`str`
        The header value. Must not contain line breaks.

    Raises
    ------
    :exc:`~httpacket.errors.InvalidArgument`
        If the name or value is malformed.
    """
    if not isinstance(name, str) or not isinstance(value, str):
        raise InvalidArgument('Header names and values must be strings')

    if not TOKEN_REGEX.fullmatch(name):
        raise InvalidArgument(f'{name!r} is not a valid header name')

    if '\r' in value or '\n' in value:
        raise InvalidArgument(f'Header {name!r} contains a line break')

    return Header(name, value)

def validate_protocol(protocol: str) -> str:
    if protocol not in SUPPORTED_PROTOCOLS:
        raise InvalidArgument(f'Unsupported protocol {protocol!r}, expected one of {SUPPORTED_PROTOCOLS!r}')

    return protocol

def parse_headers(raw_headers: str) -> Iterator[Header]:
    for line in raw_headers.split('\r\n'):
        if not line:
            break
        name, sep, value = line.partition(':')

        if not sep:
            raise InvalidArgument(f'Malformed header line {line!r}')

        yield Header(name.strip(), value.strip())

def parse_request_line(line: str) -> RequestLine:
    parts = line.split(' ')
    if len(parts) != 3:
        raise InvalidArgument(f'Malformed request line {line!r}')

    method, path, protocol = parts
    return RequestLine(method, path, protocol)

def parse_request(data: BytesLike, *, settings: Optional[Settings] = None) -> RequestBuilder:
    """
    Parses a raw HTTP/1.x request back into a :class:`~httpacket.RequestBuilder`.

    Headers present in the raw request override the builder defaults, defaults
    the request lacks are kept.

    Parameters
    ----------
    data: Union[:class:`bytes`, :class:`bytearray`, :class:`memoryview`]
        The raw request.
    settings: Optional[:class:`~httpacket.Settings`]
        The settings of the returned builder.

    Raises
    ------
    :exc:`~httpacket.errors.InvalidArgument`
        If the request line or a header line is malformed.
    :exc:`~httpacket.errors.EncodingError`
        If the request head cannot be decoded with the settings' encoding.
    """
    from .request import RequestBuilder

    data = bytes(data)
    end = data.find(HEADER_SEPARATOR)

    if end == -1:
        head, body = data, b''
    else:
        head, body = data[:end], data[end + len(HEADER_SEPARATOR):]

    encoding = settings.encoding if settings is not None else DEFAULT_ENCODING
    text = decode(head, encoding)

    status_line, _, raw_headers = text.partition('\r\n')
    if not status_line:
        raise InvalidArgument('Missing request line')

    line = parse_request_line(status_line)
    request = RequestBuilder(line.method, line.path, settings=settings)
    request.protocol = line.protocol

    for header in parse_headers(raw_headers):
        request.with_header(header.name, header.value)

    if body:
        request.with_body(body)

    return request
