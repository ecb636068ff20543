from typing import NamedTuple, Union, Iterable, Tuple, Mapping
from os import PathLike

BytesLike = Union[bytes, bytearray, memoryview]
Body = Union[str, BytesLike]
StrPath = Union[str, 'PathLike[str]']
HeadersLike = Union[Mapping[str, str], Iterable[Tuple[str, str]]]

class Header(NamedTuple):
    name: str
    value: str

class RequestLine(NamedTuple):
    method: str
    path: str
    protocol: str
