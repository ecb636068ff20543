from typing import Any, Dict, Optional, TypedDict, Union
import importlib
import os

from .utils import (
    DEFAULT_ACCEPT_CHARSET,
    DEFAULT_ENCODING,
    DEFAULT_PROTOCOL,
    SETTING_ENV_PREFIX,
    SUPPORTED_PROTOCOLS,
    default_user_agent,
    is_valid_encoding,
    loads,
)
from .errors import InvalidSetting
from .types import StrPath

__all__ = (
    'Settings',
)

class SettingsDict(TypedDict):
    protocol: str
    user_agent: str
    accept_charset: str
    encoding: str

class Settings:
    """
    The defaults applied to every :class:`~httpacket.RequestBuilder` created with them.

    Parameters
    ----------
    protocol: Optional[:class:`str`]
        The protocol version put in the request line. Defaults to ``HTTP/1.1``.
    user_agent: Optional[:class:`str`]
        The default ``User-Agent`` header. Defaults to ``Python/<version>``.
    accept_charset: Optional[:class:`str`]
        The default ``Accept-Charset`` header.
    encoding: Optional[:class:`str`]
        The encoding used for text bodies and serialization. Defaults to ``utf-8``.
    """
    __slots__ = (
        'protocol', 'user_agent', 'accept_charset', 'encoding'
    )

    def __init__(
        self,
        *,
        protocol: Optional[str] = None,
        user_agent: Optional[str] = None,
        accept_charset: Optional[str] = None,
        encoding: Optional[str] = None
    ):
        if protocol is not None:
            if protocol not in SUPPORTED_PROTOCOLS:
                raise InvalidSetting(f'protocol must be one of {SUPPORTED_PROTOCOLS!r}')
        else:
            protocol = DEFAULT_PROTOCOL
        self.protocol = protocol

        if user_agent is not None:
            if not isinstance(user_agent, str):
                raise InvalidSetting('user_agent must be a str')
        else:
            user_agent = default_user_agent()
        self.user_agent = user_agent

        if accept_charset is not None:
            if not isinstance(accept_charset, str):
                raise InvalidSetting('accept_charset must be a str')
        else:
            accept_charset = DEFAULT_ACCEPT_CHARSET
        self.accept_charset = accept_charset

        if encoding is not None:
            if not isinstance(encoding, str) or not is_valid_encoding(encoding):
                raise InvalidSetting(f'{encoding!r} is not a known encoding')
        else:
            encoding = DEFAULT_ENCODING
        self.encoding = encoding

    def __repr__(self) -> str:
        return '<Settings protocol={0.protocol!r} encoding={0.encoding!r}>'.format(self)

    def __getitem__(self, item: str):
        try:
            return self.__getattribute__(item)
        except AttributeError:
            raise KeyError(item) from None

    def __setitem__(self, key: str, value: Any) -> None:
        if key not in self.__slots__:
            raise KeyError(key)

        self.update(**{key: value})

    @classmethod
    def from_env(cls):
        kwargs = {}
        env = os.environ
        settings = cls.__slots__

        for setting in settings:
            name = SETTING_ENV_PREFIX + setting.upper()
            kwargs[setting] = env.get(name)

        return cls(**kwargs)

    @classmethod
    def from_file(cls, path: StrPath):
        module = importlib.import_module(str(path))

        kwargs = {}
        settings = cls.__slots__

        for setting in settings:
            value = getattr(module, setting.casefold(), None)
            kwargs[setting] = value

        return cls(**kwargs)

    @classmethod
    def from_json(cls, data: Union[StrPath, Dict[str, Any]]):
        if isinstance(data, (str, os.PathLike)):
            try:
                with open(data, 'r') as f:
                    value = loads(f.read())
            except OSError as exc:
                raise InvalidSetting(f'Could not read settings from {str(data)!r}: {exc.strerror}') from exc
            except ValueError as exc:
                raise InvalidSetting(f'{str(data)!r} is not valid JSON') from exc
        else:
            value = data

        if not isinstance(value, dict):
            raise InvalidSetting(f'Expected a JSON object but got {value.__class__.__name__} instead')

        unknown = set(value) - set(cls.__slots__)
        if unknown:
            raise InvalidSetting(f'Unknown settings: {", ".join(sorted(unknown))}')

        return cls(**value)

    def update(
        self,
        *,
        protocol: Optional[str] = None,
        user_agent: Optional[str] = None,
        accept_charset: Optional[str] = None,
        encoding: Optional[str] = None
    ) -> None:
        # a bad value leaves self untouched
        updated = Settings(
            protocol=protocol if protocol is not None else self.protocol,
            user_agent=user_agent if user_agent is not None else self.user_agent,
            accept_charset=accept_charset if accept_charset is not None else self.accept_charset,
            encoding=encoding if encoding is not None else self.encoding,
        )

        for setting in self.__slots__:
            setattr(self, setting, getattr(updated, setting))

    def to_dict(self) -> SettingsDict:
        return {
            'protocol': self.protocol,
            'user_agent': self.user_agent,
            'accept_charset': self.accept_charset,
            'encoding': self.encoding
        }
