__version__ = '0.1.0'

from .enums import *
from .errors import *
from .headers import *
from .settings import *
from .request import *
from .utils import parse_request
