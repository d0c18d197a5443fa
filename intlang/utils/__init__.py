from .lazy import *
from .rate import *
