from .api import *
from .connection import *
