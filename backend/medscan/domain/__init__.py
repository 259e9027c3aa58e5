"""
Domain Layer

Pure business logic with no external dependencies.
Contains entities, value objects, ports (interfaces), and domain services.
"""

from .entities import *
from .value_objects import *
from .ports import *
from .exceptions import *
