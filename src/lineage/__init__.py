"""
Lineage class composition

Build constructible Classes that inherit from at most one parent, chain
same-named methods along the inheritance line, and optionally track their
instances and give them publish/subscribe events.
"""

__version__ = "0.1.0"


from ._error import *
from ._method import *
from ._registry import *
from ._events import *
from ._instance import *
from ._class import *
