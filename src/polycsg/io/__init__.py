"""I/O utilities for polyCSG."""

from .codec import FormatError, from_json, from_structure, to_json, to_structure
from .obj import read_obj, write_obj
from .off import read_off, write_off
from .stl import import_stl, read_stl, write_stl

__all__ = ['FormatError', 'to_structure', 'from_structure', 'to_json', 'from_json',
           'write_stl', 'read_stl', 'import_stl', 'write_obj', 'read_obj',
           'write_off', 'read_off']
