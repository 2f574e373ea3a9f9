"""
stp2stl - Convert STEP files to STL using OpenCASCADE.

This module converts a BREP solid model (STEP) into a
triangulated STL mesh, binary or ASCII.
"""

from ._version import __version__
from .errors import Status
from .options import ConversionOptions, TessellationParams, default_options
from .pipeline import convert, last_error, version
from .utf8 import is_valid_utf8

__all__ = [
    # Conversion
    "convert",
    "Status",
    # Options
    "ConversionOptions",
    "TessellationParams",
    "default_options",
    # Diagnostics
    "last_error",
    "version",
    "__version__",
    # Path validation
    "is_valid_utf8",
]
