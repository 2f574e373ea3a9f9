"""
errors.py
---------

Status codes returned by `stp2stl.convert` and the exceptions
used internally to carry them up to the conversion boundary.
"""

from enum import IntEnum


class Status(IntEnum):
    """Numeric result of a conversion call."""

    OK = 0
    NULL_PATH = 1
    EMPTY_PATH = 2
    INVALID_UTF8 = 3
    INVALID_OPTIONS = 4
    READ_FAILED = 10
    TRANSFER_FAILED = 11
    EMPTY_SHAPE = 12
    WRITE_FAILED = 20
    KERNEL_EXCEPTION = 100
    UNKNOWN_EXCEPTION = 101


class ConversionError(Exception):
    """
    Base class for every failure `convert` knows how to report.

    Subclasses pin `status`; the message becomes the diagnostic
    returned by `last_error()`.
    """

    status = Status.UNKNOWN_EXCEPTION


class NullPathError(ConversionError):
    status = Status.NULL_PATH


class EmptyPathError(ConversionError):
    status = Status.EMPTY_PATH


class InvalidPathEncodingError(ConversionError):
    status = Status.INVALID_UTF8


class InvalidOptionsError(ConversionError):
    status = Status.INVALID_OPTIONS


class LoadError(ConversionError):
    """The input could not be turned into a shape."""

    status = Status.READ_FAILED


class ReadError(LoadError):
    status = Status.READ_FAILED


class TransferError(LoadError):
    status = Status.TRANSFER_FAILED


class EmptyShapeError(LoadError):
    status = Status.EMPTY_SHAPE


class WriteError(ConversionError):
    status = Status.WRITE_FAILED


class KernelError(ConversionError):
    """
    The geometry kernel raised while processing.

    Raised by kernel adapters in place of the native exception so the
    pipeline never has to know which kernel is in use.
    """

    status = Status.KERNEL_EXCEPTION


__all__ = [
    "Status",
    "ConversionError",
    "NullPathError",
    "EmptyPathError",
    "InvalidPathEncodingError",
    "InvalidOptionsError",
    "LoadError",
    "ReadError",
    "TransferError",
    "EmptyShapeError",
    "WriteError",
    "KernelError",
]
