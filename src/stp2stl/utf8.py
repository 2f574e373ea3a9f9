"""
utf8.py
-------

Strict UTF-8 validation for paths handed across the library boundary.
"""

import os
from typing import Union

PathArg = Union[str, bytes, bytearray, os.PathLike]


def _is_cont(data: bytes, index: int) -> bool:
    return index < len(data) and 0x80 <= data[index] <= 0xBF


def _in_range(data: bytes, index: int, low: int, high: int) -> bool:
    return index < len(data) and low <= data[index] <= high


def is_valid_utf8(data: bytes) -> bool:
    """
    Check that `data` is well-formed UTF-8.

    Overlong forms, encoded surrogates (U+D800..U+DFFF), code points
    above U+10FFFF, stray continuation bytes and sequences truncated
    at the end of input are all rejected. NUL bytes are valid.

    Parameters
    ----------
    data : bytes
        Raw byte sequence, any content.

    Returns
    -------
    valid : bool
        True if every byte belongs to a well-formed sequence.
    """
    n = len(data)
    i = 0
    while i < n:
        c0 = data[i]

        if c0 <= 0x7F:
            i += 1
        elif 0xC2 <= c0 <= 0xDF:
            if not _is_cont(data, i + 1):
                return False
            i += 2
        elif 0xE0 <= c0 <= 0xEF:
            if c0 == 0xE0:
                # no overlong 3-byte forms
                second = _in_range(data, i + 1, 0xA0, 0xBF)
            elif c0 == 0xED:
                # no surrogates
                second = _in_range(data, i + 1, 0x80, 0x9F)
            else:
                second = _is_cont(data, i + 1)
            if not (second and _is_cont(data, i + 2)):
                return False
            i += 3
        elif 0xF0 <= c0 <= 0xF4:
            if c0 == 0xF0:
                # no overlong 4-byte forms
                second = _in_range(data, i + 1, 0x90, 0xBF)
            elif c0 == 0xF4:
                # nothing above U+10FFFF
                second = _in_range(data, i + 1, 0x80, 0x8F)
            else:
                second = _is_cont(data, i + 1)
            if not (second and _is_cont(data, i + 2) and _is_cont(data, i + 3)):
                return False
            i += 4
        else:
            # continuation byte in lead position, 0xC0, 0xC1 or 0xF5..0xFF
            return False

    return True


def as_utf8_bytes(path: PathArg) -> bytes:
    """
    Get the byte form of a path argument without validating it.

    Strings are encoded with `surrogatepass` so lone surrogates come
    through as the bytes the validator rejects rather than raising here.
    """
    if isinstance(path, (bytes, bytearray)):
        return bytes(path)
    path = os.fspath(path)
    if isinstance(path, bytes):
        return path
    return path.encode("utf-8", "surrogatepass")


__all__ = ["is_valid_utf8", "as_utf8_bytes"]
