"""
pipeline.py
-----------

Convert a STEP file into an STL mesh.

`convert` never raises for a failed conversion: it returns a `Status`
and leaves a diagnostic message for the calling thread, readable with
`last_error()` until that thread's next `convert` call.
"""

import logging
import os
import tempfile
import threading
from typing import Optional, Tuple

from ._version import __version__
from .errors import (
    ConversionError,
    EmptyPathError,
    InvalidOptionsError,
    InvalidPathEncodingError,
    NullPathError,
    Status,
    WriteError,
)
from .kernel import Kernel, OcctKernel, kernel_version
from .options import ConversionOptions, TessellationParams, default_options
from .utf8 import PathArg, as_utf8_bytes, is_valid_utf8

log = logging.getLogger(__name__)

_VERSION = f"stp2stl/{__version__} (OCCT {kernel_version()})"

# one diagnostic slot per calling thread
_state = threading.local()

_default_kernel = OcctKernel()


def last_error() -> str:
    """Diagnostic from the last failed `convert` on this thread, or ''."""
    return getattr(_state, "message", "")


def version() -> str:
    """Library and kernel version, e.g. 'stp2stl/0.1.0 (OCCT 7.8.1.1)'."""
    return _VERSION


def _set_error(message: str) -> None:
    _state.message = message


def _check_paths(*paths: Optional[PathArg]) -> Tuple[str, ...]:
    """Validate path arguments and decode them to str."""
    if any(p is None for p in paths):
        raise NullPathError("Null parameter")

    raw = [as_utf8_bytes(p) for p in paths]
    if not all(raw):
        raise EmptyPathError("Empty path")
    if not all(is_valid_utf8(r) for r in raw):
        raise InvalidPathEncodingError("Invalid UTF-8 path")

    return tuple(r.decode("utf-8") for r in raw)


def _partial_path(target: str) -> str:
    """
    Reserve a short, unique, hidden name next to `target`.

    The name is released again before returning so that a writer
    which silently produces nothing leaves no file behind.
    """
    try:
        fd, partial = tempfile.mkstemp(
            dir=os.path.dirname(target) or None, prefix=".stp2stl-", suffix=".partial"
        )
    except OSError as exc:
        raise WriteError(f"STL write failed: {exc}") from exc
    os.close(fd)
    os.remove(partial)
    return partial


def _write(kernel: Kernel, shape, target: str, binary: bool) -> None:
    """
    Write `shape` next to `target` then move it into place.

    The destination is only replaced by a file that was written and
    can be opened, so a failure never leaves partial output there.
    A symlinked destination is written through, not replaced.
    """
    target = os.path.realpath(target)
    partial = _partial_path(target)
    try:
        if not kernel.write(shape, partial, binary):
            raise WriteError("STL write failed: writer reported failure")
        try:
            os.replace(partial, target)
        except FileNotFoundError:
            raise WriteError("STL write failed: output file not created") from None
        except OSError as exc:
            raise WriteError(f"STL write failed: {exc}") from exc

        try:
            with open(target, "rb"):
                pass
        except OSError:
            raise WriteError("STL write failed: output file not created") from None
    finally:
        if os.path.lexists(partial):
            os.remove(partial)


def _convert(
    input_path: Optional[PathArg],
    output_path: Optional[PathArg],
    options: Optional[ConversionOptions],
    kernel: Optional[Kernel],
) -> None:
    source, target = _check_paths(input_path, output_path)

    if options is None:
        options = default_options()
    problem = options.validate()
    if problem is not None:
        raise InvalidOptionsError(f"Invalid options: {problem}")

    if kernel is None:
        kernel = _default_kernel

    log.debug("loading %s", source)
    shape = kernel.load(source)

    # skipped rather than applied as an identity transform
    if options.scale != 1.0:
        log.debug("scaling by %g", options.scale)
        shape = kernel.scale(shape, options.scale)

    params = TessellationParams.from_options(options)
    log.debug("tessellating with %s", params)
    shape = kernel.tessellate(shape, params)

    log.debug(
        "writing %s STL to %s", "binary" if options.binary_output else "ASCII", target
    )
    _write(kernel, shape, target, options.binary_output)


def convert(
    input_path: Optional[PathArg],
    output_path: Optional[PathArg],
    options: Optional[ConversionOptions] = None,
    kernel: Optional[Kernel] = None,
) -> Status:
    """
    Convert a STEP file to STL.

    Parameters
    ----------
    input_path : str, bytes or os.PathLike
        Path of the STEP file. Bytes must be UTF-8.
    output_path : str, bytes or os.PathLike
        Path of the STL file to create or replace. Bytes must be UTF-8.
    options : ConversionOptions or None
        Tessellation and output settings, defaults if None.
    kernel : Kernel or None
        Geometry kernel to use, OpenCASCADE if None.

    Returns
    -------
    status : Status
        `Status.OK` on success. On failure `last_error()` describes
        what went wrong.
    """
    _set_error("")
    try:
        _convert(input_path, output_path, options, kernel)
    except ConversionError as exc:
        _set_error(str(exc))
        log.warning("conversion failed (%d): %s", exc.status, exc)
        return exc.status
    except Exception as exc:
        message = f"Unknown exception: {exc}" if str(exc) else "Unknown exception"
        _set_error(message)
        log.warning(
            "conversion failed (%d): %s",
            Status.UNKNOWN_EXCEPTION,
            message,
            exc_info=True,
        )
        return Status.UNKNOWN_EXCEPTION

    log.debug("wrote %s", output_path)
    return Status.OK


__all__ = ["convert", "last_error", "version"]
