"""
kernel.py
---------

The narrow set of geometry operations the conversion pipeline needs,
and their OpenCASCADE implementation through the OCP bindings.

Any object with `load`, `scale`, `tessellate` and `write` methods
matching `Kernel` can be passed to `stp2stl.convert`.
"""

import functools
import logging
from importlib import metadata
from typing import Any, Protocol

from OCP.BRepBuilderAPI import BRepBuilderAPI_Transform
from OCP.BRepMesh import BRepMesh_IncrementalMesh
from OCP.gp import gp_Pnt, gp_Trsf
from OCP.IFSelect import IFSelect_RetDone
from OCP.STEPControl import STEPControl_Reader
from OCP.StlAPI import StlAPI_Writer

from .errors import EmptyShapeError, KernelError, ReadError, TransferError
from .options import TessellationParams

log = logging.getLogger(__name__)

# Distribution providing the OCP bindings
KERNEL_DISTRIBUTION = "cadquery-ocp"


def kernel_version() -> str:
    """Version of the installed OCP bindings, which track OCCT releases."""
    try:
        return metadata.version(KERNEL_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return "unknown"


class Kernel(Protocol):
    """Geometry operations used by the pipeline. Shapes are opaque."""

    def load(self, path: str) -> Any:
        """Read a model file, raising a `LoadError` subclass on failure."""

    def scale(self, shape: Any, factor: float) -> Any:
        """Return a copy of `shape` scaled uniformly about the origin."""

    def tessellate(self, shape: Any, params: TessellationParams) -> Any:
        """Triangulate `shape` and return the shape carrying the mesh."""

    def write(self, shape: Any, path: str, binary: bool) -> bool:
        """Write the triangulated shape as STL, returning writer success."""


def _is_occt_failure(exc: BaseException) -> bool:
    # OCP exceptions derive directly from Exception, one class each
    return type(exc).__module__.startswith("OCP.")


def _translate_failures(func):
    """Re-raise OCCT failures as `KernelError` keeping their message."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as exc:
            if not _is_occt_failure(exc):
                raise
            message = str(exc) or type(exc).__name__
            raise KernelError(f"OCCT exception: {message}") from exc

    return wrapper


class OcctKernel:
    """`Kernel` backed by OpenCASCADE."""

    @_translate_failures
    def load(self, path: str):
        reader = STEPControl_Reader()
        status = reader.ReadFile(path)
        if status != IFSelect_RetDone:
            raise ReadError("STEP read failed: ReadFile returned non-success status")

        if not reader.TransferRoots():
            raise TransferError("STEP read failed: TransferRoots failed")

        shape = reader.OneShape()
        if shape.IsNull():
            raise EmptyShapeError("STEP read failed: resulting shape is null")
        return shape

    @_translate_failures
    def scale(self, shape, factor: float):
        trsf = gp_Trsf()
        trsf.SetScale(gp_Pnt(0.0, 0.0, 0.0), factor)
        # copy geometry so the source shape is left untouched
        return BRepBuilderAPI_Transform(shape, trsf, True).Shape()

    @_translate_failures
    def tessellate(self, shape, params: TessellationParams):
        mesher = BRepMesh_IncrementalMesh(
            shape,
            params.linear_deflection,
            params.relative,
            params.angular_deflection,
            params.parallel,
        )
        if not mesher.IsDone():
            log.warning("mesher did not report completion")
        return shape

    @_translate_failures
    def write(self, shape, path: str, binary: bool) -> bool:
        writer = StlAPI_Writer()
        writer.ASCIIMode = not binary
        return bool(writer.Write(shape, path))


__all__ = ["Kernel", "OcctKernel", "kernel_version", "KERNEL_DISTRIBUTION"]
