"""
Conversion parameters and the tessellation settings derived from them.
"""

import dataclasses
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

# Degrees to radians for the angular deflection
DEG_TO_RAD = math.pi / 180.0


@dataclass(frozen=True)
class ConversionOptions:
    """Parameters for a single STEP to STL conversion."""

    # Max distance between the true surface and its triangulation
    linear_deflection: float = 0.001
    # Max angle between adjacent facet normals, in degrees
    angular_deflection: float = 20.0
    # Scale linear_deflection by each entity's size instead of using it as-is
    relative_deflection: bool = True
    # Binary STL if True, ASCII STL otherwise
    binary_output: bool = True
    # Uniform scale about the origin applied before tessellation
    scale: float = 1.0
    # Let the kernel mesh faces on several threads
    parallel: bool = False

    def with_overrides(self, **overrides: Any) -> "ConversionOptions":
        """
        Copy these options with some fields replaced.

        Raises
        ------
        TypeError
            If a key is not a field name.
        """
        return dataclasses.replace(self, **overrides)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "ConversionOptions":
        """Build options from the defaults overridden by `mapping`."""
        return default_options().with_overrides(**dict(mapping))

    def validate(self) -> Optional[str]:
        """
        Check the numeric fields.

        Returns
        -------
        problem : str or None
            Description of the first field that is not a finite positive
            number, None if all are.
        """
        for name in ("linear_deflection", "angular_deflection", "scale"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return f"{name} must be a number, got {value!r}"
            if not math.isfinite(value) or value <= 0.0:
                return f"{name} must be a finite positive number, got {value!r}"
        return None


@dataclass(frozen=True)
class TessellationParams:
    """Settings passed through to the kernel's mesher."""

    linear_deflection: float
    # radians
    angular_deflection: float
    relative: bool
    parallel: bool

    @classmethod
    def from_options(cls, options: ConversionOptions) -> "TessellationParams":
        return cls(
            linear_deflection=options.linear_deflection,
            angular_deflection=options.angular_deflection * DEG_TO_RAD,
            relative=bool(options.relative_deflection),
            parallel=bool(options.parallel),
        )


def default_options() -> ConversionOptions:
    """Get a fresh set of default conversion options."""
    return ConversionOptions()


__all__ = [
    "ConversionOptions",
    "TessellationParams",
    "default_options",
]
