"""
masstimber - preliminary sizing of mass-timber joists, beams and columns.

Usage:
    context = initialize()
    joist = size_joist(context, span_m=6.0, spacing_mm=800, load_kpa=3.0)
"""

from .core import (
    EngineConfig,
    EngineContext,
    FireRating,
    MemberType,
    SizingError,
    ValidationError,
    initialize,
)
from .engines import (
    fire_allowance,
    GeometryResolver,
    size_joist,
    size_beam,
    size_column,
    size_structure,
    validate,
)

__version__ = "1.0.0"
