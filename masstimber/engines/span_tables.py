"""
Span Tables - member sizes over a grid of spans and tributaries.
"""

import logging
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from ..core.context import EngineContext
from ..core.data_models import FireRatingLike
from .beam_engine import BeamEngine
from .joist_engine import JoistEngine

logger = logging.getLogger(__name__)

DEFAULT_SPANS = tuple(np.arange(3.0, 9.0 + 1e-9, 1.0))
DEFAULT_TRIBUTARY_WIDTHS = (2.0, 4.0, 6.0, 8.0, 10.0)
DEFAULT_JOIST_SPACINGS = (400, 600, 800)


def beam_span_table(
    context: EngineContext,
    load_kpa: float,
    grade: Optional[str] = None,
    fire_rating: FireRatingLike = "none",
    spans: Sequence[float] = DEFAULT_SPANS,
    tributary_widths: Sequence[float] = DEFAULT_TRIBUTARY_WIDTHS,
) -> pd.DataFrame:
    """Beam sizes indexed by span (m), one column per tributary width (m)"""
    engine = BeamEngine(context)
    table = pd.DataFrame(
        index=pd.Index([float(s) for s in spans], name="span_m"),
        columns=pd.Index([float(t) for t in tributary_widths], name="tributary_width_m"),
        dtype=object,
    )
    for span in table.index:
        for tributary in table.columns:
            result = engine.calculate(span, load_kpa, grade, tributary, fire_rating)
            table.loc[span, tributary] = _cell(result)
    logger.info(f"Beam span table built: {table.shape[0]} spans × {table.shape[1]} widths")
    return table


def joist_span_table(
    context: EngineContext,
    load_kpa: float,
    grade: Optional[str] = None,
    fire_rating: FireRatingLike = "none",
    spans: Sequence[float] = DEFAULT_SPANS,
    spacings_mm: Sequence[float] = DEFAULT_JOIST_SPACINGS,
) -> pd.DataFrame:
    """Joist sizes indexed by span (m), one column per spacing (mm)"""
    engine = JoistEngine(context)
    table = pd.DataFrame(
        index=pd.Index([float(s) for s in spans], name="span_m"),
        columns=pd.Index([float(s) for s in spacings_mm], name="spacing_mm"),
        dtype=object,
    )
    for span in table.index:
        for spacing in table.columns:
            result = engine.calculate(span, spacing, load_kpa, grade, fire_rating)
            table.loc[span, spacing] = _cell(result)
    return table


def _cell(result) -> str:
    marker = "*" if result.capacity_exceeded else ""
    return f"{result.width_mm:.0f}x{result.depth_mm:.0f}{marker}"
