"""
Joist Sizing Engine
Floor joists at a regular spacing, simply supported between beams.
"""

from typing import Optional

from ..core.context import EngineContext
from ..core.data_models import FireRatingLike, MemberType, SizingRequest, SizingResult
from .sizing_engine import JOIST_POLICY, SectionSizingSolver


class JoistEngine:
    """
    Joist sizing. The tributary width is the joist spacing.
    """

    def __init__(self, context: EngineContext):
        self.context = context
        self.solver = SectionSizingSolver(context)

    def calculate(
        self,
        span_m: float,
        spacing_mm: float,
        load_kpa: float,
        grade: Optional[str] = None,
        fire_rating: FireRatingLike = "none",
    ) -> SizingResult:
        request = SizingRequest(
            member_type=MemberType.JOIST,
            span_m=span_m,
            spacing_or_tributary=spacing_mm,
            load_kpa=load_kpa,
            grade=grade,
            fire_rating=fire_rating,
        )
        return self.solver.solve(request, JOIST_POLICY)


def size_joist(
    context: EngineContext,
    span_m: float,
    spacing_mm: float,
    load_kpa: float,
    grade: Optional[str] = None,
    fire_rating: FireRatingLike = "none",
) -> SizingResult:
    """Smallest catalog joist for the span, spacing and area load"""
    return JoistEngine(context).calculate(span_m, spacing_mm, load_kpa, grade, fire_rating)
