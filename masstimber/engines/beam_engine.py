"""
Beam Sizing Engine
Interior and edge beams carrying the joist reactions as a uniform load.
"""

from typing import Optional, Tuple

from ..core.context import EngineContext
from ..core.data_models import FireRatingLike, MemberType, SizingRequest, SizingResult
from .sizing_engine import BEAM_POLICY, SectionSizingSolver


class BeamEngine:
    """
    Beam sizing for interior beams (load from both sides) and
    edge beams (load from one side, half the tributary width).
    """

    def __init__(self, context: EngineContext):
        self.context = context
        self.solver = SectionSizingSolver(context)

    def calculate(
        self,
        span_m: float,
        load_kpa: float,
        grade: Optional[str] = None,
        tributary_width_m: Optional[float] = None,
        fire_rating: FireRatingLike = "none",
        is_edge_beam: bool = False,
        supported_dead_load_kpa: float = 0.0,
    ) -> SizingResult:
        """
        Size one beam. ``tributary_width_m`` is the interior tributary
        width and is required; edge beams take half of it.
        ``supported_dead_load_kpa`` is the smeared weight of the joists.
        """
        request = SizingRequest(
            member_type=MemberType.BEAM,
            span_m=span_m,
            spacing_or_tributary=tributary_width_m,
            load_kpa=load_kpa,
            grade=grade,
            fire_rating=fire_rating,
            is_edge_beam=is_edge_beam,
            supported_dead_load_kpa=supported_dead_load_kpa,
        )
        return self.solver.solve(request, BEAM_POLICY)

    def calculate_pair(
        self,
        span_m: float,
        load_kpa: float,
        grade: Optional[str],
        tributary_width_m: float,
        fire_rating: FireRatingLike = "none",
        supported_dead_load_kpa: float = 0.0,
    ) -> Tuple[SizingResult, SizingResult]:
        """Interior and edge beam at the same span, sized independently"""
        interior = self.calculate(
            span_m, load_kpa, grade, tributary_width_m, fire_rating, False, supported_dead_load_kpa
        )
        edge = self.calculate(
            span_m, load_kpa, grade, tributary_width_m, fire_rating, True, supported_dead_load_kpa
        )
        return interior, edge


def size_beam(
    context: EngineContext,
    span_m: float,
    load_kpa: float,
    grade: Optional[str] = None,
    tributary_width_m: Optional[float] = None,
    fire_rating: FireRatingLike = "none",
    is_edge_beam: bool = False,
) -> SizingResult:
    """Smallest catalog beam for the span and tributary load"""
    return BeamEngine(context).calculate(
        span_m, load_kpa, grade, tributary_width_m, fire_rating, is_edge_beam
    )
