"""
Column Sizing Engine
Implements load accumulation over floors for interior columns.
"""

from typing import Optional

from ..core.context import EngineContext
from ..core.data_models import (
    FireRatingLike,
    MemberType,
    SizingRequest,
    SizingResult,
    is_finite_number,
)
from ..core.exceptions import ValidationError
from .sizing_engine import COLUMN_POLICY, SectionSizingSolver


class ColumnEngine:
    """
    Column sizing. Width follows the supported beam; depth is sized for
    axial load and slenderness.
    """

    def __init__(self, context: EngineContext):
        self.context = context
        self.solver = SectionSizingSolver(context)

    def calculate(
        self,
        beam_width_mm: float,
        load_kpa: float,
        height_m: float,
        floors: int,
        fire_rating: FireRatingLike = "none",
        bay_length_m: Optional[float] = None,
        bay_width_m: Optional[float] = None,
        grade: Optional[str] = None,
        additional_axial_kn: float = 0.0,
        supported_dead_load_kpa: float = 0.0,
    ) -> SizingResult:
        """
        Size a column carrying ``floors`` storeys.
        ``additional_axial_kn`` is the per-floor beam self-weight and
        ``supported_dead_load_kpa`` the smeared joist self-weight.
        """
        trib_area = self._get_tributary_area(bay_length_m, bay_width_m)
        request = SizingRequest(
            member_type=MemberType.COLUMN,
            span_m=height_m,
            spacing_or_tributary=trib_area,
            load_kpa=load_kpa,
            grade=grade,
            fire_rating=fire_rating,
            floors=floors,
            fixed_width_mm=beam_width_mm,
            additional_axial_kn=additional_axial_kn,
            supported_dead_load_kpa=supported_dead_load_kpa,
        )
        return self.solver.solve(request, COLUMN_POLICY)

    def _get_tributary_area(
        self, bay_length_m: Optional[float], bay_width_m: Optional[float]
    ) -> float:
        """Tributary area of an interior column"""
        for name, value in (("bay_length_m", bay_length_m), ("bay_width_m", bay_width_m)):
            if value is None:
                raise ValidationError(f"{name} is required for column sizing", field=name)
            if not is_finite_number(value) or value <= 0:
                raise ValidationError(f"{name} must be greater than zero", field=name, value=value)
        return bay_length_m * bay_width_m


def size_column(
    context: EngineContext,
    beam_width_mm: float,
    load_kpa: float,
    height_m: float,
    floors: int,
    fire_rating: FireRatingLike = "none",
    bay_length_m: Optional[float] = None,
    bay_width_m: Optional[float] = None,
    grade: Optional[str] = None,
    additional_axial_kn: float = 0.0,
) -> SizingResult:
    """Catalog column matching the beam width, sized for the floors above"""
    return ColumnEngine(context).calculate(
        beam_width_mm,
        load_kpa,
        height_m,
        floors,
        fire_rating,
        bay_length_m,
        bay_width_m,
        grade,
        additional_axial_kn,
    )
