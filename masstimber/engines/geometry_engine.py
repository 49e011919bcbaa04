"""
Geometry Engine - resolves the building grid into spans and tributaries.

Joists run lengthwise by default and span across the widthwise bays;
beams then span along the lengthwise bays on each widthwise grid line.
"""

import logging
from typing import List, Sequence, Tuple

from ..core.constants import BAY_SUM_TOLERANCE
from ..core.data_models import BayLayout, BuildingInput, is_finite_number
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class GeometryResolver:
    """
    Turns building dimensions and bay definitions into a BayLayout.
    """

    def resolve(self, building: BuildingInput) -> BayLayout:
        lengthwise, rescaled_l = self.resolve_bays(
            building.building_length_m,
            building.lengthwise_bays,
            building.custom_lengthwise_bays,
            "building_length_m",
        )
        widthwise, rescaled_w = self.resolve_bays(
            building.building_width_m,
            building.widthwise_bays,
            building.custom_widthwise_bays,
            "building_width_m",
        )

        if building.joists_run_lengthwise:
            joist_bays, beam_bays = widthwise, lengthwise
        else:
            joist_bays, beam_bays = lengthwise, widthwise

        interior_tributary = self.interior_tributary(joist_bays)

        layout = BayLayout(
            lengthwise_bay_widths=tuple(lengthwise),
            widthwise_bay_widths=tuple(widthwise),
            joists_run_lengthwise=building.joists_run_lengthwise,
            joist_span_m=max(joist_bays),
            beam_span_m=max(beam_bays),
            interior_tributary_m=interior_tributary,
            edge_tributary_m=interior_tributary / 2,
            column_bay_length_m=self.interior_tributary(lengthwise),
            column_bay_width_m=self.interior_tributary(widthwise),
            rescaled=rescaled_l or rescaled_w,
        )
        logger.info(
            f"Resolved grid {layout.lengthwise_bays}x{layout.widthwise_bays} bays: "
            f"joist span {layout.joist_span_m:.3f} m, beam span {layout.beam_span_m:.3f} m"
        )
        return layout

    @staticmethod
    def resolve_bays(
        total_m: float,
        bay_count: int,
        custom_widths: Sequence[float] = (),
        name: str = "dimension",
    ) -> Tuple[List[float], bool]:
        """Bay widths along one building direction.

        Custom widths define the bay count. If their sum differs from the
        building dimension by more than the tolerance they are rescaled
        proportionally and the last bay absorbs rounding, so the sum is exact.

        Returns:
            (bay widths in m, whether the custom widths were rescaled)
        """
        if not is_finite_number(total_m) or total_m <= 0:
            raise ValidationError(f"{name} must be greater than zero", field=name, value=total_m)

        custom = list(custom_widths or ())
        if not custom:
            if not isinstance(bay_count, int) or isinstance(bay_count, bool) or bay_count < 1:
                raise ValidationError(
                    "Bay count must be a positive integer", field=f"{name} bays", value=bay_count
                )
            return [total_m / bay_count] * bay_count, False

        for width in custom:
            if not is_finite_number(width) or width <= 0:
                raise ValidationError(
                    "Custom bay widths must be positive", field=f"{name} bays", value=width
                )

        current = sum(custom)
        if abs(current - total_m) <= BAY_SUM_TOLERANCE:
            return custom, False

        scale = total_m / current
        scaled = [width * scale for width in custom]
        scaled[-1] = total_m - sum(scaled[:-1])
        logger.warning(
            f"Custom bays along {name} sum to {current:.3f} m, "
            f"rescaled to {total_m:.3f} m"
        )
        return scaled, True

    @staticmethod
    def interior_tributary(bays: Sequence[float]) -> float:
        """Largest half-sum of adjacent bays; a single bay loads its full width"""
        if len(bays) == 1:
            return bays[0]
        return max((a + b) / 2 for a, b in zip(bays[:-1], bays[1:]))
