"""
Fire Allowance Engine - charring model for exposed timber faces.

The sacrificial layer per exposed face is
    allowance = charring_rate × rated_minutes + zero_strength_layer
and is zero when no fire rating applies.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.config import EngineConfig
from ..core.constants import MIN_NET_WIDTH
from ..core.data_models import FireRating, FireRatingLike
from ..core.section_tables import get_fire_rating_width

logger = logging.getLogger(__name__)


def fire_allowance(fire_rating: FireRatingLike, config: Optional[EngineConfig] = None) -> float:
    """Charring allowance per exposed face in mm.

    Unrecognised labels are treated as no fire requirement and return 0.
    """
    config = config or EngineConfig()
    if fire_rating is not None and not FireRating.is_known(fire_rating):
        logger.debug(f"Unrecognised fire rating {fire_rating!r}, no allowance applied")
    rating = FireRating.parse(fire_rating)
    if rating is FireRating.NONE:
        return 0.0
    return config.charring_rate * rating.minutes + config.zero_strength_layer


def fire_rating_width(fire_rating: FireRatingLike) -> int:
    """Minimum gross member width mandated by the fire rating (mm)"""
    return get_fire_rating_width(FireRating.parse(fire_rating))


@dataclass(frozen=True)
class ResidualSection:
    """Section remaining after the rated fire exposure"""
    fire_rating: FireRating
    char_depth_mm: float
    effective_width_mm: float
    effective_depth_mm: float
    original_area_mm2: float
    residual_area_mm2: float

    @property
    def residual_percentage(self) -> float:
        if self.original_area_mm2 <= 0:
            return 0.0
        return self.residual_area_mm2 / self.original_area_mm2 * 100

    @property
    def is_adequate(self) -> bool:
        return self.effective_width_mm >= MIN_NET_WIDTH and self.effective_depth_mm > 0


def residual_section(
    width_mm: float,
    depth_mm: float,
    fire_rating: FireRatingLike,
    width_faces: int = 2,
    depth_faces: int = 1,
    config: Optional[EngineConfig] = None,
) -> ResidualSection:
    """Reduce a gross section by the charring allowance on its exposed faces.

    Beams and joists are exposed on both sides and the soffit
    (width_faces=2, depth_faces=1); columns on all four faces.
    """
    rating = FireRating.parse(fire_rating)
    allowance = fire_allowance(rating, config)
    effective_width = max(0.0, width_mm - width_faces * allowance)
    effective_depth = max(0.0, depth_mm - depth_faces * allowance)
    return ResidualSection(
        fire_rating=rating,
        char_depth_mm=allowance,
        effective_width_mm=effective_width,
        effective_depth_mm=effective_depth,
        original_area_mm2=width_mm * depth_mm,
        residual_area_mm2=effective_width * effective_depth,
    )
