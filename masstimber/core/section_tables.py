"""
Built-in Timber Grade Properties and MASSLAM Section Tables
"""

from typing import Dict, List, Tuple

from .data_models import CatalogEntry, FireRating, MaterialProperties, MemberType


# Mechanical properties per grade (MPa, density kg/m³)
TIMBER_GRADES: Dict[str, MaterialProperties] = {
    "ML38": MaterialProperties(
        bending_strength=38,
        tensile_strength=19,
        compressive_strength=38,
        shear_strength=5.0,
        modulus_of_elasticity=14500,
        density=600,
    ),
    "MASSLAM_SL33": MaterialProperties(
        bending_strength=33,
        tensile_strength=16,
        compressive_strength=26,
        shear_strength=4.2,
        modulus_of_elasticity=13300,
        density=600,
    ),
    "GL18": MaterialProperties(
        bending_strength=18,
        tensile_strength=11,
        compressive_strength=18,
        shear_strength=3.5,
        modulus_of_elasticity=11500,
        density=600,
    ),
    "GL21": MaterialProperties(
        bending_strength=21,
        tensile_strength=13,
        compressive_strength=21,
        shear_strength=3.8,
        modulus_of_elasticity=13000,
        density=650,
    ),
    "GL24": MaterialProperties(
        bending_strength=24,
        tensile_strength=16,
        compressive_strength=24,
        shear_strength=4.0,
        modulus_of_elasticity=14500,
        density=700,
    ),
}


# Minimum gross width mandated by fire rating (mm)
FIRE_RATING_WIDTHS: Dict[FireRating, int] = {
    FireRating.NONE: 120,
    FireRating.FRL_30: 165,
    FireRating.FRL_60: 165,
    FireRating.FRL_90: 205,
    FireRating.FRL_120: 250,
}

# MASSLAM manufactured widths (mm)
STANDARD_WIDTHS: Tuple[int, ...] = (120, 165, 205, 250, 290, 335, 380, 420, 450)

# Standard depths (mm); also the fallback depth list when no catalog is loaded
STANDARD_DEPTHS: Tuple[int, ...] = (200, 270, 335, 410, 480, 550, 620)

# Beam lay-ups continue past the joist range
BEAM_DEPTHS: Tuple[int, ...] = STANDARD_DEPTHS + (
    690, 760, 830, 900, 970, 1040, 1110, 1180,
)


def _column_depths(width: int) -> List[int]:
    """Column depths for a width: any standard dimension not less than the width"""
    candidates = sorted(set(STANDARD_WIDTHS) | set(BEAM_DEPTHS))
    return [depth for depth in candidates if depth >= width]


def masslam_catalog() -> List[CatalogEntry]:
    """Default MASSLAM section catalog"""
    entries: List[CatalogEntry] = []
    for width in STANDARD_WIDTHS:
        for depth in STANDARD_DEPTHS:
            entries.append(CatalogEntry(MemberType.JOIST, width, depth))
        for depth in BEAM_DEPTHS:
            entries.append(CatalogEntry(MemberType.BEAM, width, depth))
        for depth in _column_depths(width):
            entries.append(CatalogEntry(MemberType.COLUMN, width, depth))
    return entries


def get_fire_rating_width(fire_rating: FireRating) -> int:
    """Minimum gross width for a rating, 120 mm when no rating applies"""
    return FIRE_RATING_WIDTHS.get(fire_rating, FIRE_RATING_WIDTHS[FireRating.NONE])
