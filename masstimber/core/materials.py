"""
Material property lookup per timber grade.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from .constants import DEFAULT_GRADE
from .data_models import MaterialProperties
from .exceptions import ValidationError
from .section_tables import TIMBER_GRADES

logger = logging.getLogger(__name__)

# Property names accepted in feed dictionaries
PROPERTY_ALIASES = {
    "bendingStrength": "bending_strength",
    "tensileStrength": "tensile_strength",
    "compressiveStrength": "compressive_strength",
    "shearStrength": "shear_strength",
    "modulusOfElasticity": "modulus_of_elasticity",
    "elasticModulus": "modulus_of_elasticity",
    "mod_of_elasticity": "modulus_of_elasticity",
    "E": "modulus_of_elasticity",
}

PROPERTY_FIELDS = (
    "bending_strength",
    "tensile_strength",
    "compressive_strength",
    "shear_strength",
    "modulus_of_elasticity",
    "density",
)


def _normalise_grade(grade: Any) -> str:
    return str(grade).strip().upper()


def _to_properties(values: Any) -> MaterialProperties:
    if isinstance(values, MaterialProperties):
        return values
    if not isinstance(values, Mapping):
        raise ValidationError("Material entry must be a mapping", value=values)
    data = {PROPERTY_ALIASES.get(key, key): value for key, value in values.items()}
    missing = [name for name in PROPERTY_FIELDS if name not in data]
    if missing:
        raise ValidationError(f"Material entry is missing {missing}")
    return MaterialProperties(**{name: data[name] for name in PROPERTY_FIELDS})


class MaterialPropertyProvider:
    """Read-only grade → MaterialProperties table with a default grade."""

    def __init__(
        self,
        property_feed: Optional[Mapping[str, Any]] = None,
        default_grade: str = DEFAULT_GRADE,
    ):
        properties: Dict[str, MaterialProperties] = dict(TIMBER_GRADES)
        for grade, values in (property_feed or {}).items():
            try:
                properties[_normalise_grade(grade)] = _to_properties(values)
            except (ValidationError, TypeError) as exc:
                logger.warning(f"Skipping material grade {grade!r}: {exc}")

        self.default_grade = _normalise_grade(default_grade)
        if self.default_grade not in properties:
            logger.warning(
                f"Default grade {self.default_grade} not available, using {DEFAULT_GRADE}"
            )
            self.default_grade = DEFAULT_GRADE
        self._properties = properties

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MaterialPropertyProvider):
            return NotImplemented
        return (
            self.default_grade == other.default_grade
            and self._properties == other._properties
        )

    def __hash__(self) -> int:
        return hash((self.default_grade, tuple(sorted(self._properties))))

    @property
    def grades(self) -> Tuple[str, ...]:
        return tuple(sorted(self._properties))

    def has_grade(self, grade: Optional[str]) -> bool:
        return grade is not None and _normalise_grade(grade) in self._properties

    def resolve(self, grade: Optional[str]) -> Tuple[str, MaterialProperties, bool]:
        """Look up a grade.

        Returns:
            (grade used, properties, fell back to the default grade)
        """
        if grade is not None and str(grade).strip():
            key = _normalise_grade(grade)
            if key in self._properties:
                return key, self._properties[key], False
            logger.warning(f"Unknown grade {key}, using default {self.default_grade}")
            return self.default_grade, self._properties[self.default_grade], True
        return self.default_grade, self._properties[self.default_grade], False

    def get(self, grade: Optional[str]) -> MaterialProperties:
        return self.resolve(grade)[1]
