"""
Data Models for Mass-Timber Member Sizing
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from typing import Any, Dict, List, Optional, Tuple, Union

import pandas as pd

from .constants import DEFAULT_FLOOR_HEIGHT, DEFAULT_JOIST_SPACING
from .exceptions import ValidationError


class MemberType(Enum):
    """Structural member family"""
    JOIST = "joist"
    BEAM = "beam"
    COLUMN = "column"


class FireRating(Enum):
    """Fire-resistance level (structural adequacy/integrity/insulation minutes)"""
    NONE = "none"
    FRL_30 = "30/30/30"
    FRL_60 = "60/60/60"
    FRL_90 = "90/90/90"
    FRL_120 = "120/120/120"

    @property
    def minutes(self) -> int:
        """Structural adequacy period in minutes"""
        if self is FireRating.NONE:
            return 0
        return int(self.value.split("/")[0])

    @classmethod
    def is_known(cls, label: Any) -> bool:
        if isinstance(label, cls):
            return True
        text = str(label).strip().lower() if label is not None else ""
        return any(rating.value == text for rating in cls)

    @classmethod
    def parse(cls, label: Any) -> "FireRating":
        """Map a label to a rating. Unrecognised labels mean no requirement."""
        if isinstance(label, cls):
            return label
        if label is None:
            return cls.NONE
        text = str(label).strip().lower()
        for rating in cls:
            if rating.value == text:
                return rating
        return cls.NONE


FireRatingLike = Union[FireRating, str, None]


class GoverningCriterion(Enum):
    """Check that produced the largest required section"""
    BENDING = "bending"
    DEFLECTION = "deflection"
    SHEAR = "shear"
    COMPRESSION = "compression"
    SLENDERNESS = "slenderness"
    PROPORTION = "proportion"
    MINIMUM_DEPTH = "minimum_depth"


@dataclass(frozen=True)
class MaterialProperties:
    """Mechanical properties of one timber grade (MPa, kg/m³)"""
    bending_strength: float
    tensile_strength: float
    compressive_strength: float
    shear_strength: float
    modulus_of_elasticity: float
    density: float

    def __post_init__(self):
        for name in (
            "bending_strength",
            "tensile_strength",
            "compressive_strength",
            "shear_strength",
            "modulus_of_elasticity",
            "density",
        ):
            value = getattr(self, name)
            if not is_finite_number(value) or not value > 0:
                raise ValidationError(
                    "Material properties must be positive numbers",
                    field=name,
                    value=value,
                )


@dataclass(frozen=True)
class CatalogEntry:
    """One manufactured cross-section"""
    member_type: MemberType
    width_mm: float
    depth_mm: float

    @property
    def size(self) -> str:
        return f"{self.width_mm:g}x{self.depth_mm:g}"


def is_finite_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _require_positive(name: str, value: Any) -> None:
    if not is_finite_number(value):
        raise ValidationError(f"{name} must be a finite number", field=name, value=value)
    if value <= 0:
        raise ValidationError(f"{name} must be greater than zero", field=name, value=value)


@dataclass(frozen=True)
class SizingRequest:
    """Inputs for one member sizing call.

    ``spacing_or_tributary`` depends on the member type: joist spacing (mm),
    beam tributary width (m) or column tributary area (m²). For columns
    ``span_m`` is the storey height.
    """
    member_type: MemberType
    span_m: float
    spacing_or_tributary: Optional[float]
    load_kpa: float
    grade: Optional[str] = None
    fire_rating: FireRatingLike = FireRating.NONE
    is_edge_beam: bool = False
    floors: int = 1
    fixed_width_mm: Optional[float] = None
    additional_axial_kn: float = 0.0  # per floor, chained from supported members
    supported_dead_load_kpa: float = 0.0  # weight of supported members, not part of the load class

    @property
    def tributary_label(self) -> str:
        return {
            MemberType.JOIST: "spacing_mm",
            MemberType.BEAM: "tributary_width_m",
            MemberType.COLUMN: "tributary_area_m2",
        }[self.member_type]

    def validate(self) -> None:
        """Raise ValidationError for any input the solver cannot size."""
        if not isinstance(self.member_type, MemberType):
            raise ValidationError("Unknown member type", field="member_type", value=self.member_type)
        _require_positive("span_m", self.span_m)
        _require_positive("load_kpa", self.load_kpa)
        if self.spacing_or_tributary is None:
            raise ValidationError(
                f"{self.tributary_label} is required for {self.member_type.value} sizing",
                field=self.tributary_label,
            )
        _require_positive(self.tributary_label, self.spacing_or_tributary)
        if not isinstance(self.floors, int) or isinstance(self.floors, bool) or self.floors < 1:
            raise ValidationError("floors must be a positive integer", field="floors", value=self.floors)
        if self.member_type is MemberType.COLUMN:
            if self.fixed_width_mm is None:
                raise ValidationError(
                    "Column sizing requires the supporting beam width",
                    field="beam_width_mm",
                )
            _require_positive("beam_width_mm", self.fixed_width_mm)
        if not is_finite_number(self.additional_axial_kn) or self.additional_axial_kn < 0:
            raise ValidationError(
                "additional_axial_kn cannot be negative",
                field="additional_axial_kn",
                value=self.additional_axial_kn,
            )
        if not is_finite_number(self.supported_dead_load_kpa) or self.supported_dead_load_kpa < 0:
            raise ValidationError(
                "supported_dead_load_kpa cannot be negative",
                field="supported_dead_load_kpa",
                value=self.supported_dead_load_kpa,
            )


@dataclass(frozen=True)
class EngineeringDetail:
    """Actions, section properties and utilization of the final section"""
    bending_moment_knm: float = 0.0
    required_section_modulus_mm3: float = 0.0
    moment_of_inertia_mm4: float = 0.0
    actual_deflection_mm: float = 0.0
    allowable_deflection_mm: float = 0.0
    deflection_limit: int = 0
    shear_force_kn: float = 0.0
    axial_load_kn: float = 0.0
    required_area_mm2: float = 0.0
    required_depths_mm: Dict[str, float] = field(default_factory=dict)
    utilization_ratios: Dict[str, float] = field(default_factory=dict)

    @property
    def overall_utilization(self) -> float:
        if not self.utilization_ratios:
            return 0.0
        return max(self.utilization_ratios.values())


@dataclass(frozen=True)
class DesignResult:
    """Base class for design results"""
    element_type: str
    size: str
    utilization: float = 0.0
    status: str = "OK"
    warnings: Tuple[str, ...] = ()
    calculations: Tuple[Dict[str, Any], ...] = ()


@dataclass(frozen=True)
class SizingResult(DesignResult):
    """Sized member. Dimensions are gross (as manufactured)."""
    member_type: MemberType = MemberType.JOIST
    width_mm: float = 0.0
    depth_mm: float = 0.0
    span_m: float = 0.0
    governing_criterion: GoverningCriterion = GoverningCriterion.BENDING
    engineering: EngineeringDetail = field(default_factory=EngineeringDetail)
    grade: str = ""
    fire_rating: FireRating = FireRating.NONE
    fire_allowance_mm: float = 0.0
    residual_width_mm: float = 0.0   # net section after charring
    residual_depth_mm: float = 0.0
    load_kpa: float = 0.0
    tributary: float = 0.0           # spacing (mm), width (m) or area (m²)
    line_load_kn_m: float = 0.0      # design line load incl. self-weight
    self_weight_kn_m: float = 0.0
    floors: int = 1
    is_edge_beam: bool = False
    using_fallback: bool = False
    capacity_exceeded: bool = False
    iterations: int = 0

    @property
    def area_mm2(self) -> float:
        return self.width_mm * self.depth_mm

    @property
    def self_weight_kpa(self) -> float:
        """Self-weight smeared over the member's tributary width (joists only)"""
        if self.member_type is MemberType.JOIST and self.tributary > 0:
            return self.self_weight_kn_m / (self.tributary / 1000)
        return 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "member": self.element_type,
            "type": self.member_type.value,
            "width_mm": self.width_mm,
            "depth_mm": self.depth_mm,
            "span_m": self.span_m,
            "governing": self.governing_criterion.value,
            "utilization": round(self.utilization, 3),
            "fire_rating": self.fire_rating.value,
            "fire_allowance_mm": self.fire_allowance_mm,
            "using_fallback": self.using_fallback,
            "capacity_exceeded": self.capacity_exceeded,
            "status": self.status,
        }


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of cross-member checks"""
    valid: bool
    messages: Tuple[str, ...] = ()
    notices: Tuple[str, ...] = ()


@dataclass(frozen=True)
class BuildingInput:
    """Building-level inputs for a full structure sizing run"""
    building_length_m: float
    building_width_m: float
    lengthwise_bays: int = 1
    widthwise_bays: int = 1
    custom_lengthwise_bays: Tuple[float, ...] = ()
    custom_widthwise_bays: Tuple[float, ...] = ()
    joists_run_lengthwise: bool = True
    joist_spacing_mm: float = DEFAULT_JOIST_SPACING
    load_kpa: float = 3.0
    grade: Optional[str] = None
    fire_rating: FireRatingLike = FireRating.NONE
    floors: int = 1
    floor_height_m: float = DEFAULT_FLOOR_HEIGHT


@dataclass(frozen=True)
class BayLayout:
    """Resolved grid. Bay widths in metres, in grid order."""
    lengthwise_bay_widths: Tuple[float, ...]
    widthwise_bay_widths: Tuple[float, ...]
    joists_run_lengthwise: bool
    joist_span_m: float
    beam_span_m: float
    interior_tributary_m: float
    edge_tributary_m: float
    column_bay_length_m: float
    column_bay_width_m: float
    rescaled: bool = False

    @property
    def avg_bay_length(self) -> float:
        return sum(self.lengthwise_bay_widths) / len(self.lengthwise_bay_widths)

    @property
    def avg_bay_width(self) -> float:
        return sum(self.widthwise_bay_widths) / len(self.widthwise_bay_widths)

    @property
    def lengthwise_bays(self) -> int:
        return len(self.lengthwise_bay_widths)

    @property
    def widthwise_bays(self) -> int:
        return len(self.widthwise_bay_widths)

    @property
    def column_tributary_area(self) -> float:
        return self.column_bay_length_m * self.column_bay_width_m


@dataclass(frozen=True)
class MemberQuantity:
    """Count and volume of one member group over all floors"""
    label: str
    member_type: MemberType
    count: int
    width_mm: float
    depth_mm: float
    total_length_m: float
    volume_m3: float
    mass_kg: float


@dataclass(frozen=True)
class StructureQuantities:
    items: Tuple[MemberQuantity, ...] = ()

    @property
    def total_volume_m3(self) -> float:
        return sum(item.volume_m3 for item in self.items)

    @property
    def total_mass_kg(self) -> float:
        return sum(item.mass_kg for item in self.items)

    def count(self, member_type: MemberType) -> int:
        return sum(item.count for item in self.items if item.member_type is member_type)


@dataclass(frozen=True)
class StructureResult:
    """Sized members, validation and quantities for one building"""
    building: BuildingInput
    layout: BayLayout
    joist: SizingResult
    interior_beam: SizingResult
    edge_beam: SizingResult
    column: SizingResult
    validation: ValidationReport
    quantities: StructureQuantities = field(default_factory=StructureQuantities)

    @property
    def members(self) -> List[SizingResult]:
        return [self.joist, self.interior_beam, self.edge_beam, self.column]

    @property
    def using_fallback(self) -> bool:
        return any(member.using_fallback for member in self.members)

    def member_schedule(self) -> pd.DataFrame:
        """One row per sized member, with quantities where available"""
        rows = [member.to_dict() for member in self.members]
        frame = pd.DataFrame(rows)
        quantities = {item.label: item for item in self.quantities.items}
        frame["count"] = [
            quantities[row["member"]].count if row["member"] in quantities else 0
            for row in rows
        ]
        frame["volume_m3"] = [
            round(quantities[row["member"]].volume_m3, 3) if row["member"] in quantities else 0.0
            for row in rows
        ]
        return frame
