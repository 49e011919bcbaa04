"""
Section Sizing Engine - shared solver for joists, beams and columns.

Every member goes through the same stages:
    1. load aggregation over the tributary
    2. strength sizing (bending/shear, or axial for columns)
    3. deflection check, applied at every span
    4. self-weight re-run (single pass, or iterate to tolerance)
    5. fire allowance on exposed faces and catalog snapping
A MemberPolicy supplies the member-specific parts.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..core.catalog import SectionTable
from ..core.constants import (
    COLUMN_SLENDERNESS_DIVISOR,
    DEFLECTION_LIMIT_COMMERCIAL,
    DEFLECTION_LIMIT_HEAVY,
    DEFLECTION_LIMIT_LIGHT,
    DEFLECTION_LOAD_THRESHOLD_HIGH,
    DEFLECTION_LOAD_THRESHOLD_LOW,
    GRAVITY,
    MIN_BEAM_DEPTH,
    MIN_JOIST_DEPTH,
    MIN_NET_WIDTH,
    RECTANGULAR_SHEAR_FACTOR,
)
from ..core.context import EngineContext
from ..core.data_models import (
    EngineeringDetail,
    FireRating,
    GoverningCriterion,
    MaterialProperties,
    MemberType,
    SizingRequest,
    SizingResult,
)
from .fire_engine import fire_allowance, fire_rating_width

logger = logging.getLogger(__name__)


class StructuralAction(Enum):
    """Primary action the member is sized for"""
    FLEXURE = "flexure"
    COMPRESSION = "compression"


class TributaryRule(Enum):
    """How ``spacing_or_tributary`` converts to a tributary"""
    SPACING = "spacing"        # joist spacing in mm
    BAY_WIDTH = "bay_width"    # beam tributary width in m, halved for edge beams
    BAY_AREA = "bay_area"      # column tributary area in m² per floor


@dataclass(frozen=True)
class MemberPolicy:
    """Member-specific parameters of the shared sizing routine"""
    member_type: MemberType
    label: str
    action: StructuralAction
    tributary_rule: TributaryRule
    width_faces: int        # exposed faces consuming width
    depth_faces: int        # exposed faces consuming depth
    min_depth_mm: float = 0.0
    widen_for_fire: bool = False  # charring allowance added to the table width

    def tributary(self, request: SizingRequest) -> float:
        """Tributary width (m) for flexural members, area (m²) for columns"""
        value = float(request.spacing_or_tributary)
        if self.tributary_rule is TributaryRule.SPACING:
            return value / 1000
        if self.tributary_rule is TributaryRule.BAY_WIDTH and request.is_edge_beam:
            return value / 2
        return value

    def element_label(self, request: SizingRequest) -> str:
        if self.member_type is MemberType.BEAM:
            return "Edge Beam" if request.is_edge_beam else "Interior Beam"
        return self.label


JOIST_POLICY = MemberPolicy(
    member_type=MemberType.JOIST,
    label="Joist",
    action=StructuralAction.FLEXURE,
    tributary_rule=TributaryRule.SPACING,
    width_faces=2,
    depth_faces=1,
    min_depth_mm=MIN_JOIST_DEPTH,
)

BEAM_POLICY = MemberPolicy(
    member_type=MemberType.BEAM,
    label="Beam",
    action=StructuralAction.FLEXURE,
    tributary_rule=TributaryRule.BAY_WIDTH,
    width_faces=2,
    depth_faces=1,
    min_depth_mm=MIN_BEAM_DEPTH,
    widen_for_fire=True,
)

COLUMN_POLICY = MemberPolicy(
    member_type=MemberType.COLUMN,
    label="Column",
    action=StructuralAction.COMPRESSION,
    tributary_rule=TributaryRule.BAY_AREA,
    width_faces=2,
    depth_faces=2,
)

POLICIES = {
    MemberType.JOIST: JOIST_POLICY,
    MemberType.BEAM: BEAM_POLICY,
    MemberType.COLUMN: COLUMN_POLICY,
}


def deflection_limit(load_kpa: float) -> int:
    """Span/limit ratio for the area load class"""
    if load_kpa < DEFLECTION_LOAD_THRESHOLD_LOW:
        return DEFLECTION_LIMIT_LIGHT
    if load_kpa < DEFLECTION_LOAD_THRESHOLD_HIGH:
        return DEFLECTION_LIMIT_COMMERCIAL
    return DEFLECTION_LIMIT_HEAVY


def self_weight_per_metre(width_mm: float, depth_mm: float, density: float) -> float:
    """Member weight in kN/m"""
    return (width_mm / 1000) * (depth_mm / 1000) * density * GRAVITY / 1000


@dataclass(frozen=True)
class _DepthRequirement:
    """Net depth demanded by one pass of the strength/stiffness checks"""
    net_depth: float
    depths: Dict[GoverningCriterion, float]
    governing: GoverningCriterion
    design_load: float      # kN/m for flexure, kN for compression
    self_weight: float      # kN/m for flexure, kN per storey for columns


class SectionSizingSolver:
    """
    Sizes one member against a SizingRequest.
    The calculation trail of the last solve is kept in ``calculations``.
    """

    def __init__(self, context: EngineContext):
        self.context = context
        self.config = context.config
        self.calculations: List[Dict[str, Any]] = []
        self.warnings: List[str] = []

    def _add_calc_step(self, description: str, calculation: str, reference: str = ""):
        """Add a calculation step to the audit trail"""
        self.calculations.append({
            "description": description,
            "calculation": calculation,
            "reference": reference
        })

    def solve(self, request: SizingRequest, policy: Optional[MemberPolicy] = None) -> SizingResult:
        """Size a member. Raises ValidationError for unusable inputs."""
        request.validate()
        policy = policy or POLICIES[request.member_type]
        self.calculations = []
        self.warnings = []
        label = policy.element_label(request)

        grade, material, fell_back = self.context.material(request.grade)
        if fell_back:
            self.warnings.append(
                f"Grade {request.grade!r} not found, properties of {grade} used"
            )

        rating = FireRating.parse(request.fire_rating)
        if request.fire_rating is not None and not FireRating.is_known(request.fire_rating):
            self.warnings.append(
                f"Fire rating {request.fire_rating!r} not recognised, no fire allowance applied"
            )
        allowance = fire_allowance(rating, self.config)

        table = self.context.section_table(policy.member_type)
        if table.is_fallback:
            self.warnings.append(
                f"No catalog sizes for {policy.member_type.value}s, standard fallback sizes used"
            )

        self._add_calc_step(
            f"{label.upper()} SIZING",
            f"Span = {request.span_m} m, Load = {request.load_kpa} kPa, "
            f"Grade = {grade}, Fire rating = {rating.value}",
            f"{policy.action.value.capitalize()} member",
        )
        self._add_calc_step(
            "Fire allowance per exposed face",
            f"a = {self.config.charring_rate} × {rating.minutes} min"
            + (f" + {self.config.zero_strength_layer} mm" if rating is not FireRating.NONE else "")
            + f" = {allowance:.1f} mm",
            "Notional charring with zero-strength layer",
        )

        width, net_width, width_exceeded = self._select_width(
            request, policy, rating, allowance, table
        )
        narrow = net_width < MIN_NET_WIDTH
        if narrow:
            self.warnings.append(
                f"Residual width {net_width:.0f} mm after charring is below {MIN_NET_WIDTH} mm"
            )
            net_width = MIN_NET_WIDTH

        if policy.action is StructuralAction.FLEXURE:
            requirement, iterations = self._converge(
                lambda sw: self._flexural_requirement(request, policy, material, net_width, sw),
                width, policy, allowance, material, request,
            )
        else:
            requirement, iterations = self._converge(
                lambda sw: self._axial_requirement(request, policy, material, net_width, sw),
                width, policy, allowance, material, request,
            )

        gross_depth = requirement.net_depth + policy.depth_faces * allowance
        governing = requirement.governing
        if policy.action is StructuralAction.COMPRESSION and gross_depth < width:
            gross_depth = width
            governing = GoverningCriterion.PROPORTION
            self._add_calc_step(
                "Column proportion",
                f"Depth raised to width: D = b = {width:.0f} mm",
                "Avoid weak-axis column",
            )

        self._add_calc_step(
            "Gross section before snapping",
            f"b = {width:.0f} mm, D = {requirement.net_depth:.1f} + "
            f"{policy.depth_faces} × {allowance:.1f} = {gross_depth:.1f} mm",
            f"{policy.width_faces} faces on width, {policy.depth_faces} on depth",
        )

        depth_snap = table.snap_depth(width, gross_depth)
        depth = depth_snap.value
        capacity_exceeded = width_exceeded or depth_snap.exceeded or narrow
        if depth_snap.exceeded:
            self.warnings.append(
                f"No catalog {policy.member_type.value} section reaches {gross_depth:.0f} mm "
                f"at width {width:.0f} mm; largest depth {depth:.0f} mm returned"
            )
        self._add_calc_step(
            "Catalog snap",
            f"Required D = {gross_depth:.1f} mm → {depth:.0f} mm"
            + (" (capacity exceeded)" if depth_snap.exceeded else ""),
            "Smallest listed depth not less than required",
        )

        self_weight = self_weight_per_metre(width, depth, material.density)
        if policy.action is StructuralAction.FLEXURE:
            detail = self._flexural_detail(
                request, policy, material, width, depth, allowance, net_width
            )
            line_load = self._design_line_load(request, policy, material, width, depth)
        else:
            detail = self._axial_detail(request, policy, material, width, depth, allowance)
            line_load = 0.0

        for criterion, ratio in detail.utilization_ratios.items():
            if ratio > 1.0:
                self.warnings.append(f"{criterion} utilization {ratio:.2f} exceeds 1.0")

        utilization = detail.overall_utilization
        if utilization > 1.0:
            status = "FAIL"
        elif self.warnings:
            status = "WARNING"
        else:
            status = "OK"

        logger.info(
            f"Sized {label.lower()}: {width:.0f}x{depth:.0f} mm, "
            f"governing {governing.value}, utilization {utilization:.2f}"
        )
        if capacity_exceeded:
            logger.warning(f"{label} capacity exceeded at {width:.0f}x{depth:.0f} mm")

        return SizingResult(
            element_type=label,
            size=f"{width:.0f} × {depth:.0f} mm",
            utilization=utilization,
            status=status,
            warnings=tuple(self.warnings),
            calculations=tuple(self.calculations),
            member_type=policy.member_type,
            width_mm=width,
            depth_mm=depth,
            span_m=request.span_m,
            governing_criterion=governing,
            engineering=detail,
            grade=grade,
            fire_rating=rating,
            fire_allowance_mm=allowance,
            residual_width_mm=max(0.0, width - policy.width_faces * allowance),
            residual_depth_mm=max(0.0, depth - policy.depth_faces * allowance),
            load_kpa=request.load_kpa,
            tributary=float(request.spacing_or_tributary),
            line_load_kn_m=line_load,
            self_weight_kn_m=self_weight,
            floors=request.floors,
            is_edge_beam=request.is_edge_beam,
            using_fallback=table.is_fallback,
            capacity_exceeded=capacity_exceeded,
            iterations=iterations,
        )

    def _select_width(
        self,
        request: SizingRequest,
        policy: MemberPolicy,
        rating: FireRating,
        allowance: float,
        table: SectionTable,
    ) -> Tuple[float, float, bool]:
        """Gross width, width used for sizing, and whether the catalog fell short.

        Widened members are sized on the fire table width and snapped from
        that width plus the allowance on each exposed side. Other members
        take the table width as gross and are sized on what remains after
        charring.
        """
        if request.fixed_width_mm is not None:
            width = float(request.fixed_width_mm)
            if table.depths_for(width) == ():
                self.warnings.append(
                    f"No {policy.member_type.value} sizes listed for width {width:.0f} mm, "
                    f"depth taken from all listed depths"
                )
            self._add_calc_step(
                "Width fixed by supporting member",
                f"b = {width:.0f} mm",
                "Flush connection to supported beam",
            )
            return width, width - policy.width_faces * allowance, False

        table_width = float(fire_rating_width(rating))
        if policy.widen_for_fire:
            required = table_width + policy.width_faces * allowance
        else:
            required = table_width
            if required - policy.width_faces * allowance < MIN_NET_WIDTH:
                required = MIN_NET_WIDTH + policy.width_faces * allowance
        snap = table.snap_width(required)
        if snap.exceeded:
            self.warnings.append(
                f"No catalog {policy.member_type.value} width reaches {required:.0f} mm; "
                f"largest width {snap.value:.0f} mm returned"
            )

        net_width = snap.value - policy.width_faces * allowance
        if policy.widen_for_fire:
            net_width = min(net_width, table_width)
            basis = f"b_req = {table_width:.0f} + {policy.width_faces} × {allowance:.1f}"
        else:
            basis = "b_req"
        self._add_calc_step(
            "Section width",
            f"{basis} = {required:.0f} mm ({rating.value}) → b = {snap.value:.0f} mm, "
            f"sizing b = {net_width:.0f} mm",
            "Minimum width by fire rating",
        )
        return snap.value, net_width, snap.exceeded

    def _converge(
        self,
        requirement_for: Callable[[float], _DepthRequirement],
        width: float,
        policy: MemberPolicy,
        allowance: float,
        material: MaterialProperties,
        request: SizingRequest,
    ) -> Tuple[_DepthRequirement, int]:
        """Re-run sizing with the member's own weight.

        Single-pass policy re-runs once; the iterate policy repeats until the
        net depth changes by less than the tolerance.
        """
        requirement = requirement_for(0.0)
        passes = self.config.max_iterations if self.config.iterate_self_weight else 1
        iterations = 0
        for _ in range(passes):
            gross_depth = requirement.net_depth + policy.depth_faces * allowance
            self_weight = self_weight_per_metre(width, gross_depth, material.density)
            if policy.action is StructuralAction.COMPRESSION:
                self_weight *= request.span_m
            updated = requirement_for(self_weight)
            iterations += 1
            change = abs(updated.net_depth - requirement.net_depth)
            logger.debug(
                f"Self-weight pass {iterations}: {self_weight:.3f}, "
                f"depth {requirement.net_depth:.1f} → {updated.net_depth:.1f} mm"
            )
            requirement = updated
            if change < self.config.convergence_tolerance_mm:
                break

        self._add_calc_step(
            "Self-weight included",
            f"Self-weight = {requirement.self_weight:.3f} "
            f"{'kN/m' if policy.action is StructuralAction.FLEXURE else 'kN per storey'}, "
            f"{iterations} pass(es), net D = {requirement.net_depth:.1f} mm "
            f"({requirement.governing.value} governs)",
            f"Policy: {self.config.self_weight_policy}",
        )
        return requirement, iterations

    def _base_line_load(self, request: SizingRequest, policy: MemberPolicy) -> float:
        """Unfactored line load (kN/m) or floor load (kN) excluding self-weight"""
        area_load = request.load_kpa + request.supported_dead_load_kpa
        if policy.action is StructuralAction.COMPRESSION:
            return area_load * policy.tributary(request) + request.additional_axial_kn
        return area_load * policy.tributary(request)

    def _design_line_load(self, request, policy, material, width, depth) -> float:
        base = self._base_line_load(request, policy)
        return self.config.design_load_factor * (
            base + self_weight_per_metre(width, depth, material.density)
        )

    def _flexural_requirement(
        self,
        request: SizingRequest,
        policy: MemberPolicy,
        material: MaterialProperties,
        net_width: float,
        self_weight: float,
    ) -> _DepthRequirement:
        """Net depth from bending, deflection and shear on the net width.

        The deflection-derived depth is evaluated for every span.
        """
        w = self.config.design_load_factor * (self._base_line_load(request, policy) + self_weight)
        L = request.span_m * 1000  # mm; w in kN/m equals N/mm

        moment = w * L ** 2 / 8
        z_required = moment / material.bending_strength
        d_bending = math.sqrt(6 * z_required / net_width)

        limit = deflection_limit(request.load_kpa)
        delta_allow = L / limit
        i_required = 5 * w * L ** 4 / (384 * material.modulus_of_elasticity * delta_allow)
        d_deflection = (12 * i_required / net_width) ** (1 / 3)

        shear = w * L / 2
        d_shear = RECTANGULAR_SHEAR_FACTOR * shear / (net_width * material.shear_strength)

        depths = {
            GoverningCriterion.BENDING: d_bending,
            GoverningCriterion.DEFLECTION: d_deflection,
            GoverningCriterion.SHEAR: d_shear,
        }
        governing = max(depths, key=depths.get)
        net_depth = depths[governing]
        if policy.min_depth_mm > net_depth:
            governing = GoverningCriterion.MINIMUM_DEPTH
            net_depth = policy.min_depth_mm

        if self_weight == 0.0:
            self._add_calc_step(
                "Design line load",
                f"w = {self.config.design_load_factor} × "
                f"{request.load_kpa + request.supported_dead_load_kpa:.2f} kPa × "
                f"{policy.tributary(request):.3f} m = {w:.2f} kN/m",
                "Tributary width × area load",
            )
            self._add_calc_step(
                "Bending",
                f"M = wL²/8 = {moment / 1e6:.2f} kNm, Z = M/f_b = {z_required:.0f} mm³, "
                f"D = √(6Z/b) = {d_bending:.1f} mm",
                "Simply supported, uniform load",
            )
            self._add_calc_step(
                "Deflection",
                f"δ_allow = L/{limit} = {delta_allow:.1f} mm, "
                f"I_req = {i_required:.3e} mm⁴, D = ∛(12I/b) = {d_deflection:.1f} mm",
                "δ = 5wL⁴/384EI",
            )
            self._add_calc_step(
                "Shear",
                f"V = wL/2 = {shear / 1000:.2f} kN, "
                f"D = 1.5V/(b·f_s) = {d_shear:.1f} mm",
                "Rectangular section peak shear stress",
            )

        return _DepthRequirement(
            net_depth=net_depth,
            depths=depths,
            governing=governing,
            design_load=w,
            self_weight=self_weight,
        )

    def _axial_requirement(
        self,
        request: SizingRequest,
        policy: MemberPolicy,
        material: MaterialProperties,
        net_width: float,
        self_weight: float,
    ) -> _DepthRequirement:
        """Net depth from axial stress and slenderness on the net width.

        ``self_weight`` is the column weight per storey; every storey's
        column is carried by the one below.
        """
        floor_load = self._base_line_load(request, policy)
        axial = self.config.design_load_factor * (floor_load + self_weight) * request.floors
        area_required = axial * 1000 / material.compressive_strength
        d_compression = area_required / net_width
        d_slenderness = request.span_m * 1000 / COLUMN_SLENDERNESS_DIVISOR

        depths = {
            GoverningCriterion.COMPRESSION: d_compression,
            GoverningCriterion.SLENDERNESS: d_slenderness,
        }
        governing = max(depths, key=depths.get)

        if self_weight == 0.0:
            self._add_calc_step(
                "Axial load",
                f"N = {self.config.design_load_factor} × ("
                f"{request.load_kpa + request.supported_dead_load_kpa:.2f} kPa × "
                f"{policy.tributary(request):.2f} m² + {request.additional_axial_kn:.2f} kN) × "
                f"{request.floors} floors = {axial:.1f} kN",
                "Tributary area × floors supported",
            )
            self._add_calc_step(
                "Compression and slenderness",
                f"A_req = N/f_c = {area_required:.0f} mm², D = A/b = {d_compression:.1f} mm; "
                f"D_min = H/{COLUMN_SLENDERNESS_DIVISOR} = {d_slenderness:.1f} mm",
                "Net section after charring",
            )

        return _DepthRequirement(
            net_depth=depths[governing],
            depths=depths,
            governing=governing,
            design_load=axial,
            self_weight=self_weight,
        )

    def _flexural_detail(
        self, request, policy, material, width, depth, allowance, sizing_width
    ) -> EngineeringDetail:
        w = self._design_line_load(request, policy, material, width, depth)
        L = request.span_m * 1000
        moment = w * L ** 2 / 8
        shear = w * L / 2
        inertia = width * depth ** 3 / 12
        section_modulus = width * depth ** 2 / 6
        limit = deflection_limit(request.load_kpa)
        delta_allow = L / limit
        delta = 5 * w * L ** 4 / (384 * material.modulus_of_elasticity * inertia)

        ratios = {
            "bending": moment / (material.bending_strength * section_modulus),
            "shear": RECTANGULAR_SHEAR_FACTOR * shear / (width * depth) / material.shear_strength,
            "deflection": delta / delta_allow,
        }
        net_width = width - policy.width_faces * allowance
        net_depth = depth - policy.depth_faces * allowance
        if allowance > 0 and net_width > 0 and net_depth > 0:
            ratios["fire_bending"] = moment / (
                material.bending_strength * net_width * net_depth ** 2 / 6
            )

        requirement = self._flexural_requirement(
            request, policy, material, max(sizing_width, MIN_NET_WIDTH),
            self_weight_per_metre(width, depth, material.density),
        )
        self._add_calc_step(
            "Final section check",
            f"{width:.0f}x{depth:.0f} mm: δ = {delta:.1f} mm ≤ {delta_allow:.1f} mm, "
            f"utilization = {max(ratios.values()):.2f}",
            "Gross section at ambient, residual section in fire",
        )
        return EngineeringDetail(
            bending_moment_knm=moment / 1e6,
            required_section_modulus_mm3=moment / material.bending_strength,
            moment_of_inertia_mm4=inertia,
            actual_deflection_mm=delta,
            allowable_deflection_mm=delta_allow,
            deflection_limit=limit,
            shear_force_kn=shear / 1000,
            required_depths_mm={k.value: v for k, v in requirement.depths.items()},
            utilization_ratios=ratios,
        )

    def _axial_detail(self, request, policy, material, width, depth, allowance) -> EngineeringDetail:
        storey_weight = self_weight_per_metre(width, depth, material.density) * request.span_m
        floor_load = self._base_line_load(request, policy)
        axial = self.config.design_load_factor * (floor_load + storey_weight) * request.floors
        net_width = max(width - policy.width_faces * allowance, MIN_NET_WIDTH)
        net_depth = depth - policy.depth_faces * allowance
        slender_depth = request.span_m * 1000 / COLUMN_SLENDERNESS_DIVISOR

        ratios = {
            "compression": axial * 1000 / (material.compressive_strength * width * depth),
            "slenderness": slender_depth / net_depth if net_depth > 0 else float("inf"),
        }
        if allowance > 0:
            ratios["fire_compression"] = (
                axial * 1000 / (material.compressive_strength * net_width * net_depth)
                if net_depth > 0 else float("inf")
            )

        self._add_calc_step(
            "Final section check",
            f"{width:.0f}x{depth:.0f} mm: N = {axial:.1f} kN, "
            f"utilization = {max(ratios.values()):.2f}",
            "Gross section at ambient, residual section in fire",
        )
        return EngineeringDetail(
            moment_of_inertia_mm4=depth * width ** 3 / 12,
            axial_load_kn=axial,
            required_area_mm2=axial * 1000 / material.compressive_strength,
            required_depths_mm={
                GoverningCriterion.COMPRESSION.value: axial * 1000
                / material.compressive_strength / net_width,
                GoverningCriterion.SLENDERNESS.value: slender_depth,
            },
            utilization_ratios=ratios,
        )


def solve(context: EngineContext, request: SizingRequest) -> SizingResult:
    """Size one member with the policy of its member type"""
    return SectionSizingSolver(context).solve(request)
