"""
Tests for joist sizing

Tests cover:
- Reference joist (6 m span, 800 mm centres, 3 kPa)
- Fire rating increases depth by at least the charring allowance
- Deflection enforced at short spans
- Input validation
- Monotonicity and repeatability
- Fallback sizes, capacity exceeded and unknown grades
"""

import math

import pytest

from masstimber.core.config import EngineConfig
from masstimber.core.context import initialize
from masstimber.core.data_models import GoverningCriterion, MemberType
from masstimber.core.exceptions import ValidationError
from masstimber.core.section_tables import STANDARD_DEPTHS
from masstimber.engines.fire_engine import fire_allowance
from masstimber.engines.joist_engine import JoistEngine, size_joist


class TestReferenceJoist:
    """6 m span, 800 mm spacing, 3 kPa, default grade, no fire rating."""

    def test_size_and_governing_criterion(self, context):
        result = size_joist(context, 6.0, 800, 3.0)

        assert result.member_type is MemberType.JOIST
        assert result.width_mm == 120
        assert result.depth_mm == 335
        assert result.governing_criterion is GoverningCriterion.DEFLECTION
        assert result.grade == "ML38"
        assert result.size == "120 × 335 mm"

    def test_commercial_deflection_limit(self, context):
        """3 kPa falls in the L/360 class."""
        result = size_joist(context, 6.0, 800, 3.0)
        assert result.engineering.deflection_limit == 360
        assert result.engineering.allowable_deflection_mm == pytest.approx(6000 / 360)
        assert result.engineering.actual_deflection_mm <= result.engineering.allowable_deflection_mm

    def test_depth_from_catalog(self, context):
        result = size_joist(context, 6.0, 800, 3.0)
        assert result.depth_mm in STANDARD_DEPTHS

    def test_result_ok(self, context):
        result = size_joist(context, 6.0, 800, 3.0)
        assert result.status == "OK"
        assert result.warnings == ()
        assert 0 < result.utilization <= 1.0
        assert not result.using_fallback
        assert not result.capacity_exceeded

    def test_required_depths_recorded(self, context):
        result = size_joist(context, 6.0, 800, 3.0)
        depths = result.engineering.required_depths_mm
        assert depths["deflection"] > depths["bending"] > depths["shear"]
        assert depths["deflection"] <= result.depth_mm

    def test_calculation_trail(self, context):
        result = size_joist(context, 6.0, 800, 3.0)
        descriptions = [step["description"] for step in result.calculations]
        assert descriptions[0] == "JOIST SIZING"
        assert "Deflection" in descriptions
        assert "Catalog snap" in descriptions
        assert descriptions[-1] == "Final section check"

    def test_self_weight(self, context):
        result = size_joist(context, 6.0, 800, 3.0)
        assert result.self_weight_kn_m == pytest.approx(0.12 * 0.335 * 600 * 9.81 / 1000)
        assert result.self_weight_kpa == pytest.approx(result.self_weight_kn_m / 0.8)
        assert result.iterations == 1


class TestFireRating:
    """Fire-rated joists."""

    def test_depth_increase_at_least_allowance(self, context):
        unrated = size_joist(context, 6.0, 800, 3.0)
        rated = size_joist(context, 6.0, 800, 3.0, fire_rating="60/60/60")

        assert rated.fire_allowance_mm == pytest.approx(49.0)
        assert rated.depth_mm >= unrated.depth_mm + fire_allowance("60/60/60")
        assert rated.width_mm == 165
        assert rated.depth_mm == 480

    def test_residual_section(self, context):
        rated = size_joist(context, 6.0, 800, 3.0, fire_rating="60/60/60")
        assert rated.residual_width_mm == pytest.approx(165 - 2 * 49)
        assert rated.residual_depth_mm == pytest.approx(480 - 49)
        assert "fire_bending" in rated.engineering.utilization_ratios

    @pytest.mark.parametrize("label", ["30/30/30", "60/60/60", "90/90/90", "120/120/120"])
    def test_every_rating_at_least_as_deep_as_unrated(self, fine_context, label):
        unrated = size_joist(fine_context, 5.0, 600, 2.5)
        rated = size_joist(fine_context, 5.0, 600, 2.5, fire_rating=label)
        assert rated.depth_mm >= unrated.depth_mm + fire_allowance(label)

    def test_unknown_rating_warns_without_allowance(self, context):
        result = size_joist(context, 6.0, 800, 3.0, fire_rating="45/45/45")
        assert result.fire_allowance_mm == 0.0
        assert result.depth_mm == 335
        assert result.status == "WARNING"
        assert any("not recognised" in warning for warning in result.warnings)


class TestShortSpanDeflection:
    """Deflection is checked at every span, including short ones."""

    def test_three_metre_span(self, fine_context):
        result = size_joist(fine_context, 3.0, 800, 3.0)

        assert result.governing_criterion is GoverningCriterion.DEFLECTION
        assert result.depth_mm == 150
        assert result.engineering.actual_deflection_mm <= result.engineering.allowable_deflection_mm
        assert result.engineering.required_depths_mm["bending"] < 140

    @pytest.mark.parametrize("span", [2.0, 2.5, 3.0, 3.5, 4.0])
    def test_short_spans_meet_deflection_limit(self, fine_context, span):
        result = size_joist(fine_context, span, 600, 4.0)
        assert result.engineering.actual_deflection_mm <= result.engineering.allowable_deflection_mm

    def test_minimum_depth_governs(self, context):
        result = size_joist(context, 2.0, 400, 1.5)
        assert result.governing_criterion is GoverningCriterion.MINIMUM_DEPTH
        assert result.depth_mm == 200
        assert result.engineering.required_depths_mm["deflection"] < 140


class TestValidation:
    """Invalid inputs raise ValidationError."""

    @pytest.mark.parametrize("span, spacing, load", [
        (0.0, 800, 3.0),
        (-6.0, 800, 3.0),
        (float("nan"), 800, 3.0),
        (6.0, 0, 3.0),
        (6.0, float("inf"), 3.0),
        (6.0, 800, 0.0),
        (6.0, 800, -1.0),
    ])
    def test_invalid_inputs(self, context, span, spacing, load):
        with pytest.raises(ValidationError):
            size_joist(context, span, spacing, load)

    def test_missing_spacing(self, context):
        with pytest.raises(ValidationError) as exc_info:
            size_joist(context, 6.0, None, 3.0)
        assert exc_info.value.field == "spacing_mm"

    def test_string_input_rejected(self, context):
        with pytest.raises(ValidationError):
            size_joist(context, "6", 800, 3.0)


class TestBehaviour:
    """Monotonicity, repeatability and degraded cases."""

    def test_depth_non_decreasing_with_span(self, context):
        depths = [size_joist(context, span, 800, 3.0).depth_mm for span in range(2, 13)]
        assert depths == sorted(depths)

    def test_depth_non_decreasing_with_load(self, context):
        depths = [size_joist(context, 6.0, 800, load).depth_mm for load in (1.5, 2.0, 3.0, 4.0, 5.0, 7.5)]
        assert depths == sorted(depths)

    def test_idempotent(self, context):
        engine = JoistEngine(context)
        first = engine.calculate(6.0, 800, 3.0)
        second = engine.calculate(6.0, 800, 3.0)
        assert first == second

    def test_fallback_sizes(self, empty_context):
        result = size_joist(empty_context, 6.0, 800, 3.0)
        assert result.using_fallback
        assert result.width_mm == 120
        assert result.depth_mm == 335
        assert result.status == "WARNING"

    def test_capacity_exceeded(self, context):
        result = size_joist(context, 20.0, 800, 3.0)
        assert result.capacity_exceeded
        assert result.depth_mm == max(STANDARD_DEPTHS)
        assert result.utilization > 1.0
        assert result.status == "FAIL"
        assert any("exceeds 1.0" in warning for warning in result.warnings)

    def test_unknown_grade_uses_default(self, context):
        result = size_joist(context, 6.0, 800, 3.0, grade="C24")
        assert result.grade == "ML38"
        assert result.depth_mm == 335
        assert any("C24" in warning for warning in result.warnings)

    def test_weaker_grade_needs_more_depth(self, context):
        strong = size_joist(context, 6.0, 800, 3.0, grade="ML38")
        weak = size_joist(context, 6.0, 800, 3.0, grade="GL18")
        assert weak.depth_mm >= strong.depth_mm

    def test_iterate_policy_converges(self):
        context = initialize(config=EngineConfig(self_weight_policy="iterate"))
        result = size_joist(context, 6.0, 800, 3.0)
        assert result.depth_mm == 335
        assert 1 <= result.iterations <= 10

    def test_load_factor_from_config(self):
        context = initialize(config=EngineConfig(design_load_factor=1.0))
        result = size_joist(context, 6.0, 800, 3.0)
        assert result.line_load_kn_m == pytest.approx(2.4 + result.self_weight_kn_m)
        assert math.isclose(result.engineering.bending_moment_knm, result.line_load_kn_m * 36 / 8)
