"""
Tests for column sizing

Tests cover:
- Slenderness, compression and proportion governed columns
- Column width taken from the supporting beam
- Load accumulation over floors
- Fire-rated columns charred on four faces
- Input validation
"""

import pytest

from masstimber.core.data_models import GoverningCriterion, MemberType
from masstimber.core.exceptions import ValidationError
from masstimber.engines.beam_engine import size_beam
from masstimber.engines.column_engine import ColumnEngine, size_column


class TestColumnSizing:
    """Column depth for typical and heavy loads."""

    def test_slenderness_governs_light_column(self, context):
        result = size_column(context, 120, 3.0, 3.0, 3, bay_length_m=6.0, bay_width_m=6.0)

        assert result.member_type is MemberType.COLUMN
        assert result.width_mm == 120
        assert result.depth_mm == 165
        assert result.governing_criterion is GoverningCriterion.SLENDERNESS
        assert result.status == "OK"

    def test_axial_load_accumulates_over_floors(self, context):
        result = size_column(context, 120, 3.0, 3.0, 3, bay_length_m=6.0, bay_width_m=6.0)
        storey_weight = result.self_weight_kn_m * 3.0
        expected = 1.5 * (3.0 * 36.0 + storey_weight) * 3
        assert result.engineering.axial_load_kn == pytest.approx(expected)

    def test_compression_governs_heavy_column(self, context):
        result = size_column(context, 250, 5.0, 3.0, 10, bay_length_m=8.0, bay_width_m=8.0)
        assert result.width_mm == 250
        assert result.depth_mm == 550
        assert result.governing_criterion is GoverningCriterion.COMPRESSION

    def test_more_floors_never_shallower(self, context):
        depths = [
            size_column(context, 205, 4.0, 3.0, floors, bay_length_m=7.0, bay_width_m=7.0).depth_mm
            for floors in range(1, 13)
        ]
        assert depths == sorted(depths)

    def test_depth_at_least_width(self, context):
        result = size_column(context, 450, 3.0, 3.0, 1, bay_length_m=6.0, bay_width_m=6.0)
        assert result.depth_mm == 450
        assert result.governing_criterion is GoverningCriterion.PROPORTION

    def test_additional_axial_load(self, context):
        engine = ColumnEngine(context)
        bare = engine.calculate(205, 3.0, 3.0, 4, bay_length_m=6.0, bay_width_m=6.0)
        loaded = engine.calculate(
            205, 3.0, 3.0, 4, bay_length_m=6.0, bay_width_m=6.0, additional_axial_kn=10.0
        )
        assert loaded.engineering.axial_load_kn > bare.engineering.axial_load_kn


class TestBeamWidthParity:
    """Column width always equals the supporting beam width."""

    @pytest.mark.parametrize("fire_rating", ["none", "30/30/30", "90/90/90", "120/120/120"])
    def test_width_follows_beam(self, context, fire_rating):
        beam = size_beam(context, 6.0, 3.0, tributary_width_m=6.0, fire_rating=fire_rating)
        column = size_column(
            context, beam.width_mm, 3.0, 3.0, 4,
            fire_rating=fire_rating, bay_length_m=6.0, bay_width_m=6.0,
        )
        assert column.width_mm == beam.width_mm

    def test_width_not_in_column_table(self, context):
        """Unlisted widths keep the beam width and snap against every listed depth."""
        result = size_column(context, 100, 3.0, 3.0, 1, bay_length_m=6.0, bay_width_m=6.0)
        assert result.width_mm == 100
        assert result.depth_mm == 165
        assert result.status == "WARNING"
        assert any("width 100" in warning for warning in result.warnings)


class TestFireRatedColumn:
    """Columns char on all four faces."""

    def test_sixty_minute_column(self, context):
        result = size_column(
            context, 165, 3.0, 3.0, 1,
            fire_rating="60/60/60", bay_length_m=6.0, bay_width_m=6.0,
        )
        assert result.fire_allowance_mm == pytest.approx(49.0)
        assert result.depth_mm == 250
        assert result.residual_depth_mm == pytest.approx(250 - 2 * 49)
        assert result.residual_width_mm == pytest.approx(165 - 2 * 49)
        assert "fire_compression" in result.engineering.utilization_ratios


class TestColumnValidation:
    """Invalid column inputs."""

    def test_missing_bay_length(self, context):
        with pytest.raises(ValidationError) as exc_info:
            size_column(context, 120, 3.0, 3.0, 1, bay_width_m=6.0)
        assert exc_info.value.field == "bay_length_m"

    def test_zero_bay_width(self, context):
        with pytest.raises(ValidationError):
            size_column(context, 120, 3.0, 3.0, 1, bay_length_m=6.0, bay_width_m=0.0)

    def test_missing_beam_width(self, context):
        with pytest.raises(ValidationError):
            size_column(context, None, 3.0, 3.0, 1, bay_length_m=6.0, bay_width_m=6.0)

    @pytest.mark.parametrize("floors", [0, -1, 2.5, True])
    def test_invalid_floors(self, context, floors):
        with pytest.raises(ValidationError):
            size_column(context, 120, 3.0, 3.0, floors, bay_length_m=6.0, bay_width_m=6.0)
