"""
Tests for MaterialPropertyProvider and MaterialProperties validation.
"""

import pytest

from masstimber.core.data_models import MaterialProperties
from masstimber.core.exceptions import ValidationError
from masstimber.core.materials import MaterialPropertyProvider
from masstimber.core.section_tables import TIMBER_GRADES


CUSTOM_GRADE = {
    "bendingStrength": 30,
    "tensileStrength": 15,
    "compressiveStrength": 28,
    "shearStrength": 4.5,
    "modulusOfElasticity": 12000,
    "density": 550,
}


class TestMaterialProperties:
    """Tests for MaterialProperties."""

    def test_builtin_grades_valid(self):
        assert "ML38" in TIMBER_GRADES
        assert TIMBER_GRADES["ML38"].bending_strength == 38

    @pytest.mark.parametrize("value", [0, -1.0, float("nan"), "38"])
    def test_invalid_values_rejected(self, value):
        with pytest.raises(ValidationError) as exc_info:
            MaterialProperties(
                bending_strength=value,
                tensile_strength=19,
                compressive_strength=38,
                shear_strength=5.0,
                modulus_of_elasticity=14500,
                density=600,
            )
        assert exc_info.value.field == "bending_strength"


class TestMaterialPropertyProvider:
    """Tests for grade lookup."""

    def test_default_grade(self):
        provider = MaterialPropertyProvider()
        grade, props, fell_back = provider.resolve(None)
        assert grade == "ML38"
        assert props == TIMBER_GRADES["ML38"]
        assert not fell_back

    def test_lookup_is_case_insensitive(self):
        provider = MaterialPropertyProvider()
        grade, _, fell_back = provider.resolve(" gl24 ")
        assert grade == "GL24"
        assert not fell_back

    def test_unknown_grade_falls_back(self):
        provider = MaterialPropertyProvider()
        grade, props, fell_back = provider.resolve("C24")
        assert grade == "ML38"
        assert props == TIMBER_GRADES["ML38"]
        assert fell_back

    def test_feed_with_camel_case_keys(self):
        provider = MaterialPropertyProvider({"custom30": CUSTOM_GRADE})
        assert provider.has_grade("CUSTOM30")
        assert provider.get("custom30").modulus_of_elasticity == 12000
        assert provider.get("custom30").density == 550

    def test_feed_overrides_builtin_grade(self):
        provider = MaterialPropertyProvider({"ML38": CUSTOM_GRADE})
        assert provider.get("ML38").bending_strength == 30

    def test_invalid_feed_entry_skipped(self):
        provider = MaterialPropertyProvider({
            "broken": {"bendingStrength": 30},
            "negative": dict(CUSTOM_GRADE, density=-1),
        })
        assert not provider.has_grade("BROKEN")
        assert not provider.has_grade("NEGATIVE")
        assert provider.has_grade("ML38")

    def test_configured_default_grade(self):
        provider = MaterialPropertyProvider(default_grade="gl21")
        assert provider.resolve(None)[0] == "GL21"

    def test_missing_default_grade_uses_ml38(self):
        provider = MaterialPropertyProvider(default_grade="NOPE")
        assert provider.default_grade == "ML38"

    def test_equal_feeds_give_equal_providers(self):
        assert MaterialPropertyProvider({"x": CUSTOM_GRADE}) == MaterialPropertyProvider({"X": CUSTOM_GRADE})
