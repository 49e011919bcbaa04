"""
Unit tests for engine configuration and context initialisation.

Tests cover:
- EngineConfig defaults and validation
- Environment variable loading
- .env file loading
- initialize() with default, custom and empty catalogs
"""

import logging
import os

import pytest

from masstimber.core.config import EngineConfig
from masstimber.core.context import initialize
from masstimber.core.data_models import MemberType
from masstimber.core.exceptions import SizingError, ValidationError


ENV_KEYS = [
    "MASSTIMBER_DEFAULT_GRADE",
    "MASSTIMBER_CHARRING_RATE",
    "MASSTIMBER_ZERO_STRENGTH_LAYER",
    "MASSTIMBER_LOAD_FACTOR",
    "MASSTIMBER_SELF_WEIGHT_POLICY",
    "MASSTIMBER_MAX_ITERATIONS",
    "MASSTIMBER_CONVERGENCE_TOLERANCE",
]


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestEngineConfig:
    """Tests for EngineConfig initialization and validation."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.default_grade == "ML38"
        assert config.charring_rate == 0.7
        assert config.zero_strength_layer == 7.0
        assert config.design_load_factor == 1.5
        assert config.self_weight_policy == "single"
        assert not config.iterate_self_weight

    def test_iterate_policy(self):
        assert EngineConfig(self_weight_policy="iterate").iterate_self_weight

    @pytest.mark.parametrize("kwargs", [
        {"default_grade": ""},
        {"charring_rate": -0.1},
        {"zero_strength_layer": -1},
        {"design_load_factor": 0},
        {"self_weight_policy": "twice"},
        {"max_iterations": 0},
        {"convergence_tolerance_mm": 0},
    ])
    def test_invalid_values_raise(self, kwargs):
        with pytest.raises(ValueError):
            EngineConfig(**kwargs)


class TestFromEnv:
    """Tests for EngineConfig.from_env()."""

    def test_defaults_without_variables(self, clean_env):
        assert EngineConfig.from_env() == EngineConfig()

    def test_reads_variables(self, clean_env, monkeypatch):
        monkeypatch.setenv("MASSTIMBER_DEFAULT_GRADE", "gl24")
        monkeypatch.setenv("MASSTIMBER_CHARRING_RATE", "0.65")
        monkeypatch.setenv("MASSTIMBER_LOAD_FACTOR", "1.2")
        monkeypatch.setenv("MASSTIMBER_SELF_WEIGHT_POLICY", "ITERATE")
        monkeypatch.setenv("MASSTIMBER_MAX_ITERATIONS", "5")

        config = EngineConfig.from_env()

        assert config.default_grade == "GL24"
        assert config.charring_rate == 0.65
        assert config.design_load_factor == 1.2
        assert config.iterate_self_weight
        assert config.max_iterations == 5

    def test_bad_number_raises(self, clean_env, monkeypatch):
        monkeypatch.setenv("MASSTIMBER_CHARRING_RATE", "fast")
        with pytest.raises(ValueError, match="MASSTIMBER"):
            EngineConfig.from_env()

    def test_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "MASSTIMBER_DEFAULT_GRADE=GL21\n"
            "MASSTIMBER_ZERO_STRENGTH_LAYER=0\n"
        )
        try:
            config = EngineConfig.from_env(str(env_file))
            assert config.default_grade == "GL21"
            assert config.zero_strength_layer == 0.0
        finally:
            for key in ENV_KEYS:
                os.environ.pop(key, None)

    def test_missing_env_file_raises(self, clean_env, tmp_path):
        with pytest.raises(FileNotFoundError):
            EngineConfig.from_env(str(tmp_path / "missing.env"))


class TestInitialize:
    """Tests for initialize() and EngineContext."""

    def test_default_context_uses_builtin_catalog(self, context):
        assert not context.catalog.is_empty
        assert context.catalog.verify().is_complete
        assert not context.section_table(MemberType.BEAM).is_fallback

    def test_empty_catalog_uses_fallback(self, empty_context):
        assert empty_context.catalog.is_empty
        for member_type in MemberType:
            assert empty_context.section_table(member_type).is_fallback

    def test_fallback_warned_once(self, caplog):
        """Fallback is reported at initialisation, not on every table lookup."""
        with caplog.at_level(logging.WARNING, logger="masstimber"):
            context = initialize([])
            warnings_at_init = len(caplog.records)
            for _ in range(5):
                context.section_table(MemberType.JOIST)
        assert warnings_at_init >= 1
        assert len(caplog.records) == warnings_at_init

    def test_equal_inputs_give_equal_contexts(self):
        assert initialize() == initialize()

    def test_config_default_grade_applied(self):
        context = initialize(config=EngineConfig(default_grade="GL24"))
        assert context.material(None)[0] == "GL24"

    def test_with_catalog_replaces_snapshot(self, context):
        replaced = context.with_catalog([{"type": "joist", "width": 120, "depth": 200}])
        assert replaced.catalog != context.catalog
        assert replaced.materials == context.materials
        assert replaced.section_table(MemberType.BEAM).is_fallback


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_validation_error_is_sizing_error(self):
        assert issubclass(ValidationError, SizingError)

    def test_str_includes_field_and_value(self):
        error = ValidationError("span_m must be greater than zero", field="span_m", value=0)
        assert str(error) == "span_m must be greater than zero | field=span_m | value=0"
        assert error.field == "span_m"
