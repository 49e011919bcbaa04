"""
Tests for StructureValidator cross-member checks.
"""

from dataclasses import replace

import pytest

from masstimber.engines.beam_engine import size_beam
from masstimber.engines.column_engine import size_column
from masstimber.engines.joist_engine import size_joist
from masstimber.engines.structure_validator import StructureValidator, validate


@pytest.fixture
def members(context):
    joist = size_joist(context, 6.0, 800, 3.0)
    beam = size_beam(context, 6.0, 3.0, tributary_width_m=6.0)
    column = size_column(context, beam.width_mm, 3.0, 3.0, 3, bay_length_m=6.0, bay_width_m=6.0)
    return joist, beam, column


class TestStructureValidator:
    """Tests for validate()."""

    def test_consistent_members_valid(self, context, members):
        report = validate(*members, catalog=context.catalog)
        assert report.valid
        assert report.messages == ()

    def test_width_mismatch(self, members):
        joist, beam, column = members
        wide_column = replace(column, width_mm=165.0)
        report = validate(joist, beam, wide_column)
        assert not report.valid
        assert any("does not match" in message for message in report.messages)

    def test_over_utilization_without_warning(self, context, members):
        joist, beam, column = members
        overloaded = size_joist(context, 20.0, 800, 3.0)
        assert overloaded.warnings

        report = validate(overloaded, beam, column)
        assert report.valid

        silent = replace(overloaded, warnings=())
        report = validate(silent, beam, column)
        assert not report.valid
        assert any("over-utilized" in message for message in report.messages)

    def test_size_not_in_catalog(self, context, members):
        joist, beam, column = members
        odd = replace(joist, depth_mm=333.0)
        assert validate(odd, beam, column).valid
        report = validate(odd, beam, column, catalog=context.catalog)
        assert not report.valid
        assert any("not a catalog" in message for message in report.messages)

    def test_warnings_become_notices(self, context, members):
        _, beam, column = members
        joist = size_joist(context, 6.0, 800, 3.0, grade="C24")
        report = StructureValidator().validate(joist, beam, column)
        assert report.valid
        assert any(notice.startswith("Joist:") for notice in report.notices)

    def test_does_not_mutate_inputs(self, members):
        before = tuple(members)
        validate(*members)
        assert tuple(members) == before

    def test_extra_members_checked(self, members):
        joist, beam, column = members
        silent = replace(joist, width_mm=120.0, warnings=(), engineering=replace(
            joist.engineering, utilization_ratios={"bending": 1.2}
        ))
        report = StructureValidator().validate(joist, beam, column, silent)
        assert not report.valid
