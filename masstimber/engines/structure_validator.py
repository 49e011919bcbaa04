"""
Structure Validator - cross-member consistency checks.
"""

import logging
from typing import List, Optional

from ..core.catalog import SizeCatalog
from ..core.constants import SNAP_TOLERANCE
from ..core.data_models import SizingResult, ValidationReport

logger = logging.getLogger(__name__)


class StructureValidator:
    """
    Inspects sized members without modifying them.

    Failures (``messages``) make the report invalid:
        - column width differs from the supporting beam width
        - a utilization ratio above 1.0 carries no warning
        - a catalog-sized member is not in the catalog (when one is given)
    Member warnings and fallback use are repeated as ``notices``.
    """

    def __init__(self, catalog: Optional[SizeCatalog] = None):
        self.catalog = catalog

    def validate(
        self,
        joist: SizingResult,
        beam: SizingResult,
        column: SizingResult,
        *others: SizingResult,
    ) -> ValidationReport:
        messages: List[str] = []
        notices: List[str] = []

        if abs(column.width_mm - beam.width_mm) > SNAP_TOLERANCE:
            messages.append(
                f"Column width {column.width_mm:.0f} mm does not match "
                f"beam width {beam.width_mm:.0f} mm"
            )

        for member in (joist, beam, column) + others:
            self._check_utilization(member, messages)
            self._check_catalog(member, messages)
            if member.using_fallback:
                notices.append(f"{member.element_type}: sized from standard fallback sizes")
            for warning in member.warnings:
                notices.append(f"{member.element_type}: {warning}")

        valid = not messages
        if valid:
            logger.info("Structure validation passed")
        else:
            for message in messages:
                logger.warning(f"Structure validation: {message}")
        return ValidationReport(valid=valid, messages=tuple(messages), notices=tuple(notices))

    @staticmethod
    def _check_utilization(member: SizingResult, messages: List[str]) -> None:
        over = {
            name: ratio
            for name, ratio in member.engineering.utilization_ratios.items()
            if ratio > 1.0
        }
        if over and not member.warnings:
            details = ", ".join(f"{name} {ratio:.2f}" for name, ratio in over.items())
            messages.append(
                f"{member.element_type} is over-utilized ({details}) without a warning"
            )

    def _check_catalog(self, member: SizingResult, messages: List[str]) -> None:
        if self.catalog is None or member.using_fallback:
            return
        if not self.catalog.contains(member.member_type, member.width_mm, member.depth_mm):
            messages.append(
                f"{member.element_type} size {member.size} is not a catalog "
                f"{member.member_type.value} section"
            )


def validate(
    joist: SizingResult,
    beam: SizingResult,
    column: SizingResult,
    catalog: Optional[SizeCatalog] = None,
) -> ValidationReport:
    """Check the three chained members for consistency"""
    return StructureValidator(catalog).validate(joist, beam, column)
