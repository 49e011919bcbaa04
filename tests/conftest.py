import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from masstimber.core.context import initialize
from masstimber.core.data_models import MemberType
from masstimber.core.section_tables import STANDARD_WIDTHS


def fine_catalog_rows():
    """Catalog rows with depths every 10 mm, for tests that need tight snapping."""
    rows = []
    for member_type in MemberType:
        for width in STANDARD_WIDTHS:
            for depth in range(100, 710, 10):
                rows.append({"type": member_type.value, "width": width, "depth": depth})
    return rows


@pytest.fixture
def context():
    """Engine context with the built-in MASSLAM catalog."""
    return initialize()


@pytest.fixture
def fine_context():
    return initialize(fine_catalog_rows())


@pytest.fixture
def empty_context():
    """Context whose catalog is empty, so every member uses fallback sizes."""
    return initialize([])
