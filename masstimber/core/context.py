"""
Engine context - the explicit, immutable initialisation of catalog and
material tables shared by every sizing call.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Tuple

from .catalog import CatalogFeed, FallbackSizePolicy, SectionTable, SizeCatalog
from .config import EngineConfig
from .data_models import MaterialProperties, MemberType
from .materials import MaterialPropertyProvider
from .section_tables import masslam_catalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineContext:
    """Immutable snapshot passed into every sizing call."""
    catalog: SizeCatalog
    materials: MaterialPropertyProvider
    config: EngineConfig = field(default_factory=EngineConfig)
    fallback: FallbackSizePolicy = field(default_factory=FallbackSizePolicy)

    def section_table(self, member_type: MemberType) -> SectionTable:
        """Catalog table for a member type, or the fallback table if it has none"""
        table = self.catalog.table(member_type)
        if table is None:
            logger.debug(f"No catalog sizes for {member_type.value}, using standard fallback sizes")
            return self.fallback.table_for(member_type)
        return table

    def material(self, grade: Optional[str]) -> Tuple[str, MaterialProperties, bool]:
        return self.materials.resolve(grade)

    def with_catalog(self, catalog_feed: CatalogFeed) -> "EngineContext":
        """New context with a replaced catalog snapshot"""
        return replace(self, catalog=SizeCatalog(catalog_feed))


def initialize(
    catalog_feed: CatalogFeed = None,
    property_feed: Optional[Mapping[str, Any]] = None,
    config: Optional[EngineConfig] = None,
) -> EngineContext:
    """Build the engine context.

    Args:
        catalog_feed: Catalog rows; None loads the built-in MASSLAM catalog,
            an empty feed forces the standard fallback sizes
        property_feed: Grade → properties, merged over the built-in grades
        config: Engine configuration (defaults if omitted)

    Returns:
        EngineContext; equal inputs give equal contexts
    """
    config = config or EngineConfig()
    if catalog_feed is None:
        catalog_feed = masslam_catalog()
    catalog = SizeCatalog(catalog_feed)
    materials = MaterialPropertyProvider(property_feed, default_grade=config.default_grade)

    report = catalog.verify()
    logger.info(
        f"Engine initialised: {len(catalog)} catalog sections, "
        f"{len(materials.grades)} grades, default grade {materials.default_grade}"
    )
    if not report.is_complete:
        logger.warning(
            "Fallback sizes will be used for: "
            f"{', '.join(t.value for t in report.missing_types)}"
        )
    return EngineContext(catalog=catalog, materials=materials, config=config)
