"""
Section Catalog - ingest, verification and snapping of manufactured sizes.

The catalog is an immutable snapshot built once from a feed of
``{type, width_mm, depth_mm}`` rows. Member types with no usable rows are
served by ``FallbackSizePolicy`` instead.
"""

import logging
from dataclasses import asdict, dataclass, is_dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .constants import SNAP_TOLERANCE
from .data_models import CatalogEntry, MemberType
from .section_tables import STANDARD_DEPTHS, STANDARD_WIDTHS

logger = logging.getLogger(__name__)

CatalogFeed = Union[pd.DataFrame, Iterable[Any], None]

CATALOG_COLUMNS = ["type", "width", "depth"]

# Header spellings seen in supplier CSV exports
COLUMN_ALIASES = {
    "member_type": "type",
    "membertype": "type",
    "element": "type",
    "width_mm": "width",
    "depth_mm": "depth",
    "b": "width",
    "d": "depth",
}

TYPE_ALIASES = {
    "joists": "joist",
    "beams": "beam",
    "columns": "column",
    "post": "column",
    "posts": "column",
}


@dataclass(frozen=True)
class SnapResult:
    """Catalog dimension chosen for a required value"""
    value: float
    exceeded: bool = False  # nothing large enough, largest returned


def _snap_up(available: np.ndarray, required: float) -> SnapResult:
    """Smallest available value >= required, else the largest with a flag."""
    index = int(np.searchsorted(available, required - SNAP_TOLERANCE, side="left"))
    if index >= len(available):
        return SnapResult(float(available[-1]), exceeded=True)
    return SnapResult(float(available[index]))


@dataclass(frozen=True)
class SectionTable:
    """Sorted widths and per-width depths for one member type"""
    member_type: MemberType
    widths: Tuple[float, ...]
    depths_by_width: Dict[float, Tuple[float, ...]]
    is_fallback: bool = False

    @property
    def all_depths(self) -> Tuple[float, ...]:
        merged = set()
        for depths in self.depths_by_width.values():
            merged.update(depths)
        return tuple(sorted(merged))

    def depths_for(self, width: float) -> Tuple[float, ...]:
        for candidate, depths in self.depths_by_width.items():
            if abs(candidate - width) <= SNAP_TOLERANCE:
                return depths
        return ()

    def snap_width(self, required: float) -> SnapResult:
        return _snap_up(np.asarray(self.widths, dtype=float), required)

    def snap_depth(self, width: float, required: float) -> SnapResult:
        """Snap a depth for the given width.

        Widths with no listed depths snap against every depth of the table.
        """
        depths = self.depths_for(width) or self.all_depths
        return _snap_up(np.asarray(depths, dtype=float), required)


@dataclass(frozen=True)
class FallbackSizePolicy:
    """Standard sizes used when the injected catalog has nothing for a member type"""
    widths: Tuple[float, ...] = tuple(float(w) for w in STANDARD_WIDTHS)
    depths: Tuple[float, ...] = tuple(float(d) for d in STANDARD_DEPTHS)

    def table_for(self, member_type: MemberType) -> SectionTable:
        return SectionTable(
            member_type=member_type,
            widths=self.widths,
            depths_by_width={width: self.depths for width in self.widths},
            is_fallback=True,
        )


@dataclass(frozen=True)
class CatalogReport:
    """Result of SizeCatalog.verify()"""
    missing_types: Tuple[MemberType, ...] = ()
    rejected_rows: int = 0
    duplicate_rows: int = 0

    @property
    def is_complete(self) -> bool:
        return not self.missing_types


def _rows_to_frame(feed: CatalogFeed) -> pd.DataFrame:
    if feed is None:
        return pd.DataFrame(columns=CATALOG_COLUMNS)
    if isinstance(feed, pd.DataFrame):
        return feed.copy()
    rows: List[Dict[str, Any]] = []
    for row in feed:
        if isinstance(row, CatalogEntry):
            rows.append({
                "type": row.member_type.value,
                "width": row.width_mm,
                "depth": row.depth_mm,
            })
        elif is_dataclass(row) and not isinstance(row, type):
            rows.append(asdict(row))
        elif isinstance(row, dict):
            rows.append(dict(row))
        else:
            logger.warning(f"Ignoring catalog row of unsupported type: {type(row).__name__}")
    return pd.DataFrame(rows)


def normalise_feed(feed: CatalogFeed) -> Tuple[pd.DataFrame, int, int]:
    """Clean a catalog feed into ``type``/``width``/``depth`` rows.

    Returns:
        (frame, rejected_rows, duplicate_rows)
    """
    frame = _rows_to_frame(feed)
    if frame.empty:
        return pd.DataFrame(columns=CATALOG_COLUMNS), 0, 0

    frame = frame.rename(columns=lambda column: str(column).strip().lower())
    frame = frame.rename(columns=COLUMN_ALIASES)
    missing = [column for column in CATALOG_COLUMNS if column not in frame.columns]
    if missing:
        logger.warning(f"Catalog feed is missing columns {missing}; ignoring {len(frame)} rows")
        return pd.DataFrame(columns=CATALOG_COLUMNS), len(frame), 0

    frame = frame[CATALOG_COLUMNS].copy()
    frame["type"] = frame["type"].astype(str).str.strip().str.lower().replace(TYPE_ALIASES)
    frame["width"] = pd.to_numeric(frame["width"], errors="coerce")
    frame["depth"] = pd.to_numeric(frame["depth"], errors="coerce")

    known_types = [member_type.value for member_type in MemberType]
    valid = (
        frame["type"].isin(known_types)
        & np.isfinite(frame["width"])
        & np.isfinite(frame["depth"])
        & (frame["width"] > 0)
        & (frame["depth"] > 0)
    )
    rejected = int((~valid).sum())
    if rejected:
        logger.warning(f"Dropped {rejected} malformed catalog rows")

    frame = frame.loc[valid]
    before = len(frame)
    frame = frame.drop_duplicates()
    duplicates = before - len(frame)
    if duplicates:
        logger.info(f"Removed {duplicates} duplicate catalog rows")

    frame = frame.sort_values(["type", "width", "depth"]).reset_index(drop=True)
    return frame, rejected, duplicates


class SizeCatalog:
    """Read-only snapshot of manufactured sections per member type."""

    def __init__(self, feed: CatalogFeed = None):
        frame, rejected, duplicates = normalise_feed(feed)
        self._frame = frame
        self._rejected = rejected
        self._duplicates = duplicates
        self._tables: Dict[MemberType, SectionTable] = {}
        for member_type in MemberType:
            subset = frame[frame["type"] == member_type.value]
            if subset.empty:
                continue
            widths = np.unique(subset["width"].to_numpy(dtype=float))
            depths_by_width = {
                float(width): tuple(
                    float(d) for d in np.unique(
                        subset.loc[subset["width"] == width, "depth"].to_numpy(dtype=float)
                    )
                )
                for width in widths
            }
            self._tables[member_type] = SectionTable(
                member_type=member_type,
                widths=tuple(float(w) for w in widths),
                depths_by_width=depths_by_width,
            )

    def __len__(self) -> int:
        return len(self._frame)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SizeCatalog):
            return NotImplemented
        return self._tables == other._tables

    def __hash__(self) -> int:
        return hash(tuple(sorted((k.value, v.widths) for k, v in self._tables.items())))

    def __repr__(self) -> str:
        counts = {k.value: sum(len(d) for d in v.depths_by_width.values())
                  for k, v in self._tables.items()}
        return f"SizeCatalog({counts})"

    @property
    def is_empty(self) -> bool:
        return not self._tables

    @property
    def member_types(self) -> Tuple[MemberType, ...]:
        return tuple(self._tables)

    def table(self, member_type: MemberType) -> Optional[SectionTable]:
        return self._tables.get(member_type)

    def entries(self) -> List[CatalogEntry]:
        return [
            CatalogEntry(MemberType(row.type), float(row.width), float(row.depth))
            for row in self._frame.itertuples(index=False)
        ]

    def to_frame(self) -> pd.DataFrame:
        return self._frame.copy()

    def contains(self, member_type: MemberType, width: float, depth: float) -> bool:
        """True if the exact size is manufactured for the member type"""
        table = self._tables.get(member_type)
        if table is None:
            return False
        return any(abs(d - depth) <= SNAP_TOLERANCE for d in table.depths_for(width))

    def verify(self) -> CatalogReport:
        missing = tuple(t for t in MemberType if t not in self._tables)
        if missing:
            logger.warning(
                f"Catalog has no sizes for: {', '.join(t.value for t in missing)}"
            )
        return CatalogReport(
            missing_types=missing,
            rejected_rows=self._rejected,
            duplicate_rows=self._duplicates,
        )
