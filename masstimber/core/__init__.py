# Core data, tables and engine context
from .data_models import (
    MemberType,
    FireRating,
    GoverningCriterion,
    MaterialProperties,
    CatalogEntry,
    SizingRequest,
    SizingResult,
    BuildingInput,
)
from .exceptions import SizingError, ValidationError
from .config import EngineConfig
from .catalog import SizeCatalog, FallbackSizePolicy
from .materials import MaterialPropertyProvider
from .context import EngineContext, initialize
