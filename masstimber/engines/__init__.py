# Sizing engines
from .fire_engine import fire_allowance, fire_rating_width, residual_section
from .geometry_engine import GeometryResolver
from .sizing_engine import SectionSizingSolver, MemberPolicy, JOIST_POLICY, BEAM_POLICY, COLUMN_POLICY
from .joist_engine import JoistEngine, size_joist
from .beam_engine import BeamEngine, size_beam
from .column_engine import ColumnEngine, size_column
from .structure_validator import StructureValidator, validate
from .structure_engine import StructureEngine, size_structure
from .span_tables import beam_span_table, joist_span_table
