"""
Structure Engine - sizes a whole floor system and tallies quantities.

Chaining: joist self-weight is carried by the beams, beam self-weight and
joist self-weight by the columns, and each column carries every floor above.
"""

import logging
import math
from typing import List

from ..core.context import EngineContext
from ..core.data_models import (
    BayLayout,
    BuildingInput,
    MemberQuantity,
    SizingResult,
    StructureQuantities,
    StructureResult,
)
from .beam_engine import BeamEngine
from .column_engine import ColumnEngine
from .geometry_engine import GeometryResolver
from .joist_engine import JoistEngine
from .structure_validator import StructureValidator

logger = logging.getLogger(__name__)


class StructureEngine:
    """
    Runs geometry → joist → beams → column → validation for one building.
    """

    def __init__(self, context: EngineContext):
        self.context = context
        self.geometry = GeometryResolver()
        self.joist_engine = JoistEngine(context)
        self.beam_engine = BeamEngine(context)
        self.column_engine = ColumnEngine(context)
        self.validator = StructureValidator(context.catalog)

    def calculate(self, building: BuildingInput) -> StructureResult:
        layout = self.geometry.resolve(building)
        grade = building.grade
        fire_rating = building.fire_rating

        joist = self.joist_engine.calculate(
            layout.joist_span_m,
            building.joist_spacing_mm,
            building.load_kpa,
            grade,
            fire_rating,
        )

        joist_dead_load = joist.self_weight_kpa
        interior_beam, edge_beam = self.beam_engine.calculate_pair(
            layout.beam_span_m,
            building.load_kpa,
            grade,
            layout.interior_tributary_m,
            fire_rating,
            supported_dead_load_kpa=joist_dead_load,
        )

        # beams frame into the column along the beam span direction
        if layout.joists_run_lengthwise:
            beam_length_per_column = layout.column_bay_length_m
        else:
            beam_length_per_column = layout.column_bay_width_m
        beam_weight = interior_beam.self_weight_kn_m * beam_length_per_column

        column = self.column_engine.calculate(
            interior_beam.width_mm,
            building.load_kpa,
            building.floor_height_m,
            building.floors,
            fire_rating,
            layout.column_bay_length_m,
            layout.column_bay_width_m,
            grade,
            additional_axial_kn=beam_weight,
            supported_dead_load_kpa=joist_dead_load,
        )

        validation = self.validator.validate(joist, interior_beam, column, edge_beam)
        quantities = self.calculate_quantities(
            layout, building, joist, interior_beam, edge_beam, column
        )

        logger.info(
            f"Structure sized: joist {joist.size}, beam {interior_beam.size}, "
            f"edge beam {edge_beam.size}, column {column.size}; "
            f"{quantities.total_volume_m3:.1f} m³ timber"
        )
        return StructureResult(
            building=building,
            layout=layout,
            joist=joist,
            interior_beam=interior_beam,
            edge_beam=edge_beam,
            column=column,
            validation=validation,
            quantities=quantities,
        )

    def calculate_quantities(
        self,
        layout: BayLayout,
        building: BuildingInput,
        joist: SizingResult,
        interior_beam: SizingResult,
        edge_beam: SizingResult,
        column: SizingResult,
    ) -> StructureQuantities:
        """Member counts, volumes and mass over all floors"""
        if layout.joists_run_lengthwise:
            joist_bays, beam_bays = layout.widthwise_bay_widths, layout.lengthwise_bay_widths
        else:
            joist_bays, beam_bays = layout.lengthwise_bay_widths, layout.widthwise_bay_widths
        floors = building.floors
        spacing_m = building.joist_spacing_mm / 1000

        # joists in every bay, spaced along the beam direction
        joists_per_line = [self._joists_in_bay(bay, spacing_m) for bay in beam_bays]
        joist_count = len(joist_bays) * sum(joists_per_line) * floors
        joist_length = sum(joist_bays) * sum(joists_per_line) * floors

        # beam lines sit on every grid line across the joist span
        beam_line_length = sum(beam_bays)
        edge_lines = 2
        interior_lines = len(joist_bays) - 1

        columns_per_floor = (layout.lengthwise_bays + 1) * (layout.widthwise_bays + 1)

        items: List[MemberQuantity] = [
            self._quantity(joist, joist_count, joist_length),
            self._quantity(
                interior_beam,
                interior_lines * len(beam_bays) * floors,
                interior_lines * beam_line_length * floors,
            ),
            self._quantity(
                edge_beam,
                edge_lines * len(beam_bays) * floors,
                edge_lines * beam_line_length * floors,
            ),
            self._quantity(
                column,
                columns_per_floor * floors,
                columns_per_floor * floors * building.floor_height_m,
            ),
        ]
        return StructureQuantities(items=tuple(items))

    @staticmethod
    def _joists_in_bay(bay_m: float, spacing_m: float) -> int:
        return math.ceil(round(bay_m / spacing_m, 9)) + 1

    def _quantity(self, member: SizingResult, count: int, total_length_m: float) -> MemberQuantity:
        density = self.context.materials.get(member.grade).density
        volume = member.width_mm / 1000 * member.depth_mm / 1000 * total_length_m
        return MemberQuantity(
            label=member.element_type,
            member_type=member.member_type,
            count=count,
            width_mm=member.width_mm,
            depth_mm=member.depth_mm,
            total_length_m=total_length_m,
            volume_m3=volume,
            mass_kg=volume * density,
        )


def size_structure(context: EngineContext, building: BuildingInput) -> StructureResult:
    """Size joists, beams and columns of a building and validate them"""
    return StructureEngine(context).calculate(building)
