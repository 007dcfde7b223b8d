"""Hazardous-materials reference table embedded in every initial prompt."""

from types import MappingProxyType
from typing import Mapping, Tuple

HAZARDOUS_MATERIALS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "Lead": (
            "Lead-based paint (common in homes built before 1978)",
            "Lead water supply pipes and lead solder on copper pipes",
            "Lead-glazed ceramic tile",
            "Painted window sills, frames and trim",
            "Old vinyl mini-blinds",
        ),
        "Asbestos": (
            "Vinyl floor tiles, especially 9x9 inch tiles, and their adhesive",
            "Popcorn or textured acoustic ceilings",
            "Pipe, duct and boiler insulation wrap",
            "Vermiculite attic insulation",
            "Cement siding, roofing shingles and transite panels",
            "Joint compound, plaster and textured wall coatings",
        ),
        "Other hazards": (
            "Mercury in thermostats, switches and fluorescent tubes",
            "PCBs in caulk, window glazing and fluorescent light ballasts",
            "Creosote on railroad ties and treated wood",
            "Formaldehyde in older particleboard, paneling and foam insulation",
            "Mold behind walls, under flooring or around leaks",
        ),
    }
)


def format_hazard_table() -> str:
    """Render the table as a numbered reference list for the prompt."""
    sections = []
    for index, (category, items) in enumerate(HAZARDOUS_MATERIALS.items(), start=1):
        lines = [f"{index}. {category}:"]
        lines.extend(f"   - {item}" for item in items)
        sections.append("\n".join(lines))
    return "\n".join(sections)
