"""
Heightmap templates.

Each template is a list of terrain commands, one per line:

    Command  count/value  height/range  x-range  y-range

Coordinates are percentages of the map size and heights use the 0-100
scale with the land threshold at 20, so a template works for any grid.
"""

from typing import Dict, List

TEMPLATES: Dict[str, str] = {
    "continents": """
Hill 1 80-85 60-80 40-60
Hill 1 80-85 20-30 40-60
Hill 6-7 15-30 25-75 15-85
Multiply 0.6 land 0 0
Hill 8-10 5-10 15-85 20-80
Range 1-2 30-60 5-15 25-75
Range 1-2 30-60 80-95 25-75
Range 0-3 30-60 80-90 20-80
Strait 2 vertical 0 0
Strait 1 vertical 0 0
Smooth 3 0 0 0
Trough 3-4 15-20 15-85 20-80
Trough 3-4 5-10 45-55 45-55
Pit 3-4 10-20 15-85 20-80
Mask 4 0 0 0
""",
    "pangea": """
Hill 1-2 25-40 15-50 0-10
Hill 1-2 5-40 50-85 0-10
Hill 1-2 25-40 50-85 90-100
Hill 1-2 5-40 15-50 90-100
Hill 8-12 20-40 20-80 48-52
Smooth 2 0 0 0
Multiply 0.7 land 0 0
Trough 3-4 25-35 5-95 10-20
Trough 3-4 25-35 5-95 80-90
Range 5-6 30-40 10-90 35-65
Mask 2 0 0 0
""",
    "archipelago": """
Add 11 all 0 0
Range 2-3 40-60 20-80 20-80
Hill 5 15-20 10-90 30-70
Hill 2 10-15 10-30 20-80
Hill 2 10-15 60-90 20-80
Smooth 3 0 0 0
Trough 10 20-30 5-95 5-95
Strait 2 vertical 0 0
Strait 2 horizontal 0 0
""",
    "mediterranean": """
Range 4-6 30-80 0-100 0-10
Range 4-6 30-80 0-100 90-100
Hill 6-8 30-50 10-90 0-5
Hill 6-8 30-50 10-90 95-100
Multiply 0.9 land 0 0
Mask -2 0 0 0
Smooth 1 0 0 0
Hill 2-3 30-70 0-5 20-80
Hill 2-3 30-70 95-100 20-80
Trough 3-6 40-50 0-100 0-10
Trough 3-6 40-50 0-100 90-100
""",
}


def get_template(name: str) -> str:
    """
    Get a template by name.

    Raises:
        KeyError: if the template does not exist
    """
    if name not in TEMPLATES:
        raise KeyError(f"Unknown heightmap template '{name}'. Available: {list_templates()}")
    return TEMPLATES[name]


def list_templates() -> List[str]:
    """Names of all available templates."""
    return sorted(TEMPLATES)
