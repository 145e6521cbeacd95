"""
Configuration: application settings and heightmap templates.
"""

from .heightmap_templates import TEMPLATES, get_template, list_templates
from .settings import Settings, settings

__all__ = ["get_template", "list_templates", "TEMPLATES", "Settings", "settings"]
