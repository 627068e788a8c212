"""
Configuration for terrain generation and export.
"""

from .config import Settings, settings
from .render_settings import CameraSettings, ExportSettings, TerrainSettings, from_settings

__all__ = ['Settings', 'settings', 'CameraSettings', 'ExportSettings', 'TerrainSettings',
           'from_settings']
