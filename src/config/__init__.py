"""Portal configuration."""

from .settings import PortalSettings, load_settings

__all__ = ["PortalSettings", "load_settings"]
