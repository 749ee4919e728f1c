"""
Configuration for connections, format defaults and mapping files.
"""

from .config_manager import ConfigManager, DatabaseConfig, HttpConfig
from .format_defaults import FormatDefaults

__all__ = ['ConfigManager', 'DatabaseConfig', 'HttpConfig', 'FormatDefaults']
