"""
Configuration package for the lead capture functions.
"""

from .settings import AppSettings, KajabiSettings, get_kajabi_settings, get_settings

__all__ = ["AppSettings", "KajabiSettings", "get_settings", "get_kajabi_settings"]
