"""Selector and constant modules for each Proof360 screen"""

from typing import Dict, Any
import importlib

# Mapping of screen names to their config modules
CONFIG_MODULES = {
    'login': 'config.login_config',
    'menu': 'config.menu_config',
    'dashboard': 'config.dashboard_config',
    'sop': 'config.sop_config',
    'sites': 'config.sites_config',
    'reports': 'config.reports_config',
    'seeding': 'config.seeding_config',
    'management': 'config.management_config',
}

def get_config(screen: str):
    """Get configuration module for a screen"""
    if screen not in CONFIG_MODULES:
        raise ValueError(f"Unknown screen: {screen}")
    return importlib.import_module(CONFIG_MODULES[screen])

__all__ = ['get_config', 'CONFIG_MODULES']
