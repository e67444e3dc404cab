"""Parking Admin - review and act on parking slot requests.

This package provides an admin tool that lists parking slot requests held by
the parking backend, lets an administrator search and page through them, and
approve or reject individual requests.
"""

__version__ = "0.1.0"
__author__ = "Parking Admin Contributors"

from parking_admin.config import Settings, get_settings, load_settings_from_file, set_settings

__all__ = [
    "Settings",
    "__version__",
    "get_settings",
    "load_settings_from_file",
    "set_settings",
]
