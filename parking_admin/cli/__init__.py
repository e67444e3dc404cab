"""CLI module for parking admin tools."""

from parking_admin.cli.admin import admin

__all__ = ["admin"]
