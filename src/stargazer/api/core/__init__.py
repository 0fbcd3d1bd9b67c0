"""Core subpackage for shared constants, settings, and exceptions."""

from stargazer.api.core.settings import (
    SiqsSettings,
    load_settings,
)


__all__ = [
    "SiqsSettings",
    "load_settings",
]
