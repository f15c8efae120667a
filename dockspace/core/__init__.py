"""
Dockspace Core - ambient infrastructure.

- Signal: Synchronous observer used for all notifications
- setup_logging: Loguru configuration
- ConfigManager / DockspaceConfig: Pydantic settings with persistence
"""
from .events import Signal
from .logging import setup_logging
from .config import (
    ConfigManager,
    DockspaceConfig,
    GeneralSettings,
    PanelDefaults,
    WorkspaceSettings,
)

__all__ = [
    "Signal",
    "setup_logging",
    "ConfigManager",
    "DockspaceConfig",
    "GeneralSettings",
    "PanelDefaults",
    "WorkspaceSettings",
]
