from typing import Any, Optional
import json
import os
from pydantic import BaseModel, Field
from loguru import logger

from .events import Signal
from ..layout.sizing import ResizeMode


# --- Layout Templates ---
class PanelDefaults(BaseModel):
    """Template used to fill sizing fields missing from a panel or window."""
    size: float = 256
    min_size: float = 48
    max_size: float = 0  # 0 = unbounded
    resize: ResizeMode = ResizeMode.STRETCH


class WorkspaceSettings(BaseModel):
    spacing: float = 1
    tab_bar_height: float = 34
    tab_drag_type: str = "dockable-tab"
    # Panel built when no initial state is supplied
    synthesized_panel: PanelDefaults = Field(
        default_factory=lambda: PanelDefaults(size=277, min_size=277)
    )


class GeneralSettings(BaseModel):
    debug_mode: bool = True
    log_dir: Optional[str] = None  # no file sink when unset


class DockspaceConfig(BaseModel):
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    panel: PanelDefaults = Field(default_factory=PanelDefaults)
    window: PanelDefaults = Field(default_factory=PanelDefaults)
    workspace: WorkspaceSettings = Field(default_factory=WorkspaceSettings)


# --- Manager ---
class ConfigManager:
    """
    Manages workspace configuration with persistence and reactivity.
    """
    def __init__(self, filepath: str = "dockspace.json"):
        self.filepath = filepath
        self._data = DockspaceConfig()
        self.on_changed = Signal("ConfigChanged")
        self._load()

    @property
    def data(self) -> DockspaceConfig:
        return self._data

    def update(self, section: str, key: str, value: Any):
        """Update a setting, validate via Pydantic, autosave, and emit change event."""
        if not hasattr(self._data, section):
            raise ValueError(f"Invalid section: {section}")

        section_obj = getattr(self._data, section)
        if not isinstance(section_obj, BaseModel) or key not in type(section_obj).model_fields:
            raise ValueError(f"Invalid key: {key} in section {section}")

        # Re-validate the whole section so bad values never reach the model
        updated = type(section_obj).model_validate({**section_obj.model_dump(), key: value})
        setattr(self._data, section, updated)
        self._save()
        self.on_changed.emit(section, key, getattr(updated, key))

    def get(self, section: str, key: str) -> Any:
        section_obj = getattr(self._data, section)
        return getattr(section_obj, key)

    def _load(self):
        """Load settings from JSON or TOML file if present; otherwise keep defaults."""
        if os.path.isfile(self.filepath):
            try:
                if self.filepath.endswith('.toml'):
                    import tomllib
                    with open(self.filepath, "rb") as f:
                        raw = tomllib.load(f)
                else:
                    with open(self.filepath, "r", encoding="utf-8") as f:
                        raw = json.load(f)
                self._data = DockspaceConfig.model_validate(raw)
            except Exception as e:
                logger.error(f"Failed to load config from {self.filepath}: {e}")
                self._save()
        else:
            self._save()

    def _save(self):
        """Persist current config to JSON file."""
        if self.filepath.endswith('.toml'):
            # tomllib is read-only; TOML configs are edited by hand
            return
        try:
            dirname = os.path.dirname(self.filepath)
            if dirname:
                os.makedirs(dirname, exist_ok=True)
            with open(self.filepath, "w", encoding="utf-8") as f:
                json.dump(self._data.model_dump(mode="json"), f, indent=4)
        except Exception as e:
            logger.error(f"Failed to save config to {self.filepath}: {e}")
