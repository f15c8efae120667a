import json

import pytest

from dockspace.core.config import ConfigManager, DockspaceConfig
from dockspace.layout.sizing import ResizeMode


def test_config_defaults_written(tmp_path):
    path = tmp_path / "dockspace.json"
    manager = ConfigManager(str(path))

    assert path.exists()
    assert manager.data.panel.size == 256
    assert manager.data.panel.min_size == 48
    assert manager.data.panel.max_size == 0
    assert manager.data.panel.resize == ResizeMode.STRETCH
    assert manager.data.workspace.synthesized_panel.size == 277
    assert manager.data.workspace.tab_bar_height == 34


def test_config_update_event_and_persist(tmp_path):
    path = tmp_path / "dockspace.json"
    manager = ConfigManager(str(path))
    received = []
    manager.on_changed.connect(lambda section, key, val: received.append((section, key, val)))

    manager.update("panel", "size", 300)

    assert manager.get("panel", "size") == 300
    assert received == [("panel", "size", 300)]
    assert ConfigManager(str(path)).data.panel.size == 300


def test_config_update_rejects_unknown_names(tmp_path):
    manager = ConfigManager(str(tmp_path / "c.json"))

    with pytest.raises(ValueError):
        manager.update("nope", "size", 1)
    with pytest.raises(ValueError):
        manager.update("panel", "nope", 1)


def test_config_update_validates_value(tmp_path):
    manager = ConfigManager(str(tmp_path / "c.json"))

    with pytest.raises(ValueError):
        manager.update("panel", "size", "wide")
    assert manager.data.panel.size == 256


def test_config_loads_toml(tmp_path):
    path = tmp_path / "dockspace.toml"
    path.write_text('[panel]\nsize = 128\nresize = "fixed"\n\n[workspace]\nspacing = 4\n')

    manager = ConfigManager(str(path))

    assert manager.data.panel.size == 128
    assert manager.data.panel.resize == ResizeMode.FIXED
    assert manager.data.workspace.spacing == 4
    assert manager.data.window.size == 256


def test_config_corrupt_file_keeps_defaults(tmp_path, caplog):
    path = tmp_path / "dockspace.json"
    path.write_text("{not json")

    manager = ConfigManager(str(path))

    assert manager.data == DockspaceConfig()
    assert "Failed to load config" in caplog.text
    assert json.loads(path.read_text())["panel"]["size"] == 256
