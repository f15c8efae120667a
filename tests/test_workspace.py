import json
import sys
from unittest.mock import MagicMock

import pytest
from loguru import logger

from dockspace.core.config import ConfigManager
from dockspace.docking.actions import CLOSE_TAB
from dockspace.docking.drag import DragStart, DropResult
from dockspace.docking.model import HoverBorder
from dockspace.docking.registry import WidgetRef, WidgetRegistry
from dockspace.layout.resize import DragSessionError
from dockspace.workspace import GestureKind, Workspace

STATE = [
    {"windows": [
        {"selected": 0, "widgets": ["x", "y"]},
        {"selected": 0, "widgets": ["z"]},
    ]},
    {"size": 300, "minSize": 100, "windows": [{"selected": 0, "widgets": ["w"]}]},
]


def widgets_of(tree):
    return [[window.widgets for window in panel.windows] for panel in tree.panels]


@pytest.fixture
def registry():
    return WidgetRegistry([
        WidgetRef("x", "X"),
        WidgetRef("y", "Y", min_height=300),
        WidgetRef("z", "Z"),
        WidgetRef("w", "W", min_height=100),
    ])


@pytest.fixture
def workspace(registry):
    ws = Workspace.from_state(STATE, registry=registry)
    ws.on_update_spy = MagicMock()
    ws.on_update.connect(ws.on_update_spy)
    return ws


def test_workspace_synthesizes_tree_from_registry(registry):
    ws = Workspace(registry=registry)
    assert widgets_of(ws.tree) == [[["x", "y", "z", "w"]]]
    assert ws.tree.panel(0).size == 277


# === Resizing ===

def test_panel_resize_commits_on_pointer_up(workspace):
    live = MagicMock()
    workspace.on_resize.connect(live)

    workspace.start_panel_resize(0, measured_sizes=[200, 400])
    assert workspace.gesture == GestureKind.PANEL_RESIZE
    items = workspace.pointer_move(230.5, 0)
    tree = workspace.pointer_up()

    assert [item.size for item in items] == [230, 370]
    live.assert_called_once()
    assert [panel.size for panel in tree] == [230, 370]
    workspace.on_update_spy.assert_called_once_with(tree)
    assert workspace.gesture == GestureKind.NONE


def test_window_resize(workspace):
    workspace.start_window_resize(0, 0)
    workspace.pointer_move(0, 286.5)
    tree = workspace.pointer_up()

    assert [window.size for window in tree.panel(0).windows] == [286, 226]


def test_cancel_resize_keeps_tree(workspace):
    before = workspace.tree
    workspace.start_panel_resize(0)
    workspace.pointer_move(500, 0)
    workspace.cancel_resize()

    assert workspace.tree is before
    assert workspace.gesture == GestureKind.NONE
    workspace.on_update_spy.assert_not_called()


def test_pointer_events_without_gesture(workspace):
    assert workspace.pointer_move(10, 10) is None
    assert workspace.pointer_up() is None


def test_measured_sizes_must_match(workspace):
    with pytest.raises(ValueError):
        workspace.start_panel_resize(0, measured_sizes=[100])
    assert workspace.gesture == GestureKind.NONE


def test_hidden_panel_is_not_resizable(workspace):
    workspace.set_hidden("w")

    with pytest.raises(ValueError):
        workspace.start_panel_resize(0)
    assert workspace.gesture == GestureKind.NONE


def test_only_one_gesture_at_a_time(workspace):
    workspace.start_panel_resize(0)

    with pytest.raises(DragSessionError):
        workspace.start_window_resize(0, 0)
    with pytest.raises(DragSessionError):
        workspace.drag_start(DragStart("dockable-tab", (0, 0, 0)))
    assert workspace.gesture == GestureKind.PANEL_RESIZE


# === Tabs ===

def test_select_tab_syncs_min_size_and_reports_active(workspace):
    active = MagicMock()
    workspace.on_active.connect(active)

    tree = workspace.select_tab(0, 0, 1)

    window = tree.window(0, 0)
    assert window.selected == 1
    assert (window.min_size, window.size) == (334, 334)
    active.assert_called_once_with("y")
    workspace.on_update_spy.assert_called_once_with(tree)


def test_activate_reports_without_update(workspace):
    active = MagicMock()
    workspace.on_active.connect(active)

    assert workspace.activate(1, 0) == "w"
    active.assert_called_once_with("w")
    workspace.on_update_spy.assert_not_called()


def test_close_last_tab_prunes_panel(workspace):
    tree = workspace.close_tab(1, 0, 0)

    assert len(tree) == 1
    assert workspace.tree is tree


def test_context_actions_close_selected_tab(workspace):
    groups = workspace.context_actions(0, 0)

    groups[-1].trigger(CLOSE_TAB)

    assert widgets_of(workspace.tree)[0] == [["y"], ["z"]]
    workspace.on_update_spy.assert_called_once()


# === Tab drag ===

def test_tab_drag_to_panel_border(workspace):
    assert workspace.drag_start(DragStart("dockable-tab", (0, 0, 0))) is True
    assert workspace.gesture == GestureKind.TAB_DRAG
    assert len(workspace.drop_borders()) == 8

    workspace.hover_border([2, None])
    tree = workspace.drag_end(DropResult("dockable-tab", (0, 0, 0), (1, 0, 0)))

    assert widgets_of(tree) == [[["y"], ["z"]], [["w"]], [["x"]]]
    assert workspace.gesture == GestureKind.NONE
    assert workspace.current_border is None
    workspace.on_update_spy.assert_called_once_with(tree)


def test_tab_drop_outside_changes_nothing(workspace):
    before = workspace.tree
    workspace.drag_start(DragStart("dockable-tab", (0, 0, 0)))

    assert workspace.drag_end(DropResult("dockable-tab", (0, 0, 0))) is before
    workspace.on_update_spy.assert_not_called()
    assert workspace.drop_borders() == []


def test_foreign_drag_is_forwarded(workspace):
    started, ended = MagicMock(), MagicMock()
    workspace.on_drag_start_forwarded.connect(started)
    workspace.on_drag_end_forwarded.connect(ended)

    assert workspace.drag_start(DragStart("card")) is False
    assert workspace.gesture == GestureKind.NONE
    assert workspace.drag_end(DropResult("card")) is None

    started.assert_called_once()
    ended.assert_called_once()
    workspace.on_update_spy.assert_not_called()


def test_stray_drag_end_is_ignored(workspace):
    assert workspace.drag_end(DropResult("dockable-tab", (0, 0, 0), (0, 1, 0))) is None
    workspace.on_update_spy.assert_not_called()


def test_layout_maps_hidden_widgets(workspace):
    workspace.set_hidden("z")
    layout = workspace.layout()

    assert [panel.window_indices for panel in layout] == [[0], [0]]


# === Window minimum size follows the selected widget ===

def test_min_size_synced_on_construction(registry):
    state = [{"windows": [{"selected": 1, "widgets": ["x", "y"]}]}]
    ws = Workspace.from_state(state, registry=registry)

    window = ws.tree.window(0, 0)
    assert (window.min_size, window.size) == (334, 334)


def test_min_size_synced_after_tab_drop(workspace):
    workspace.drag_start(DragStart("dockable-tab", (0, 0, 1)))
    tree = workspace.drag_end(DropResult("dockable-tab", (0, 0, 1), (0, 1, 1)))

    window = tree.window(0, 1)
    assert window.selected_widget == "y"
    assert (window.min_size, window.size) == (334, 334)
    assert tree.window(0, 0).min_size == 34


def test_min_size_synced_after_close_tab(workspace):
    tree = workspace.close_tab(0, 0, 0)

    window = tree.window(0, 0)
    assert window.selected_widget == "y"
    assert window.min_size == 334


# === Gesture guards ===

def test_tree_swap_rejected_during_gesture(workspace):
    other = Workspace.from_state(STATE[:1]).tree
    workspace.start_panel_resize(0)

    with pytest.raises(DragSessionError):
        workspace.tree = other

    workspace.pointer_move(300, 0)
    assert len(workspace.pointer_up()) == 2
    workspace.tree = other
    assert len(workspace.tree) == 1


def test_drag_end_after_resolver_cancel(workspace):
    before = workspace.tree
    workspace.drag_start(DragStart("dockable-tab", (0, 0, 0)))
    workspace.dock.cancel()

    assert workspace.drag_end(DropResult("dockable-tab", (0, 0, 0), (0, 1, 0))) is None
    assert workspace.tree is before
    assert workspace.gesture == GestureKind.NONE
    workspace.on_update_spy.assert_not_called()


def test_drop_borders_skip_hidden_containers(workspace):
    workspace.set_hidden("z")
    workspace.drag_start(DragStart("dockable-tab", (0, 0, 0)))

    assert workspace.drop_borders() == [
        HoverBorder(0, None), HoverBorder(0, 0), HoverBorder(0, 1),
        HoverBorder(1, None), HoverBorder(1, 0), HoverBorder(1, 1),
        HoverBorder(2, None),
    ]

    workspace.set_hidden("z", False)
    workspace.set_hidden("w")
    assert workspace.drop_borders() == [
        HoverBorder(0, None), HoverBorder(0, 0), HoverBorder(0, 1), HoverBorder(0, 2),
        HoverBorder(1, None),
    ]


def test_commit_logs_at_info(workspace, caplog):
    caplog.set_level("INFO")
    workspace.close_tab(0, 1, 0)
    assert "Workspace updated: 2 panels" in caplog.text


# === Settings ===

def test_workspace_follows_config_manager(tmp_path, registry):
    manager = ConfigManager(str(tmp_path / "dockspace.json"))
    ws = Workspace.from_state(STATE, registry=registry, config=manager)
    spy = MagicMock()
    ws.on_update.connect(spy)

    manager.update("workspace", "tab_bar_height", 50)

    assert ws.config.workspace.tab_bar_height == 50
    assert ws.tree.window(0, 0).min_size == 50
    spy.assert_called_once_with(ws.tree)

    manager.update("workspace", "tab_drag_type", "panel-tab")
    assert ws.drag_start(DragStart("panel-tab", (0, 0, 0))) is True


def test_from_config_file_configures_logging(tmp_path, registry, capsys):
    path = tmp_path / "dockspace.json"
    path.write_text(json.dumps({"general": {"debug_mode": False}, "workspace": {"spacing": 3}}))
    try:
        ws = Workspace.from_config_file(str(path), STATE, registry=registry, with_logging=True)
        assert ws.config.workspace.spacing == 3
        logger.debug("hidden detail")
        assert "hidden detail" not in capsys.readouterr().err

        ws.config_manager.update("general", "debug_mode", True)
        logger.debug("shown detail")
        assert "shown detail" in capsys.readouterr().err
    finally:
        logger.remove()
        logger.add(sys.__stderr__)
