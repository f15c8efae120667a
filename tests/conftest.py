import pytest
from loguru import logger

from dockspace.docking.tree import DockTree


@pytest.fixture
def caplog(caplog):
    """Route loguru records into pytest's caplog."""
    handler_id = logger.add(
        caplog.handler,
        format="{message}",
        level=0,
        filter=lambda record: record["level"].no >= caplog.handler.level,
        enqueue=False,
    )
    yield caplog
    logger.remove(handler_id)


@pytest.fixture
def two_panel_tree():
    """Panel 0: windows [x, y] and [z]; panel 1: fixed panel with [w]."""
    return DockTree.from_state([
        {"windows": [
            {"selected": 0, "widgets": ["x", "y"]},
            {"selected": 0, "widgets": ["z"]},
        ]},
        {"size": 300, "minSize": 100, "resize": "fixed", "windows": [
            {"selected": 0, "widgets": ["w"]},
        ]},
    ])
