import pytest

from kubedeck.ui.actions import (
    ACTIVATE,
    CLOSE,
    CLOSE_OTHERS,
    MOVE,
    SHIFT,
    SPLIT_RIGHT,
    TabAction,
    apply_action,
    shifted_order,
)
from kubedeck.workspace import select_connection_target


@pytest.fixture
def opened(workspace, targets):
    ws = workspace
    for target in targets.values():
        ws = select_connection_target(ws, target)
    return ws


def _contexts(panel):
    return [t.context_id for t in panel.tabs]


def test_shifted_order():
    assert shifted_order(["a", "b", "c"], 0, 1) == ["b", "a", "c"]
    assert shifted_order(["a", "b", "c"], 2, -1) == ["a", "c", "b"]
    assert shifted_order(["a", "b", "c"], 0, -1) == ["a", "b", "c"]
    assert shifted_order(["a"], 5, 1) == ["a"]


def test_activate_and_close(opened):
    first = opened.panels[0].tabs[0]

    ws = apply_action(opened, TabAction(ACTIVATE, first), max_panels=10).workspace
    assert ws.panels[0].active_context_id == "context1"

    ws = apply_action(ws, TabAction(CLOSE, first), max_panels=10).workspace
    assert _contexts(ws.panels[0]) == ["context2", "context3"]


def test_close_others(opened):
    middle = opened.panels[0].tabs[1]
    ws = apply_action(opened, TabAction(CLOSE_OTHERS, middle), max_panels=10).workspace
    assert _contexts(ws.panels[0]) == ["context2"]


def test_shift_moves_tab_within_strip(opened):
    first = opened.panels[0].tabs[0]
    ws = apply_action(opened, TabAction(SHIFT, first, offset=1), max_panels=10).workspace
    assert _contexts(ws.panels[0]) == ["context2", "context1", "context3"]
    assert ws.panels[0].active_context_id == "context3"


def test_split_right_respects_panel_limit(opened):
    tab = opened.panels[0].tabs[0]

    outcome = apply_action(opened, TabAction(SPLIT_RIGHT, tab), max_panels=1)

    assert outcome.workspace is opened
    assert outcome.message == "At most 1 panels can be open."


def test_move_to_neighbouring_panel_appends(opened):
    ws = apply_action(opened, TabAction(SPLIT_RIGHT, opened.panels[0].tabs[0]), max_panels=10).workspace
    tab = ws.panels[0].tabs[1]

    outcome = apply_action(ws, TabAction(MOVE, tab, offset=1), max_panels=10)

    assert outcome.moved is not None
    assert outcome.moved.old_tab_id == tab.id
    assert _contexts(outcome.workspace.panels[1]) == ["context1", "context2"]
    assert outcome.workspace.active_panel_id == ws.panels[1].id


def test_move_past_the_edge_is_ignored(opened):
    tab = opened.panels[0].tabs[0]
    outcome = apply_action(opened, TabAction(MOVE, tab, offset=-1), max_panels=10)
    assert outcome.workspace is opened
    assert outcome.moved is None


def test_unknown_action_kind(opened):
    with pytest.raises(ValueError):
        apply_action(opened, TabAction("pin", opened.panels[0].tabs[0]), max_panels=10)
