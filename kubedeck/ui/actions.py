"""Tab-strip gestures mapped onto workspace transitions.

Kept free of Streamlit so the wiring can be tested with plain values.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from kubedeck.workspace import (
    MoveResult,
    Tab,
    Workspace,
    activate_tab,
    close_other_tabs,
    close_tab,
    move_tab,
    reorder_tabs,
    split_right,
)


logger = logging.getLogger(__name__)

ACTIVATE = "activate"
CLOSE = "close"
CLOSE_OTHERS = "close_others"
SPLIT_RIGHT = "split_right"
SHIFT = "shift"
MOVE = "move"


@dataclass(frozen=True)
class TabAction:
    kind: str
    tab: Tab
    # SHIFT: -1 / +1 within the strip. MOVE: -1 / +1 towards the neighbouring panel.
    offset: int = 0


@dataclass(frozen=True)
class ActionOutcome:
    workspace: Workspace
    moved: Optional[MoveResult] = None
    message: Optional[str] = None


def shifted_order(tab_ids: Sequence[str], index: int, offset: int) -> List[str]:
    """Tab ids with the entry at ``index`` swapped with its neighbour at ``index + offset``."""

    ids = list(tab_ids)
    target = index + offset
    if not (0 <= index < len(ids)) or not (0 <= target < len(ids)):
        return ids
    ids[index], ids[target] = ids[target], ids[index]
    return ids


def apply_action(workspace: Workspace, action: TabAction, *, max_panels: int) -> ActionOutcome:
    tab = action.tab

    if action.kind == ACTIVATE:
        return ActionOutcome(activate_tab(workspace, tab))

    if action.kind == CLOSE:
        return ActionOutcome(close_tab(workspace, tab).workspace)

    if action.kind == CLOSE_OTHERS:
        return ActionOutcome(close_other_tabs(workspace, tab))

    if action.kind == SPLIT_RIGHT:
        result = split_right(workspace, tab, max_panels=max_panels)
        if result is None:
            return ActionOutcome(workspace, message=f"At most {max_panels} panels can be open.")
        return ActionOutcome(result.workspace)

    if action.kind == SHIFT:
        panel = next((p for p in workspace.panels if p.id == tab.panel_id), None)
        if panel is None or tab.id not in panel.tab_ids:
            return ActionOutcome(workspace)
        order = shifted_order(panel.tab_ids, panel.tab_ids.index(tab.id), action.offset)
        return ActionOutcome(reorder_tabs(workspace, panel.id, order))

    if action.kind == MOVE:
        index = next((i for i, p in enumerate(workspace.panels) if p.id == tab.panel_id), None)
        dest_index = index + action.offset if index is not None else -1
        if not (0 <= dest_index < len(workspace.panels)):
            return ActionOutcome(workspace)
        dest = workspace.panels[dest_index]
        moved = move_tab(workspace, tab.id, dest.id, len(dest.tabs))
        if moved is None:
            # Stale gesture: the tab or panel is already gone.
            logger.debug("Ignoring stale move of %s", tab.id)
            return ActionOutcome(workspace)
        return ActionOutcome(moved.workspace, moved=moved)

    raise ValueError(f"Unknown tab action: {action.kind}")
