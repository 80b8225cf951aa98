"""Workspace panel/tab manager.

Tracks which connection targets are open, how their tabs are arranged into
side-by-side panels, which panel and tab have focus, and a recency history
used to pick a replacement tab when the focused one closes.

Every transition is a pure function: it takes a ``Workspace`` value and
returns a new one (``dataclasses.replace``), never mutating its input.
Callers serialize calls (one UI event at a time) and keep the returned value.

Tab ids are derived from ``(panel_id, context_id)``. Relocating a tab into
another panel therefore changes its id, and two tabs for the same target in
one panel share an id. Lookups by id resolve to the first matching tab.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from kubedeck.contexts.tree import ConnectionTarget, ContextNode


logger = logging.getLogger(__name__)

MAX_PANELS = 10
DEFAULT_HISTORY_LIMIT = 100


class WorkspaceError(Exception):
    """Base class for workspace programming errors."""


class TabNotFoundError(WorkspaceError, LookupError):
    def __init__(self, tab_id: str):
        super().__init__(f"Tab {tab_id!r} is not part of the workspace")
        self.tab_id = tab_id


def generate_panel_id() -> str:
    return f"panel-{uuid.uuid4().hex[:12]}"


def tab_id_for(panel_id: str, context_id: str) -> str:
    return f"{panel_id}-{context_id}"


def composite_key(panel_id: str, context_id: str) -> str:
    """Key for per-tab UI state (selected kind, detail pane, ...) owned by the renderer."""

    return f"{panel_id}:{context_id}"


def parse_composite_key(key: str) -> Tuple[str, str]:
    # Panel ids never contain ':'; EKS context names do.
    panel_id, _, context_id = key.partition(":")
    return panel_id, context_id


@dataclass(frozen=True)
class Tab:
    panel_id: str
    target: ConnectionTarget

    @property
    def id(self) -> str:
        return tab_id_for(self.panel_id, self.target.id)

    @property
    def context_id(self) -> str:
        return self.target.id

    @property
    def key(self) -> str:
        return composite_key(self.panel_id, self.target.id)


@dataclass(frozen=True)
class Panel:
    """An ordered tab strip; ``active_context_id`` names the focused tab's target."""

    id: str
    tabs: Tuple[Tab, ...] = ()
    active_context_id: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.tabs

    @property
    def tab_ids(self) -> List[str]:
        return [t.id for t in self.tabs]

    def find_tab(self, tab_id: str) -> Optional[Tab]:
        return next((t for t in self.tabs if t.id == tab_id), None)

    def tab_for_context(self, context_id: str) -> Optional[Tab]:
        return next((t for t in self.tabs if t.context_id == context_id), None)

    @property
    def active_tab(self) -> Optional[Tab]:
        if self.active_context_id is None:
            return None
        return self.tab_for_context(self.active_context_id)


@dataclass(frozen=True)
class Workspace:
    """Top-level arrangement: ordered panels (left to right) plus focus and history.

    - ``active_panel_id`` always names a panel in ``panels``.
    - ``selected_context`` is the target the user last focused; it is only
      empty when the workspace holds no tabs at all.
    - ``tab_history`` holds tab ids, most recent last, bounded by
      ``history_limit``. It only serves as the fallback source when the
      focused tab of a panel closes.
    """

    panels: Tuple[Panel, ...]
    active_panel_id: str
    selected_context: Optional[ConnectionTarget] = None
    tab_history: Tuple[str, ...] = field(default_factory=tuple)
    history_limit: int = DEFAULT_HISTORY_LIMIT

    @property
    def tab_count(self) -> int:
        return sum(len(p.tabs) for p in self.panels)

    def iter_tabs(self) -> Iterable[Tab]:
        for panel in self.panels:
            yield from panel.tabs


@dataclass(frozen=True)
class CloseResult:
    workspace: Workspace
    tab_history: Tuple[str, ...]


@dataclass(frozen=True)
class SplitResult:
    workspace: Workspace
    new_tab: Tab

    @property
    def new_panel_id(self) -> str:
        return self.new_tab.panel_id


@dataclass(frozen=True)
class MoveResult:
    workspace: Workspace
    new_tab_id: str
    old_tab_id: str


def new_workspace(*, history_limit: int = DEFAULT_HISTORY_LIMIT, panel_id: Optional[str] = None) -> Workspace:
    """A workspace in its initial shape: one empty panel that has focus."""

    panel = Panel(id=panel_id or generate_panel_id())
    return Workspace(panels=(panel,), active_panel_id=panel.id, history_limit=history_limit)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def get_panel(workspace: Workspace, panel_id: str) -> Optional[Panel]:
    return next((p for p in workspace.panels if p.id == panel_id), None)


def active_panel(workspace: Workspace) -> Panel:
    """The focused panel; a dangling ``active_panel_id`` resolves to the first panel."""

    return get_panel(workspace, workspace.active_panel_id) or workspace.panels[0]


def active_tab(panel: Panel) -> Optional[Tab]:
    return panel.active_tab


def find_tab(workspace: Workspace, tab_id: str) -> Optional[Tab]:
    return next((t for t in workspace.iter_tabs() if t.id == tab_id), None)


def _locate(workspace: Workspace, tab_id: str) -> Optional[Tuple[Panel, Tab]]:
    for panel in workspace.panels:
        tab = panel.find_tab(tab_id)
        if tab is not None:
            return panel, tab
    return None


def _panel_index(workspace: Workspace, panel_id: str) -> Optional[int]:
    return next((i for i, p in enumerate(workspace.panels) if p.id == panel_id), None)


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


def record_history(history: Sequence[str], tab_id: str, limit: int = DEFAULT_HISTORY_LIMIT) -> Tuple[str, ...]:
    """Make ``tab_id`` the most recent entry, dropping the oldest beyond ``limit``."""

    out = tuple(h for h in history if h != tab_id) + (tab_id,)
    if limit > 0 and len(out) > limit:
        out = out[-limit:]
    return out


def prune_history(history: Sequence[str], tab_ids: Iterable[str]) -> Tuple[str, ...]:
    removed = set(tab_ids)
    return tuple(h for h in history if h not in removed)


def _fallback_tab(tabs: Sequence[Tab], history: Sequence[str]) -> Optional[Tab]:
    """Most recent history entry still in ``tabs``, else the last tab, else None."""

    by_id: Dict[str, Tab] = {}
    for tab in tabs:
        by_id.setdefault(tab.id, tab)
    for tab_id in reversed(history):
        if tab_id in by_id:
            return by_id[tab_id]
    return tabs[-1] if tabs else None


# ---------------------------------------------------------------------------
# Structural helpers
# ---------------------------------------------------------------------------


def _swap_panel(panels: Sequence[Panel], panel: Panel) -> Tuple[Panel, ...]:
    return tuple(panel if p.id == panel.id else p for p in panels)


def _without_tab(tabs: Sequence[Tab], tab_id: str) -> Tuple[Tab, ...]:
    out = list(tabs)
    for i, tab in enumerate(out):
        if tab.id == tab_id:
            del out[i]
            break
    return tuple(out)


def _target_of(panel: Optional[Panel]) -> Optional[ConnectionTarget]:
    tab = panel.active_tab if panel is not None else None
    return tab.target if tab is not None else None


def _collapse_if_empty(workspace: Workspace, panel_id: str) -> Workspace:
    """Apply the empty-panel rule to ``panel_id``.

    A non-sole empty panel is removed; if it had focus, the neighbour to its
    left (else the new first panel) takes focus. The sole panel is kept and
    the workspace returns to its initial shape.
    """

    index = _panel_index(workspace, panel_id)
    if index is None or not workspace.panels[index].is_empty:
        return workspace

    if len(workspace.panels) == 1:
        logger.debug("Last tab closed; resetting workspace to a single empty panel %s", panel_id)
        return Workspace(
            panels=(Panel(id=panel_id),),
            active_panel_id=panel_id,
            selected_context=None,
            tab_history=(),
            history_limit=workspace.history_limit,
        )

    was_active = active_panel(workspace).id == panel_id
    panels = workspace.panels[:index] + workspace.panels[index + 1 :]
    logger.debug("Removing empty panel %s", panel_id)
    if not was_active:
        return replace(workspace, panels=panels)

    neighbour = panels[index - 1] if index > 0 else panels[0]
    focused = neighbour.active_tab
    if focused is None:
        return replace(workspace, panels=panels, active_panel_id=neighbour.id)
    return replace(
        workspace,
        panels=panels,
        active_panel_id=neighbour.id,
        selected_context=focused.target,
        tab_history=record_history(workspace.tab_history, focused.id, workspace.history_limit),
    )


def _unwrap_target(target: Union[ConnectionTarget, ContextNode, None]) -> Optional[ConnectionTarget]:
    if isinstance(target, ContextNode):
        return target.connection_target if target.is_context else None
    return target


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def select_connection_target(
    workspace: Workspace,
    target: Union[ConnectionTarget, ContextNode, None],
) -> Workspace:
    """Open (or focus) ``target`` in the active panel.

    An existing tab for the target in the active panel is focused instead of
    opening a duplicate; otherwise a new tab is appended to the strip. Folder
    nodes carry no target and leave the workspace unchanged.
    """

    resolved = _unwrap_target(target)
    if resolved is None:
        return workspace

    panel = active_panel(workspace)
    tab = panel.tab_for_context(resolved.id)
    if (
        tab is not None
        and panel.id == workspace.active_panel_id
        and panel.active_context_id == resolved.id
        and workspace.selected_context == resolved
    ):
        # Already focused.
        return workspace
    if tab is None:
        tab = Tab(panel_id=panel.id, target=resolved)
        updated = replace(panel, tabs=panel.tabs + (tab,), active_context_id=resolved.id)
        logger.debug("Opened %s in panel %s", resolved.id, panel.id)
    else:
        updated = replace(panel, active_context_id=resolved.id)

    return replace(
        workspace,
        panels=_swap_panel(workspace.panels, updated),
        active_panel_id=panel.id,
        selected_context=resolved,
        tab_history=record_history(workspace.tab_history, tab.id, workspace.history_limit),
    )


def activate_tab(workspace: Workspace, tab: Tab) -> Workspace:
    """Focus ``tab`` and its panel, as when the user clicks it in a tab strip."""

    panel = get_panel(workspace, tab.panel_id)
    if panel is None or panel.find_tab(tab.id) is None:
        return workspace

    updated = replace(panel, active_context_id=tab.context_id)
    return replace(
        workspace,
        panels=_swap_panel(workspace.panels, updated),
        active_panel_id=panel.id,
        selected_context=tab.target,
        tab_history=record_history(workspace.tab_history, tab.id, workspace.history_limit),
    )


def close_tab(
    workspace: Workspace,
    tab: Tab,
    tab_history: Optional[Sequence[str]] = None,
) -> CloseResult:
    """Close ``tab`` and resolve focus.

    Closing a background tab never moves focus. Closing the focused tab of a
    panel picks its successor from history (most recent entry still in the
    panel), else the last remaining tab. A panel left empty is removed unless
    it is the only one, in which case the workspace returns to its initial
    shape. A successor that takes focus in the active panel becomes the most
    recent history entry. ``tab_history`` defaults to the workspace's own
    history; the updated history is returned both on the workspace and
    alongside it.
    """

    history = prune_history(workspace.tab_history if tab_history is None else tab_history, [tab.id])

    panel = get_panel(workspace, tab.panel_id)
    if panel is None or panel.find_tab(tab.id) is None:
        logger.debug("close_tab: %s not found; nothing to close", tab.id)
        result = replace(workspace, tab_history=history)
        return CloseResult(workspace=result, tab_history=history)

    remaining = _without_tab(panel.tabs, tab.id)
    closing_active = panel.active_context_id == tab.context_id and all(
        t.context_id != tab.context_id for t in remaining
    )

    selected = workspace.selected_context
    if closing_active:
        successor = _fallback_tab(remaining, history)
        updated = replace(
            panel,
            tabs=remaining,
            active_context_id=successor.context_id if successor is not None else None,
        )
        if successor is not None and active_panel(workspace).id == panel.id:
            selected = successor.target
            history = record_history(history, successor.id, workspace.history_limit)
    else:
        updated = replace(panel, tabs=remaining)

    result = replace(
        workspace,
        panels=_swap_panel(workspace.panels, updated),
        selected_context=selected,
        tab_history=history,
    )
    result = _collapse_if_empty(result, panel.id)
    logger.debug("Closed %s (active=%s); %d panel(s) remain", tab.id, closing_active, len(result.panels))
    return CloseResult(workspace=result, tab_history=result.tab_history)


def close_other_tabs(workspace: Workspace, tab: Tab) -> Workspace:
    """Close every tab in ``tab``'s panel except ``tab``, which becomes the panel's focused tab."""

    panel = get_panel(workspace, tab.panel_id)
    kept = panel.find_tab(tab.id) if panel is not None else None
    if panel is None or kept is None:
        return workspace

    closed = [t.id for t in panel.tabs if t.id != tab.id]
    updated = replace(panel, tabs=(kept,), active_context_id=kept.context_id)
    history = prune_history(workspace.tab_history, closed)
    selected = workspace.selected_context
    if active_panel(workspace).id == panel.id:
        selected = kept.target
        history = record_history(history, kept.id, workspace.history_limit)
    return replace(
        workspace,
        panels=_swap_panel(workspace.panels, updated),
        selected_context=selected,
        tab_history=history,
    )


def split_right(workspace: Workspace, tab: Tab, *, max_panels: int = MAX_PANELS) -> Optional[SplitResult]:
    """Open ``tab``'s target in a new panel inserted right of the tab's panel.

    The source panel is left untouched. The new panel and its single tab take
    focus and the new tab is recorded in history. Returns None when the
    workspace already holds ``max_panels`` panels.
    """

    index = _panel_index(workspace, tab.panel_id)
    if index is None or workspace.panels[index].find_tab(tab.id) is None:
        raise TabNotFoundError(tab.id)

    if max_panels > 0 and len(workspace.panels) >= max_panels:
        logger.info("Split refused: workspace already has %d panels", len(workspace.panels))
        return None

    existing = {p.id for p in workspace.panels}
    new_panel_id = generate_panel_id()
    while new_panel_id in existing:
        new_panel_id = generate_panel_id()

    new_tab = Tab(panel_id=new_panel_id, target=tab.target)
    new_panel = Panel(id=new_panel_id, tabs=(new_tab,), active_context_id=new_tab.context_id)
    panels = workspace.panels[: index + 1] + (new_panel,) + workspace.panels[index + 1 :]

    logger.debug("Split %s into new panel %s", tab.id, new_panel_id)
    result = replace(
        workspace,
        panels=panels,
        active_panel_id=new_panel_id,
        selected_context=new_tab.target,
        tab_history=record_history(workspace.tab_history, new_tab.id, workspace.history_limit),
    )
    return SplitResult(workspace=result, new_tab=new_tab)


def reorder_tabs(workspace: Workspace, panel_id: str, ordered_tab_ids: Sequence[str]) -> Workspace:
    """Rebuild a panel's strip from ``ordered_tab_ids``.

    The requested list is authoritative: unknown ids are ignored and tabs it
    omits are dropped. Focus is kept when the focused tab survives.
    """

    panel = get_panel(workspace, panel_id)
    if panel is None:
        return workspace

    pool: Dict[str, List[Tab]] = {}
    for tab in panel.tabs:
        pool.setdefault(tab.id, []).append(tab)

    tabs: List[Tab] = []
    for tab_id in ordered_tab_ids:
        bucket = pool.get(tab_id)
        if bucket:
            tabs.append(bucket.pop(0))

    dropped = [t.id for bucket in pool.values() for t in bucket]
    history = workspace.tab_history
    if dropped:
        still_open = {t.id for t in tabs} | {t.id for p in workspace.panels if p.id != panel_id for t in p.tabs}
        history = prune_history(history, [d for d in dropped if d not in still_open])

    active_context_id = panel.active_context_id
    selected = workspace.selected_context
    if active_context_id is not None and all(t.context_id != active_context_id for t in tabs):
        successor = _fallback_tab(tabs, history)
        active_context_id = successor.context_id if successor is not None else None
        if successor is not None and active_panel(workspace).id == panel.id:
            selected = successor.target
            history = record_history(history, successor.id, workspace.history_limit)

    updated = replace(panel, tabs=tuple(tabs), active_context_id=active_context_id)
    result = replace(
        workspace,
        panels=_swap_panel(workspace.panels, updated),
        selected_context=selected,
        tab_history=history,
    )
    return _collapse_if_empty(result, panel.id)


def move_tab(
    workspace: Workspace,
    tab_id: str,
    dest_panel_id: str,
    dest_index: int,
) -> Optional[MoveResult]:
    """Re-home a tab into ``dest_panel_id`` at ``dest_index``.

    The tab gets the id derived from its new panel, the destination panel
    and the moved tab take focus, and history entries for the old id are
    replaced by the new one. A source panel left empty is removed. Returns
    None ("not found") when the tab or the destination panel does not exist.
    """

    located = _locate(workspace, tab_id)
    dest = get_panel(workspace, dest_panel_id)
    if located is None or dest is None:
        logger.debug("move_tab: %s -> %s not found", tab_id, dest_panel_id)
        return None

    source, tab = located
    moved = Tab(panel_id=dest.id, target=tab.target)
    history = prune_history(workspace.tab_history, [tab_id])
    panels = workspace.panels

    if source.id == dest.id:
        tabs = list(_without_tab(source.tabs, tab_id))
        tabs.insert(_clamp(dest_index, len(tabs)), moved)
        panels = _swap_panel(panels, replace(source, tabs=tuple(tabs), active_context_id=moved.context_id))
    else:
        remaining = _without_tab(source.tabs, tab_id)
        updated_source = replace(source, tabs=remaining)
        if source.active_context_id == tab.context_id and all(t.context_id != tab.context_id for t in remaining):
            successor = _fallback_tab(remaining, history)
            updated_source = replace(
                updated_source,
                active_context_id=successor.context_id if successor is not None else None,
            )

        tabs = list(dest.tabs)
        tabs.insert(_clamp(dest_index, len(tabs)), moved)
        panels = _swap_panel(panels, updated_source)
        panels = _swap_panel(panels, replace(dest, tabs=tuple(tabs), active_context_id=moved.context_id))

    result = replace(
        workspace,
        panels=panels,
        active_panel_id=dest.id,
        selected_context=moved.target,
        tab_history=record_history(history, moved.id, workspace.history_limit),
    )
    if source.id != dest.id:
        result = _collapse_if_empty(result, source.id)

    logger.debug("Moved %s -> %s at %d", tab_id, moved.id, dest_index)
    return MoveResult(workspace=result, new_tab_id=moved.id, old_tab_id=tab_id)


def _clamp(index: int, length: int) -> int:
    return max(0, min(int(index), length))
