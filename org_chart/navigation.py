"""
Org Chart — Navigation Helper

Sibling/parent/child lookups over a forest, re-derived on every call
(no cached index), and a keyboard selection cursor built on them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Sequence

from .domain_types import OrgNode, SiblingInfo
from .tree import find_node

if TYPE_CHECKING:
    from .engine import OrgChartEngine

logger = logging.getLogger(__name__)

ARROW_KEYS = ("ArrowUp", "ArrowDown", "ArrowLeft", "ArrowRight")
FOCUS_KEYS = (" ", "f", "F")


# ---------------------------------------------------------------------------
# Stateless lookups
# ---------------------------------------------------------------------------

def find_siblings(forest: Sequence[OrgNode], node_id: str) -> SiblingInfo:
    """
    Siblings of *node_id*, its index among them, and its parent.

    Roots have the root list as siblings and no parent. An unknown id
    yields no siblings, index -1 and no parent.
    """
    roots = list(forest)
    for index, root in enumerate(roots):
        if root.id == node_id:
            return SiblingInfo(siblings=roots, index=index, parent=None)

    stack = list(reversed(roots))
    while stack:
        node = stack.pop()
        for index, child in enumerate(node.children):
            if child.id == node_id:
                return SiblingInfo(siblings=node.children, index=index, parent=node)
        stack.extend(reversed(node.children))

    return SiblingInfo(siblings=[], index=-1, parent=None)


def find_parent(forest: Sequence[OrgNode], node_id: str) -> Optional[OrgNode]:
    return find_siblings(forest, node_id).parent


# ---------------------------------------------------------------------------
# Selection cursor
# ---------------------------------------------------------------------------

class KeyboardNavigator:
    """
    Keyboard selection cursor over an engine's rendered forest.

    Keys:
      ArrowUp / ArrowDown   previous / next sibling
      ArrowLeft             parent
      ArrowRight            first child (expands the node if collapsed)
      Enter                 toggle expand (nodes with children)
      Space / f / F         focus the selected subtree (nodes with children)
      Escape                exit focus, else clear the selection

    Writes expand and focus changes back through the engine.
    """

    def __init__(self, engine: "OrgChartEngine") -> None:
        self._engine = engine
        self._selected_node_id: Optional[str] = None
        self._is_keyboard_active: bool = False

    # -- State access -------------------------------------------------------

    @property
    def selected_node_id(self) -> Optional[str]:
        return self._selected_node_id

    @property
    def is_keyboard_active(self) -> bool:
        return self._is_keyboard_active

    @property
    def selected_node(self) -> Optional[OrgNode]:
        if self._selected_node_id is None:
            return None
        return find_node(self._forest(), self._selected_node_id)

    def select(self, node_id: Optional[str]) -> None:
        """Set (or clear, with None) the selection."""
        self._selected_node_id = node_id
        if node_id is None:
            self._is_keyboard_active = False

    def _forest(self) -> List[OrgNode]:
        return self._engine.rendered_forest

    def _move_to(self, node_id: str) -> bool:
        self._selected_node_id = node_id
        self._is_keyboard_active = True
        return True

    # -- Movement -----------------------------------------------------------

    def select_first(self) -> bool:
        """Select the focused node if it is in view, else the first root."""
        forest = self._forest()
        target: Optional[OrgNode] = None
        focused_id = self._engine.focused_node_id
        if focused_id is not None:
            target = find_node(forest, focused_id)
        if target is None and forest:
            target = forest[0]
        if target is None:
            return False
        return self._move_to(target.id)

    def move_up(self) -> bool:
        if self._selected_node_id is None:
            return False
        info = find_siblings(self._forest(), self._selected_node_id)
        if info.index > 0:
            return self._move_to(info.siblings[info.index - 1].id)
        return False

    def move_down(self) -> bool:
        if self._selected_node_id is None:
            return False
        info = find_siblings(self._forest(), self._selected_node_id)
        if 0 <= info.index < len(info.siblings) - 1:
            return self._move_to(info.siblings[info.index + 1].id)
        return False

    def go_to_parent(self) -> bool:
        if self._selected_node_id is None:
            return False
        parent = find_parent(self._forest(), self._selected_node_id)
        if parent is None:
            return False
        return self._move_to(parent.id)

    def go_to_child(self) -> bool:
        """Select the first child, expanding the current node first if needed."""
        node = self.selected_node
        if node is None or not node.children:
            return False
        if not self._engine.is_node_expanded(node.id):
            self._engine.toggle_expansion(node.id)
        return self._move_to(node.children[0].id)

    # -- Actions ------------------------------------------------------------

    def toggle_selected(self) -> bool:
        node = self.selected_node
        if node is None or not node.children:
            return False
        self._engine.toggle_expansion(node.id)
        return True

    def focus_on_selected(self) -> bool:
        node = self.selected_node
        if node is None or not node.children:
            return False
        self._engine.focus(node.id)
        return True

    def escape(self) -> bool:
        """Leave focus mode if active, otherwise drop the selection."""
        if self._engine.focused_node_id is not None:
            self._engine.clear_focus()
        else:
            self.select(None)
        return True

    # -- Key dispatch -------------------------------------------------------

    def handle_key(self, key: str) -> bool:
        """Apply *key*. Returns True when the key was consumed."""
        if key == "Escape":
            if self._selected_node_id is None and self._engine.focused_node_id is None:
                return False
            return self.escape()

        if self._selected_node_id is None:
            if key in ARROW_KEYS:
                return self.select_first()
            return False

        if self.selected_node is None:
            logger.debug(
                "Selected node %r is not in the current view", self._selected_node_id,
            )
            return False

        if key == "ArrowUp":
            self.move_up()
        elif key == "ArrowDown":
            self.move_down()
        elif key == "ArrowLeft":
            self.go_to_parent()
        elif key == "ArrowRight":
            self.go_to_child()
        elif key == "Enter":
            self.toggle_selected()
        elif key in FOCUS_KEYS:
            self.focus_on_selected()
        else:
            return False
        return True
