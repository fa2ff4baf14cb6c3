"""Action registry: the fixed catalog of per-window verbs.

Each verb maps to a KWin script fragment run with the target window bound
to ``w``. Query verbs report through ``output_result``; mutation verbs
have exactly one side effect and print nothing.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple


class ActionKind(str, Enum):
    QUERY = "query"
    MUTATION = "mutation"


@dataclass(frozen=True)
class Action:
    """A catalog verb and the script fragment it expands to."""

    verb: str
    kind: ActionKind
    fragment: str
    description: str = ""

    @property
    def is_query(self) -> bool:
        return self.kind == ActionKind.QUERY


_CATALOG: Tuple[Action, ...] = (
    # Queries
    Action(
        "getwindowname", ActionKind.QUERY,
        "output_result(w.caption);",
        "Print the window title",
    ),
    Action(
        "getwindowclassname", ActionKind.QUERY,
        "output_result(w.resourceClass);",
        "Print the window class",
    ),
    Action(
        "getwindowgeometry", ActionKind.QUERY,
        "output_result(`Window ${w.internalId}`); "
        "output_result(`  Position: ${w.x},${w.y}`); "
        "output_result(`  Geometry: ${w.width}x${w.height}`);",
        "Print the window id, position and size",
    ),
    Action(
        "getwindowpid", ActionKind.QUERY,
        "output_result(w.pid);",
        "Print the owning process id",
    ),
    # Mutations
    Action(
        "windowminimize", ActionKind.MUTATION,
        "w.minimized = true;",
        "Minimize the window",
    ),
    Action(
        "windowraise", ActionKind.MUTATION,
        "workspace.raiseWindow(w);",
        "Raise the window to the top of the stacking order",
    ),
    Action(
        "windowclose", ActionKind.MUTATION,
        "w.closeWindow();",
        "Ask the window to close",
    ),
    Action(
        "windowkill", ActionKind.MUTATION,
        "w.killWindow();",
        "Kill the window's client",
    ),
    Action(
        "windowactivate", ActionKind.MUTATION,
        "workspace.setActiveWindow(w);",
        "Activate (focus) the window",
    ),
)

ACTIONS: Mapping[str, Action] = MappingProxyType({a.verb: a for a in _CATALOG})

QUERY_VERBS = frozenset(v for v, a in ACTIONS.items() if a.kind == ActionKind.QUERY)
MUTATION_VERBS = frozenset(v for v, a in ACTIONS.items() if a.kind == ActionKind.MUTATION)


def is_action(verb: str) -> bool:
    return verb in ACTIONS


def get_action(verb: str) -> Action:
    """Exact-match lookup. Unknown verbs are rejected by the parser first."""
    return ACTIONS[verb]
