import logging
from dataclasses import dataclass, field
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass
class SortState:
    column: str
    direction: str = "asc"  # asc | desc

    @property
    def descending(self) -> bool:
        return self.direction == "desc"


@dataclass
class ViewState:
    filters: dict[str, str] = field(default_factory=dict)
    sort: Optional[SortState] = None
    hidden_columns: set[str] = field(default_factory=set)
    header_cache: list[str] = field(default_factory=list)
    columns_visible: bool = False

    def is_default(self) -> bool:
        return self == ViewState()


@dataclass
class NavigationFrame:
    value: Any
    label: str


class NavigationStack:
    """Drill-down history; frame 0 is always the root.

    Every change of depth or top frame replaces the view state with a fresh
    default one.
    """

    ROOT_LABEL = "root"

    def __init__(self, root):
        self.frames: list[NavigationFrame] = [NavigationFrame(root, self.ROOT_LABEL)]
        self.view = ViewState()

    @property
    def depth(self) -> int:
        return len(self.frames)

    def _reset_view(self):
        self.view = ViewState()

    def push(self, label: str, value):
        self.frames.append(NavigationFrame(value, label))
        self._reset_view()
        logger.debug("push %s (depth %d)", label, self.depth)

    def truncate_to(self, index: int) -> bool:
        if index < 0 or index >= len(self.frames):
            return False
        del self.frames[index + 1:]
        self._reset_view()
        logger.debug("truncate to %d", index)
        return True

    def current(self) -> NavigationFrame:
        return self.frames[-1]

    def reset_to_root(self, value):
        self.frames = [NavigationFrame(value, self.ROOT_LABEL)]
        self._reset_view()

    def labels(self) -> list[str]:
        return [frame.label for frame in self.frames]

    def path_labels(self) -> list[str]:
        return self.labels()[1:]
