"""Interactive control loop that keeps the reclaim estimate current."""

from enum import Enum
from typing import Callable, Optional, Protocol

from zsnapfree.logging_config import get_logger
from zsnapfree.models import ReclaimResult
from zsnapfree.services.selection import SelectionModel
from zsnapfree.services.zfs_tool import ZfsToolAdapter, equivalent_command_line

logger = get_logger(__name__)

DEFAULT_IDLE_TIMEOUT = 0.5


class Action(str, Enum):
    """Discrete input actions accepted by the loop."""

    FIRST = "first"
    LAST = "last"
    PREVIOUS = "previous"
    NEXT = "next"
    TOGGLE = "toggle"
    EXIT = "exit"


class EventSource(Protocol):
    """Blocking source of input actions."""

    def poll(self, timeout: float) -> Optional[Action]:
        """Wait up to ``timeout`` seconds; return an action or None if idle."""
        ...


class RecomputeLoop:
    """
    Drives input handling and coalesced reclaim estimation.

    Input actions only mutate the selection. The dry run is issued when no
    input has arrived for ``idle_timeout`` seconds and the selection is
    dirty, so a burst of toggles costs a single zfs invocation.
    """

    def __init__(
        self,
        dataset: str,
        selection: SelectionModel,
        adapter: ZfsToolAdapter,
        idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
    ):
        """
        Initialize the loop.

        Args:
            dataset: Dataset whose snapshots are listed in selection
            selection: Selection model to mutate
            adapter: Adapter used for dry-run estimates
            idle_timeout: Seconds of input idleness before recomputing
        """
        self.dataset = dataset
        self.selection = selection
        self.adapter = adapter
        self.idle_timeout = idle_timeout
        self.result = ReclaimResult()
        self.exit_requested = False

    @property
    def dirty(self) -> bool:
        return self.selection.dirty

    def handle_action(self, action: Action) -> None:
        """Apply one input action; never recomputes."""
        if action == Action.FIRST:
            self.selection.move_first()
        elif action == Action.LAST:
            self.selection.move_last()
        elif action == Action.PREVIOUS:
            self.selection.move_previous()
        elif action == Action.NEXT:
            self.selection.move_next()
        elif action == Action.TOGGLE:
            self.selection.toggle_current()
        elif action == Action.EXIT:
            self.exit_requested = True

    def recompute(self, force: bool = False) -> None:
        """
        Refresh the estimate from the current marks.

        Args:
            force: Recompute even if the selection is not dirty

        Raises:
            ZsnapfreeError: If the dry run fails; the previous result is kept
        """
        if not (force or self.selection.dirty):
            return

        ranges = self.selection.ranges()
        if not ranges:
            logger.debug("Nothing selected, reclaim estimate is empty")
            self.result = ReclaimResult()
        else:
            logger.debug(f"Recomputing reclaim estimate for {len(ranges)} ranges")
            self.result = self.adapter.estimate_reclaim(self.dataset, ranges)
        self.selection.dirty = False

    def run(
        self,
        events: EventSource,
        render: Optional[Callable[["RecomputeLoop"], None]] = None,
    ) -> None:
        """
        Process input until an exit action arrives.

        Args:
            events: Source of input actions
            render: Called before each wait so the screen reflects current state

        Raises:
            ZsnapfreeError: If a dry run fails; the session should end
        """
        while not self.exit_requested:
            if render is not None:
                render(self)
            action = events.poll(self.idle_timeout)
            if action is None:
                self.recompute()
            else:
                self.handle_action(action)

    def equivalent_command_line(self) -> str:
        """The dry-run command matching the current selection."""
        return equivalent_command_line(self.dataset, self.selection.ranges())
