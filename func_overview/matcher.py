import logging
from collections import defaultdict
from typing import NamedTuple

from .duration import Duration
from .events import Call, CallEntry, CallExit

logger = logging.getLogger(__name__)


class PendingCall(NamedTuple):
    name: str


class Sample(NamedTuple):
    name: str
    duration: Duration


class CallMatcher:
    """
    Pair call exits with their entries, one LIFO stack per CPU.

    An exit closes the innermost open entry on the same CPU; names are never
    compared. Exits with nothing open (the trace started mid-call) are dropped
    and only counted.
    """

    def __init__(self):
        self.stacks = defaultdict(list)
        self.unmatched_exits = 0

    def feed(self, event):
        """
        Consume one event, returning the completed Sample or None.
        """
        if isinstance(event, CallEntry):
            self.stacks[event.cpu].append(PendingCall(event.name))
            return None

        if isinstance(event, CallExit):
            stack = self.stacks[event.cpu]
            if not stack:
                self.unmatched_exits += 1
                return None
            return Sample(stack.pop().name, event.duration)

        if isinstance(event, Call):
            return Sample(event.name, event.duration)

        raise TypeError(f"Unexpected event type in trace: {type(event).__name__}")

    def pending(self):
        return sum(len(stack) for stack in self.stacks.values())

    def discard_pending(self):
        """
        Drop entries that never saw their exit. Returns how many were dropped.
        """
        dropped = self.pending()
        if dropped:
            logger.debug("Discarding %d unfinished calls", dropped)
        self.stacks.clear()
        return dropped
