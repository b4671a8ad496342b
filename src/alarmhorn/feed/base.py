"""Abstract base class for alarm change feeds.

A change feed delivers, for one subscribed collection, an initial full
snapshot followed by incremental diffs. Each diff is an ordered list of
ChangeEvent objects.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TypeAlias

from ..models import ChangeEvent

DiffCallback: TypeAlias = Callable[[list[ChangeEvent]], None]
Unsubscribe: TypeAlias = Callable[[], None]


class ChangeFeed(ABC):
    """Source of ordered alarm diffs.

    Implementations may call ``on_diff`` from any thread, but must call it
    once per diff and in delivery order.
    """

    @abstractmethod
    def subscribe(self, on_diff: DiffCallback) -> Unsubscribe:
        """Start listening for diffs.

        Args:
            on_diff: Called with each diff; the first call carries the
                initial snapshot

        Returns:
            Callable that stops the subscription
        """
        pass
