"""Change-feed classifier deciding which alarm changes get announced."""

import logging
from collections.abc import Iterable

from ..models import ChangeEvent, ChangeKind, DispatchDecision

logger = logging.getLogger(__name__)


class ChangeFeedClassifier:
    """Turns ordered change-feed diffs into dispatch decisions.

    The first diff after subscribing holds the whole existing backlog and is
    discarded. Afterwards an alarm is announced exactly once:

    - created without announcement text: announced right away
    - created with announcement text: held back until an update carries the
      rendered speech clip path, then announced
    - removed: never announced

    A record created with text whose clip never arrives stays silent.

    Example:
        classifier = ChangeFeedClassifier()
        classifier.classify(backlog)      # [] - initial snapshot
        classifier.classify(new_changes)  # [DispatchDecision(...), ...]
    """

    def __init__(self, skip_initial_snapshot: bool = True) -> None:
        """Initialize classifier.

        Args:
            skip_initial_snapshot: Whether the next diff is the initial
                snapshot that must be discarded
        """
        self._awaiting_initial_snapshot = skip_initial_snapshot

    @property
    def awaiting_initial_snapshot(self) -> bool:
        return self._awaiting_initial_snapshot

    def classify(self, diff: Iterable[ChangeEvent]) -> list[DispatchDecision]:
        """Classify one diff, in arrival order.

        Args:
            diff: Changes relative to the previous snapshot

        Returns:
            Decisions for the elements that must be announced
        """
        changes = list(diff)

        if self._awaiting_initial_snapshot:
            self._awaiting_initial_snapshot = False
            logger.info(f"Ignoring initial snapshot with {len(changes)} existing alarms")
            return []

        decisions = []
        for change in changes:
            decision = self._classify_change(change)
            if decision is not None:
                decisions.append(decision)
        return decisions

    def _classify_change(self, change: ChangeEvent) -> DispatchDecision | None:
        record = change.record

        if change.change_kind is ChangeKind.UPDATED:
            if record.remote_audio_path:
                logger.info(
                    f"New alarm with speech: {record.kind.value} / "
                    f"{record.announcement_text!r} / {record.remote_audio_path}"
                )
                return DispatchDecision(
                    kind=record.kind,
                    remote_audio_path=record.remote_audio_path,
                    document_id=change.document_id,
                )
            logger.debug(f"Skipping update without speech clip: {change.document_id}")
            return None

        if change.change_kind is ChangeKind.CREATED:
            if not record.wants_speech:
                logger.info(f"New alarm without speech: {record.kind.value}")
                return DispatchDecision(kind=record.kind, document_id=change.document_id)
            logger.debug(
                f"Waiting for speech clip of {change.document_id}: "
                f"{record.announcement_text!r}"
            )
            return None

        return None
