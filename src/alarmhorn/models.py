"""Alarm data models with validation."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import InvalidAlarmRecordError, UnknownAlarmKindError


class AlarmKind(str, Enum):
    """Closed set of alarm categories, as stored in the ``type`` field."""

    EINZELFAHRZEUGALARM = "EINZELFAHRZEUGALARM"
    VORALARM = "VORALARM"
    ZUGALARM = "ZUGALARM"
    KEINER = "KEINER"

    @classmethod
    def parse(cls, value: object) -> "AlarmKind":
        """Parse a document value into an AlarmKind.

        Raises:
            UnknownAlarmKindError: If the value is not one of the known kinds.
        """
        try:
            return cls(value)
        except ValueError:
            raise UnknownAlarmKindError(value) from None


class ChangeKind(str, Enum):
    """Kind of change reported by the change feed."""

    CREATED = "created"
    UPDATED = "updated"
    REMOVED = "removed"


@dataclass(frozen=True)
class AlarmRecord:
    """Snapshot of a remote alarm document.

    Args:
        kind: Alarm category
        announcement_text: Text to be spoken; empty means no speech requested
        remote_audio_path: Blob path of the rendered speech clip, set once
            upstream text-to-speech rendering has completed
    """

    kind: AlarmKind
    announcement_text: str = ""
    remote_audio_path: str | None = None

    def __post_init__(self) -> None:
        """Validate alarm record."""
        if not isinstance(self.kind, AlarmKind):
            raise TypeError("kind must be an AlarmKind")

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "AlarmRecord":
        """Build a record from raw document fields (``type``, ``ttsText``, ``bucketPath``).

        Raises:
            UnknownAlarmKindError: If ``type`` is missing or unknown.
            InvalidAlarmRecordError: If ``ttsText`` or ``bucketPath`` is not a string.
        """
        kind = AlarmKind.parse(data.get("type"))

        for field in ("ttsText", "bucketPath"):
            value = data.get(field)
            if value is not None and not isinstance(value, str):
                raise InvalidAlarmRecordError(field, value)

        return cls(
            kind=kind,
            announcement_text=data.get("ttsText") or "",
            remote_audio_path=data.get("bucketPath") or None,
        )

    @property
    def wants_speech(self) -> bool:
        return bool(self.announcement_text)


@dataclass(frozen=True)
class ChangeEvent:
    """One element of a diff delivered by the change feed."""

    change_kind: ChangeKind
    record: AlarmRecord
    document_id: str = ""


@dataclass(frozen=True)
class DispatchDecision:
    """Request to announce one alarm.

    Args:
        kind: Alarm category, selects the gong
        remote_audio_path: Optional blob path of the speech clip
        document_id: Source document, used for log context
    """

    kind: AlarmKind
    remote_audio_path: str | None = None
    document_id: str = ""
