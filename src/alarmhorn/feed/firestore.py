"""Firestore-backed change feed and station lookup."""

import logging
from pathlib import Path
from typing import Any

from google.cloud import firestore

from ..errors import InvalidAlarmRecordError, StationNotFoundError, UnknownAlarmKindError
from ..models import AlarmRecord, ChangeEvent, ChangeKind
from .base import ChangeFeed, DiffCallback, Unsubscribe

logger = logging.getLogger(__name__)

# google.cloud.firestore ChangeType names
_CHANGE_KINDS = {
    "ADDED": ChangeKind.CREATED,
    "MODIFIED": ChangeKind.UPDATED,
    "REMOVED": ChangeKind.REMOVED,
}


def create_client(key_file: Path, project_id: str) -> firestore.Client:
    """Create a Firestore client authenticated with a service account key file."""
    return firestore.Client.from_service_account_json(str(key_file), project=project_id)


def get_station(client: firestore.Client, station_path: str) -> dict[str, Any]:
    """Fetch the station document.

    Args:
        client: Firestore client
        station_path: Document path, e.g. ``stations/<id>``

    Returns:
        Station document fields

    Raises:
        StationNotFoundError: If the document does not exist
    """
    snapshot = client.document(station_path).get()
    data = snapshot.to_dict() if snapshot.exists else None
    if data is None:
        raise StationNotFoundError(station_path)
    return data


class FirestoreChangeFeed(ChangeFeed):
    """Change feed over a Firestore collection using ``on_snapshot``.

    Firestore invokes the snapshot callback on its own watch thread, one
    snapshot at a time. Every snapshot is converted into a list of
    ChangeEvent objects and handed to the subscriber unchanged in order.
    """

    def __init__(self, client: firestore.Client, collection_path: str) -> None:
        """Initialize feed.

        Args:
            client: Firestore client
            collection_path: Collection to watch, e.g. ``stations/<id>/alarms``
        """
        self.client = client
        self.collection_path = collection_path
        self._reported_kinds: set[str] = set()

    def subscribe(self, on_diff: DiffCallback) -> Unsubscribe:
        def on_snapshot(col_snapshot: Any, changes: list[Any], read_time: Any) -> None:
            on_diff(self.convert_changes(changes))

        watch = self.client.collection(self.collection_path).on_snapshot(on_snapshot)
        logger.debug(f"Subscribed to {self.collection_path}")
        return watch.unsubscribe

    def convert_changes(self, changes: list[Any]) -> list[ChangeEvent]:
        """Convert Firestore DocumentChange objects into ChangeEvents.

        Elements with an unknown alarm type are dropped; each distinct
        unknown type is reported once as an error.
        """
        events = []
        for change in changes:
            change_kind = _CHANGE_KINDS.get(change.type.name)
            document = change.document
            if change_kind is None:
                logger.warning(f"Ignoring unknown change type {change.type!r} for {document.id}")
                continue

            try:
                record = AlarmRecord.from_document(document.to_dict() or {})
            except UnknownAlarmKindError as e:
                key = repr(e.value)
                if key not in self._reported_kinds:
                    self._reported_kinds.add(key)
                    logger.error(f"{e} (document {document.id}), alarm skipped")
                continue
            except InvalidAlarmRecordError as e:
                logger.error(f"{e} (document {document.id}), alarm skipped")
                continue

            events.append(
                ChangeEvent(change_kind=change_kind, record=record, document_id=document.id)
            )
        return events
