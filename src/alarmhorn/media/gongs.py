"""Gong lookup table: which fixed sound precedes each alarm kind."""

from collections.abc import Mapping
from pathlib import Path

from ..models import AlarmKind

DEFAULT_GONGS: dict[AlarmKind, str | None] = {
    AlarmKind.EINZELFAHRZEUGALARM: "einzelfahrzeug-alarm_mit_gong.wav",
    AlarmKind.VORALARM: "vor-alarm_mit_gong.wav",
    AlarmKind.ZUGALARM: "zug-alarm_mit_gong.wav",
    AlarmKind.KEINER: None,
}


class GongTable:
    """Total mapping from AlarmKind to an optional gong file.

    A kind mapped to None is silent. Every AlarmKind must be covered, so a
    missing mapping fails at construction rather than when an alarm arrives.
    """

    def __init__(
        self, assets_dir: Path, mapping: Mapping[AlarmKind, str | None] | None = None
    ) -> None:
        """Initialize gong table.

        Args:
            assets_dir: Directory holding the gong files
            mapping: File name per kind (defaults to the built-in table)

        Raises:
            ValueError: If a kind has no mapping
        """
        mapping = dict(DEFAULT_GONGS if mapping is None else mapping)
        missing = [kind.value for kind in AlarmKind if kind not in mapping]
        if missing:
            raise ValueError(f"No gong mapping for alarm types: {', '.join(missing)}")

        self.assets_dir = assets_dir
        self._mapping = mapping

    @classmethod
    def from_overrides(cls, assets_dir: Path, overrides: Mapping[str, str]) -> "GongTable":
        """Build a table from the defaults plus config overrides.

        Args:
            assets_dir: Directory holding the gong files
            overrides: File name per kind name; "" makes the kind silent

        Raises:
            ValueError: If an override names an unknown alarm type
        """
        mapping = dict(DEFAULT_GONGS)
        for name, filename in overrides.items():
            try:
                kind = AlarmKind(name.upper())
            except ValueError:
                raise ValueError(f"Unknown alarm type in gong table: {name}") from None
            mapping[kind] = filename or None
        return cls(assets_dir, mapping)

    def path_for(self, kind: AlarmKind) -> Path | None:
        """Return the gong file for ``kind``, or None if the kind is silent."""
        filename = self._mapping[kind]
        if filename is None:
            return None
        return self.assets_dir / filename
