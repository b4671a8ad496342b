"""alarmhorn - announce station alarms on indicator lights and speakers."""

__version__ = "0.1.0"
__all__ = ["AlarmService"]


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name == "AlarmService":
        from .service import AlarmService

        return AlarmService
    raise AttributeError(f"module 'alarmhorn' has no attribute {name!r}")
