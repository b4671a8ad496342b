"""Change feed package for alarmhorn.

This package classifies alarm changes and adapts Firestore snapshots
into ordered diffs.
"""

from .base import ChangeFeed
from .classifier import ChangeFeedClassifier

__all__ = ["ChangeFeed", "ChangeFeedClassifier"]
