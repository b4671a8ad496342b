"""Media package for alarmhorn.

This package provides the gong table, the blob stores and the local cache
of downloaded speech clips.
"""

from .blobstore import BlobStore
from .cache import MediaCache
from .gongs import GongTable

__all__ = ["BlobStore", "GongTable", "MediaCache"]
