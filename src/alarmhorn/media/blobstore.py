"""Blob stores holding the rendered speech clips."""

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path

from google.cloud import storage


class BlobStore(ABC):
    """Abstract byte-addressable file store.

    Blobs are addressed by the same path string that appears in an alarm
    record's ``bucketPath`` field.
    """

    @abstractmethod
    async def download(self, path: str) -> bytes:
        """Download the full contents of a blob.

        Args:
            path: Blob path inside the store

        Returns:
            Blob contents

        Raises:
            Exception: If the download fails
        """
        pass


class GcsBlobStore(BlobStore):
    """Google Cloud Storage bucket as a blob store."""

    def __init__(self, bucket: storage.Bucket) -> None:
        self.bucket = bucket

    @classmethod
    def from_service_account(
        cls, key_file: Path, project_id: str, bucket_name: str
    ) -> "GcsBlobStore":
        """Create a store for ``bucket_name`` authenticated with a key file."""
        client = storage.Client.from_service_account_json(str(key_file), project=project_id)
        return cls(client.bucket(bucket_name))

    async def download(self, path: str) -> bytes:
        blob = self.bucket.blob(path)
        # google-cloud-storage is blocking; keep the event loop free
        return await asyncio.to_thread(blob.download_as_bytes)
