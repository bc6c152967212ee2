"""
This module defines the ArtifactCache, a file-backed store for generated
calendar documents.

Each artifact is a single file in a flat directory, named by its cache key.
The file modification time is the artifact's creation timestamp; there is no
index file. Writes go to a temporary file in the same directory which is then
moved over the target, so readers only ever see complete documents.
"""
import logging
import os
import re
import tempfile
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..config import CACHE_DIR, CACHE_TTL
from ..exceptions import ArtifactNotFoundError
from ..models import CalendarArtifact

logger = logging.getLogger(__name__)

cache_key_pattern = re.compile(r"^[0-9a-f]{40}$")


class ArtifactCache:
    """Handles reading and writing of cached calendar artifacts."""

    def __init__(self, cache_dir: str = CACHE_DIR):
        self.cache_dir = str(cache_dir)

    def ensure_dir(self) -> None:
        """Creates the cache directory if it does not exist yet."""
        os.makedirs(self.cache_dir, exist_ok=True)

    def path_for(self, key: str) -> str:
        """Returns the file path of the artifact for ``key``."""
        if not cache_key_pattern.match(key):
            raise ValueError(f"Invalid cache key: {key!r}")
        return os.path.join(self.cache_dir, key)

    def exists(self, key: str) -> bool:
        return os.path.isfile(self.path_for(key))

    def created_at(self, key: str) -> datetime:
        """
        Returns the creation timestamp of the artifact as an aware UTC datetime.

        Raises:
            ArtifactNotFoundError: If no artifact is stored under ``key``.
        """
        try:
            mtime = os.path.getmtime(self.path_for(key))
        except FileNotFoundError as e:
            raise ArtifactNotFoundError(f"No cached artifact for key {key}") from e
        return datetime.fromtimestamp(mtime, tz=timezone.utc)

    def is_fresh(
        self, key: str, now: Optional[datetime] = None, ttl: timedelta = CACHE_TTL
    ) -> bool:
        """
        Checks whether the artifact is younger than ``ttl``.

        A missing artifact is never fresh.
        """
        try:
            created = self.created_at(key)
        except ArtifactNotFoundError:
            return False
        if now is None:
            now = datetime.now(timezone.utc)
        return now - created < ttl

    def read(self, key: str) -> bytes:
        """
        Reads the raw bytes of an artifact.

        Raises:
            ArtifactNotFoundError: If no artifact is stored under ``key``.
        """
        try:
            with open(self.path_for(key), "rb") as f:
                return f.read()
        except FileNotFoundError as e:
            raise ArtifactNotFoundError(f"No cached artifact for key {key}") from e

    def load(self, key: str) -> CalendarArtifact:
        """
        Reads an artifact together with its creation timestamp.

        Both come from the same open file, so a concurrent replace can never
        pair one version's bytes with another version's timestamp.

        Raises:
            ArtifactNotFoundError: If no artifact is stored under ``key``.
        """
        try:
            with open(self.path_for(key), "rb") as f:
                mtime = os.fstat(f.fileno()).st_mtime
                data = f.read()
        except FileNotFoundError as e:
            raise ArtifactNotFoundError(f"No cached artifact for key {key}") from e
        return CalendarArtifact(
            cache_key=key, data=data, created_at=datetime.fromtimestamp(mtime, tz=timezone.utc)
        )

    def write(self, key: str, data: bytes) -> None:
        """Replaces the artifact for ``key`` with ``data`` in one step."""
        target = self.path_for(key)
        self.ensure_dir()
        # Temp file lives in the cache dir so os.replace stays on one filesystem
        temp_file = tempfile.NamedTemporaryFile(
            mode="wb", dir=self.cache_dir, prefix=f".{key}.", suffix=".tmp", delete=False
        )
        try:
            with temp_file:
                temp_file.write(data)
            os.replace(temp_file.name, target)
        except OSError:
            if os.path.exists(temp_file.name):
                os.remove(temp_file.name)
            raise
        logger.info(f"Wrote {len(data)} bytes to cache file {target}")
