"""Audio storage interface shared by all back ends."""

from abc import ABC, abstractmethod
from typing import Union

from app.models.story import LocalPathAudio, PublicUrlAudio, StorageKeyAudio

StoredAudio = Union[PublicUrlAudio, StorageKeyAudio, LocalPathAudio]

AUDIO_CONTENT_TYPE = "audio/mpeg"


class AudioStorage(ABC):
    """Writes narration audio somewhere clients can later play it from."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Back-end identifier used in logs and configuration."""

    @abstractmethod
    async def upload(self, data: bytes, filename: str) -> StoredAudio:
        """
        Persist one MP3 buffer.

        Args:
            data: Audio bytes
            filename: Basename including extension, e.g. ``<uuid>.mp3``

        Returns:
            The reference to store on the section.

        Raises:
            StorageError: If the write fails.
        """

    def signed_url(self, key: str, expires_in: int) -> str:
        """Mint a time-limited GET URL for a private object key."""
        raise NotImplementedError(f"{self.name} storage does not issue signed URLs")
