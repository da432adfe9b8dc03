"""Local-disk audio storage served by the app's /audio static mount."""

import asyncio
from pathlib import Path

from app.models.story import LocalPathAudio
from app.services.storage.base import AudioStorage
from app.utils.exceptions import StorageError
from app.utils.logger import get_logger

logger = get_logger(__name__)


class LocalAudioStorage(AudioStorage):
    """Writes files into a directory; references are paths relative to it."""

    def __init__(self, directory: str):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    @property
    def name(self) -> str:
        return "local"

    async def upload(self, data: bytes, filename: str) -> LocalPathAudio:
        target = self.directory / filename
        try:
            await asyncio.to_thread(target.write_bytes, data)
        except OSError as e:
            logger.error("Failed to write audio file %s: %s", target, e)
            raise StorageError(details={"backend": self.name, "file": filename}) from e
        return LocalPathAudio(path=filename)
