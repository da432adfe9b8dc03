"""Turns stored audio references into playable URLs at read time."""

from typing import Callable, Dict, List, Optional, Type

from app.models.story import LocalPathAudio, PublicUrlAudio, Section, StorageKeyAudio
from app.services.storage.base import AudioStorage, StoredAudio
from app.utils.exceptions import StorageError
from app.utils.logger import get_logger

logger = get_logger(__name__)


class AudioResolver:
    """
    One resolver function per AudioRef variant.

    Signed URLs are minted on every call; nothing is cached because the
    expiry window is short compared to how often clients re-poll.
    """

    def __init__(
        self,
        public_base_url: str,
        signer: Optional[AudioStorage] = None,
        signed_url_ttl: int = 3600,
    ):
        self.public_base_url = public_base_url.rstrip("/")
        self.signer = signer
        self.signed_url_ttl = signed_url_ttl
        self._resolvers: Dict[Type, Callable] = {
            PublicUrlAudio: self._resolve_url,
            StorageKeyAudio: self._resolve_key,
            LocalPathAudio: self._resolve_path,
        }

    def _resolve_url(self, ref: PublicUrlAudio) -> str:
        return ref.url

    def _sign(self, key: str) -> str:
        if self.signer is None:
            raise StorageError(
                "No storage back end configured to sign audio keys",
                details={"key": key},
            )
        try:
            return self.signer.signed_url(key, self.signed_url_ttl)
        except NotImplementedError as e:
            raise StorageError(str(e), details={"key": key}) from e

    def _resolve_key(self, ref: StorageKeyAudio) -> str:
        try:
            return self._sign(ref.key)
        except StorageError:
            if not ref.fallback:
                raise
            logger.warning("Cannot sign %s, serving its stored fallback", ref.key)
            if ref.fallback.startswith(("http://", "https://")):
                return ref.fallback
            return self._local_url(ref.fallback)

    def _resolve_path(self, ref: LocalPathAudio) -> str:
        return self._local_url(ref.path)

    def _local_url(self, path: str) -> str:
        return f"{self.public_base_url}/audio/{path.lstrip('/')}"

    def resolve(self, ref: StoredAudio) -> str:
        return self._resolvers[type(ref)](ref)

    def resolve_sections(self, sections: List[Section]) -> List[dict]:
        """Serialize sections with ``audio`` replaced by its URL. Inputs are not modified."""
        return [
            {"text": s.text, "audio": self.resolve(s.audio), "action": s.action}
            for s in sections
        ]
