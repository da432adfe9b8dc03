"""
Firebase (Google Cloud Storage) audio storage.
Only imports firebase_admin when this back end is selected.
"""

import asyncio
from datetime import timedelta
from typing import Any, Optional

from app.models.story import PublicUrlAudio, StorageKeyAudio
from app.services.storage.base import AUDIO_CONTENT_TYPE, AudioStorage, StoredAudio
from app.utils.exceptions import StorageError
from app.utils.logger import get_logger

logger = get_logger(__name__)


def init_firebase_app(credentials_path: str, storage_bucket: str = "") -> None:
    """Initialize the default Firebase app once per process."""
    import firebase_admin
    from firebase_admin import credentials

    if firebase_admin._apps:
        return

    options = {"storageBucket": storage_bucket} if storage_bucket else None
    if credentials_path:
        cred = credentials.Certificate(credentials_path)
        firebase_admin.initialize_app(cred, options)
        logger.info("Firebase initialized with credentials: %s", credentials_path)
    else:
        firebase_admin.initialize_app(options=options)
        logger.info("Firebase initialized with default credentials")


class FirebaseAudioStorage(AudioStorage):
    """
    Uploads audio to a Firebase Storage bucket.

    Public mode makes each blob world-readable and stores its durable URL.
    Private mode stores the object key and signs a URL on every read.
    """

    def __init__(
        self,
        bucket_name: str = "",
        folder: str = "",
        public: bool = True,
        bucket: Optional[Any] = None,
    ):
        if bucket is None:
            from firebase_admin import storage

            bucket = storage.bucket(bucket_name or None)
        self.bucket = bucket
        self.folder = folder.strip("/")
        self.public = public

    @property
    def name(self) -> str:
        return "firebase"

    def _object_key(self, filename: str) -> str:
        return f"{self.folder}/{filename}" if self.folder else filename

    def _upload_sync(self, data: bytes, key: str) -> StoredAudio:
        blob = self.bucket.blob(key)
        blob.upload_from_string(data, content_type=AUDIO_CONTENT_TYPE)
        if self.public:
            blob.make_public()
            return PublicUrlAudio(url=blob.public_url)
        return StorageKeyAudio(key=key)

    async def upload(self, data: bytes, filename: str) -> StoredAudio:
        key = self._object_key(filename)
        try:
            return await asyncio.to_thread(self._upload_sync, data, key)
        except Exception as e:
            logger.error("Firebase upload failed for %s: %s", key, e)
            raise StorageError(details={"backend": self.name, "key": key}) from e

    def signed_url(self, key: str, expires_in: int) -> str:
        try:
            return self.bucket.blob(key).generate_signed_url(
                version="v4",
                expiration=timedelta(seconds=expires_in),
                method="GET",
            )
        except Exception as e:
            logger.error("Firebase signing failed for %s: %s", key, e)
            raise StorageError("Failed to sign audio URL", details={"backend": self.name, "key": key}) from e
