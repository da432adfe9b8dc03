"""
Shared application dependencies.

Every external client is built once by ``build_services`` (at startup, from
settings) and handed to endpoints through FastAPI ``Depends``. Tests swap the
whole bundle via ``app.dependency_overrides[get_services]``.
"""

import os
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Depends, Request

from app.config import Settings, get_settings
from app.crud.story import StoryCRUD
from app.services.ai.chat_service import ChatService
from app.services.ai.script_parser import RegexScriptParser, ScriptParser
from app.services.content.scraper import ContentFetcher
from app.services.storage.base import AudioStorage
from app.services.storage.resolver import AudioResolver
from app.services.story_pipeline import StoryPipeline
from app.services.tts.speech_service import SpeechService
from app.services.tts.voice_service import PersonaRegistry
from app.utils.exceptions import ConfluencerException
from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class Services:
    """Explicitly constructed clients shared by all requests."""

    settings: Settings
    stories: StoryCRUD
    personas: PersonaRegistry
    storage: AudioStorage
    resolver: AudioResolver
    fetcher: ContentFetcher
    speech: SpeechService
    parser: ScriptParser
    chat: Optional[ChatService] = None


def _firebase_configured(settings: Settings) -> bool:
    cred_path = settings.firebase_credentials_path
    return bool(cred_path) and os.path.exists(cred_path)


def build_db_client(settings: Settings) -> Any:
    """Firestore when Firebase credentials exist, LocalStore otherwise."""
    if _firebase_configured(settings):
        from firebase_admin import firestore

        from app.services.storage.firebase_storage import init_firebase_app

        init_firebase_app(settings.firebase_credentials_path, settings.storage_bucket)
        logger.info("Using Firestore database")
        return firestore.client()

    from app.services.local_store import get_local_store

    logger.info("Firebase credentials not found - using LocalStore database")
    return get_local_store(settings.data_dir)


def build_audio_storage(settings: Settings) -> AudioStorage:
    """Pick the audio back end named by STORAGE_BACKEND."""
    backend = settings.storage_backend
    if backend == "firebase":
        from app.services.storage.firebase_storage import FirebaseAudioStorage, init_firebase_app

        init_firebase_app(settings.firebase_credentials_path, settings.storage_bucket)
        return FirebaseAudioStorage(
            bucket_name=settings.storage_bucket,
            folder=settings.audio_folder,
            public=settings.firebase_public_audio,
        )
    if backend == "s3":
        from app.services.storage.s3_storage import S3AudioStorage

        return S3AudioStorage(
            bucket=settings.s3_bucket,
            prefix=settings.audio_folder,
            endpoint_url=settings.s3_endpoint_url,
            region=settings.s3_region,
            access_key_id=settings.s3_access_key_id,
            secret_access_key=settings.s3_secret_access_key,
            public_base_url=settings.s3_public_base_url,
        )
    if backend != "local":
        raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r}")

    from app.services.storage.local_storage import LocalAudioStorage

    return LocalAudioStorage(settings.audio_dir)


def build_services(settings: Settings) -> Services:
    """Construct every client from settings."""
    storage = build_audio_storage(settings)
    logger.info("Audio storage back end: %s", storage.name)

    chat = None
    if settings.chat_api_key:
        chat = ChatService(
            api_key=settings.chat_api_key,
            model=settings.chat_model,
            base_url=settings.chat_api_url or None,
        )
    else:
        logger.warning("No chat API key - story creation is disabled")

    return Services(
        settings=settings,
        stories=StoryCRUD(build_db_client(settings)),
        personas=PersonaRegistry.from_settings(settings),
        storage=storage,
        resolver=AudioResolver(
            public_base_url=settings.public_base_url,
            signer=storage,
            signed_url_ttl=settings.signed_url_ttl_seconds,
        ),
        fetcher=ContentFetcher(timeout=settings.fetch_timeout),
        speech=SpeechService(
            base_url=settings.tts_api_url,
            model=settings.tts_model,
            api_key=settings.tts_api_key,
            speed=settings.tts_speed,
            timeout=settings.tts_timeout,
        ),
        parser=RegexScriptParser(),
        chat=chat,
    )


def get_services(request: Request) -> Services:
    """Services built during application startup."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        services = build_services(get_settings())
        request.app.state.services = services
    return services


def get_story_crud(services: Services = Depends(get_services)) -> StoryCRUD:
    return services.stories


def get_persona_registry(services: Services = Depends(get_services)) -> PersonaRegistry:
    return services.personas


def get_audio_resolver(services: Services = Depends(get_services)) -> AudioResolver:
    return services.resolver


def build_story_pipeline(services: Services) -> StoryPipeline:
    """Pipeline wired with the shared clients."""
    if services.chat is None:
        raise ConfluencerException(
            "Chat API is not configured.",
            status_code=503,
            error_code="CHAT_NOT_CONFIGURED",
        )
    return StoryPipeline(
        fetcher=services.fetcher,
        chat=services.chat,
        parser=services.parser,
        speech=services.speech,
        storage=services.storage,
        stories=services.stories,
        personas=services.personas,
        structure_prompt=services.settings.structure_prompt,
        require_all_personas=services.settings.require_all_personas,
    )
