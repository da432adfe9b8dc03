"""
Configuration module for Confluencer backend.
Loads settings from .env file and environment variables.
"""

import os
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv

# Values already present in the environment win over the .env file
load_dotenv(Path(__file__).parent.parent / ".env", override=False)


STRUCTURE_PROMPT = """You are producing a short-form script from technical or documentation text.
Output ONLY the lines to be read aloud (no markdown, no stage directions, no asides).
The FIRST sentence is the title: short, punchy, and clickbaity.
No newlines; write as continuous sentences.
Ignore UI chrome (buttons/menus). Summarize only core content.

Structure EXACTLY like this for EACH sentence:
"sentence": "sentence goes here"
"action": "action name here"
END_SENTENCE

At the very end, append:
END_SUMMARY

Valid actions:
thinking
shrug
laugh
disappointed
confused
happy
surprised
excited
angry
explaining1
explaining2
explaining3"""

PERSONA_PROMPTS: Dict[str, str] = {
    "Brain": (
        'Persona: Brain, a witty, slightly snarky "corporate-brain" mascot.\n'
        "Tone: playful, clever, unapologetically nerdy. Toss in light jabs at red tape.\n"
        "Keep sentences tight and energetic."
    ),
    "Girl": (
        "Persona: Girl, upbeat anime-style explainer vibes.\n"
        "Tone: friendly, excited, charmingly dramatic clickbait energy.\n"
        "Sprinkle light humor and keep momentum high."
    ),
    "Financer": (
        "Persona: Financer, a finance bro who hypes up everything like it's the next big deal.\n"
        'Tone: overconfident, energetic, motivational. Uses hype phrases ("game-changer", '
        '"massive upside", "next-level") and treats every fact like an IPO pitch.'
    ),
}

PERSONA_VOICES: Dict[str, str] = {
    "Brain": "am_santa",
    "Girl": "af_bella",
    "Financer": "am_adam",
}


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _env_list(name: str, default: str) -> List[str]:
    return [s.strip() for s in os.getenv(name, default).split(",") if s.strip()]


class Settings:
    """Application configuration loaded from environment variables."""

    def __init__(self):
        self.app_name: str = os.getenv("APP_NAME", "Confluencer")
        self.api_version: str = os.getenv("API_VERSION", "v1")
        self.debug: bool = _env_bool("DEBUG", "false")
        self.environment: str = os.getenv("ENVIRONMENT", "development")

        # Chat completion (Groq-compatible endpoint)
        self.chat_api_key: str = os.getenv("CHAT_API_KEY", os.getenv("GROQ_API_KEY", ""))
        self.chat_api_url: str = os.getenv("CHAT_API_URL", "")
        self.chat_model: str = os.getenv("CHAT_MODEL", "llama-3.1-8b-instant")

        # Prompts and personas
        self.structure_prompt: str = os.getenv("STRUCTURE_PROMPT", STRUCTURE_PROMPT)
        self.personas: List[str] = _env_list("PERSONAS", ",".join(PERSONA_PROMPTS))
        self.default_persona: str = os.getenv("DEFAULT_PERSONA", self.personas[0] if self.personas else "Brain")
        self.require_all_personas: bool = _env_bool("REQUIRE_ALL_PERSONAS", "false")
        self.persona_prompts: Dict[str, str] = {
            name: os.getenv(f"PROMPT_{name.upper()}", PERSONA_PROMPTS.get(name, ""))
            for name in self.personas
        }

        # Text-to-speech (OpenAI-compatible speech endpoint, e.g. Kokoro)
        self.tts_api_key: str = os.getenv("TTS_API_KEY", "NOT_REQUIRED")
        self.tts_api_url: str = os.getenv("TTS_API_URL", "http://localhost:8880/v1")
        self.tts_model: str = os.getenv("TTS_MODEL", "kokoro")
        self.tts_default_voice: str = os.getenv("TTS_VOICE", "af_bella")
        self.tts_voices: Dict[str, str] = {
            name: os.getenv(f"TTS_VOICE_{name.upper()}", PERSONA_VOICES.get(name, self.tts_default_voice))
            for name in self.personas
        }
        self.tts_speed: float = float(os.getenv("TTS_SPEED", "1.0") or 1.0)
        self.tts_timeout: float = float(os.getenv("TTS_TIMEOUT", "90"))

        # Content acquisition
        self.fetch_timeout: float = float(os.getenv("FETCH_TIMEOUT", "30"))

        # Audio storage
        self.storage_backend: str = os.getenv("STORAGE_BACKEND", "local").lower()
        self.audio_dir: str = os.getenv("AUDIO_DIR", "audio")
        self.audio_folder: str = os.getenv("AUDIO_FOLDER", "confluencer-audio")
        self.public_base_url: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/")
        self.signed_url_ttl_seconds: int = int(os.getenv("SIGNED_URL_TTL_SECONDS", "3600"))

        # Firebase
        self.firebase_credentials_path: str = os.getenv("FIREBASE_CREDENTIALS_PATH", "")
        self.storage_bucket: str = os.getenv("STORAGE_BUCKET", "")
        self.firebase_public_audio: bool = _env_bool("FIREBASE_PUBLIC_AUDIO", "true")

        # S3-compatible bucket
        self.s3_bucket: str = os.getenv("S3_BUCKET", "")
        self.s3_endpoint_url: str = os.getenv("S3_ENDPOINT_URL", "")
        self.s3_region: str = os.getenv("S3_REGION", "us-east-1")
        self.s3_access_key_id: str = os.getenv("S3_ACCESS_KEY_ID", "")
        self.s3_secret_access_key: str = os.getenv("S3_SECRET_ACCESS_KEY", "")
        self.s3_public_base_url: str = os.getenv("S3_PUBLIC_BASE_URL", "").rstrip("/")

        # Local document store
        self.data_dir: str = os.getenv("DATA_DIR", "data")

        # CORS (GET-only)
        self.cors_origins: List[str] = _env_list("CORS_ORIGINS", "https://confluencerclient.vercel.app")


_settings = None


def get_settings() -> Settings:
    """Get application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
