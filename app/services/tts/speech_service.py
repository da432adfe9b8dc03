"""Text-to-speech through an OpenAI-compatible /audio/speech endpoint (e.g. Kokoro)."""

from typing import Optional

import httpx

from app.utils.exceptions import TTSError
from app.utils.logger import get_logger

logger = get_logger(__name__)


class SpeechService:
    """Synthesizes one sentence at a time into MP3 bytes."""

    DEFAULT_TIMEOUT = 90.0

    def __init__(
        self,
        base_url: str,
        model: str = "kokoro",
        api_key: str = "",
        speed: float = 1.0,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API root, e.g. ``http://localhost:8880/v1``
            model: TTS model name
            api_key: Bearer token; ignored by most local servers
            speed: Playback speed passed to the endpoint
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.url = base_url.rstrip("/") + "/audio/speech"
        self.model = model
        self.api_key = api_key
        self.speed = speed
        self.timeout = timeout
        self._transport = transport

    async def synthesize(self, text: str, voice: str) -> bytes:
        """
        Convert a sentence to audio.

        Raises:
            TTSError: If the endpoint fails or returns no audio.
        """
        payload = {
            "model": self.model,
            "voice": voice,
            "input": text,
            "speed": self.speed,
            "response_format": "mp3",
        }
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.url, json=payload, headers=headers)
                resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("TTS request failed for voice=%s: %s", voice, e)
            raise TTSError(details={"voice": voice, "error": str(e)}) from e

        if not resp.content:
            raise TTSError("TTS endpoint returned empty audio", details={"voice": voice})

        logger.debug("Synthesized %d bytes with voice=%s", len(resp.content), voice)
        return resp.content
