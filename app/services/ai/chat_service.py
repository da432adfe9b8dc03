"""Groq chat-completion integration for script generation."""

from typing import Any, Optional

from groq import AsyncGroq

from app.utils.logger import get_logger

logger = get_logger(__name__)


class ChatService:
    """Service that turns source text into a narration script."""

    DEFAULT_MODEL = "llama-3.1-8b-instant"

    def __init__(
        self,
        api_key: str = "",
        model: str = DEFAULT_MODEL,
        base_url: Optional[str] = None,
        client: Optional[Any] = None,
    ):
        """
        Initialize chat service.

        Args:
            api_key: API key for the chat endpoint
            model: Chat model name
            base_url: Override for Groq-compatible endpoints
            client: Pre-built async client exposing chat.completions.create

        Raises:
            ValueError: If neither api_key nor client is given
        """
        if client is None:
            if not api_key:
                raise ValueError("API key cannot be empty")
            client = AsyncGroq(api_key=api_key, base_url=base_url or None)

        self.client = client
        self.model = model

        logger.info("ChatService initialized with model=%s", model)

    async def generate_script(self, source_text: str, system_prompt: str) -> str:
        """
        Ask the model for a structured script.

        Args:
            source_text: Acquired text to summarize
            system_prompt: Structure and persona instructions

        Returns:
            Trimmed model output, or an empty string when the call fails or
            the model returns nothing.
        """
        if not source_text:
            return ""

        try:
            logger.debug("Requesting script from model=%s (%d chars)", self.model, len(source_text))
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": source_text},
                ],
            )
        except Exception as e:
            logger.error("Script generation failed with model=%s: %s", self.model, e)
            return ""

        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        content = getattr(choices[0].message, "content", None) or ""
        return content.strip()
