"""Story creation pipeline: acquire -> script -> parse -> speak -> upload -> persist."""

import asyncio
from typing import Awaitable, Dict, List, Optional, Tuple
from uuid import uuid4

from app.crud.story import StoryCRUD
from app.models.story import ScriptLine, Section, StoryModel
from app.services.ai.chat_service import ChatService
from app.services.ai.prompts import build_system_prompt
from app.services.ai.script_parser import ScriptParser
from app.services.content.scraper import ContentFetcher
from app.services.storage.base import AudioStorage
from app.services.tts.speech_service import SpeechService
from app.services.tts.voice_service import Persona, PersonaRegistry
from app.utils.exceptions import ScriptGenerationError
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def _gather_or_cancel(aws: List[Awaitable]) -> list:
    """Run awaitables concurrently; on the first failure cancel the rest and re-raise."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class StoryPipeline:
    """
    Builds one Story per request.

    Each persona gets its own model call and its own narration; personas run
    concurrently, sentences within a persona run in narration order. Nothing
    is persisted unless every section of every kept persona was uploaded.
    """

    def __init__(
        self,
        fetcher: ContentFetcher,
        chat: ChatService,
        parser: ScriptParser,
        speech: SpeechService,
        storage: AudioStorage,
        stories: StoryCRUD,
        personas: PersonaRegistry,
        structure_prompt: str,
        require_all_personas: bool = False,
    ):
        self.fetcher = fetcher
        self.chat = chat
        self.parser = parser
        self.speech = speech
        self.storage = storage
        self.stories = stories
        self.personas = personas
        self.structure_prompt = structure_prompt
        self.require_all_personas = require_all_personas

    async def _script_for(self, persona: Persona, source_text: str) -> List[ScriptLine]:
        raw = await self.chat.generate_script(
            source_text, build_system_prompt(self.structure_prompt, persona)
        )
        lines = self.parser.parse(raw)
        logger.info(
            "Parsed script for persona %s: %d lines (%d chars raw)",
            persona.name, len(lines), len(raw or ""),
        )
        return lines

    async def generate_scripts(self, source_text: str) -> List[Tuple[Persona, List[ScriptLine]]]:
        """
        Generate and parse one script per persona.

        Personas whose script is empty are dropped unless
        ``require_all_personas`` is set, in which case the request fails.

        Raises:
            ScriptGenerationError: If no persona (or, in strict mode, not every
                persona) produced at least one line.
        """
        personas = self.personas.all()
        scripts = await _gather_or_cancel([self._script_for(p, source_text) for p in personas])

        empty = [p.name for p, lines in zip(personas, scripts) if not lines]
        kept = [(p, lines) for p, lines in zip(personas, scripts) if lines]

        if empty:
            logger.warning(
                "Personas produced no script",
                extra={"extra_data": {"personas": empty}},
            )
        if not kept:
            raise ScriptGenerationError(
                "Empty or invalid summary returned.",
                details={"personas": empty},
            )
        if empty and self.require_all_personas:
            raise ScriptGenerationError(
                "Not every persona produced a script.",
                details={"personas": empty},
            )
        return kept

    async def narrate(self, persona: Persona, lines: List[ScriptLine]) -> List[Section]:
        """Synthesize and upload each line in order."""
        sections: List[Section] = []
        for index, line in enumerate(lines):
            audio = await self.speech.synthesize(line.sentence, persona.voice)
            ref = await self.storage.upload(audio, f"{uuid4()}.mp3")
            sections.append(Section(text=line.sentence, audio=ref, action=line.action))
            logger.debug("Persona %s: section %d/%d uploaded", persona.name, index + 1, len(lines))
        return sections

    def _primary(self, kept: List[Tuple[Persona, List[ScriptLine]]]) -> Tuple[Persona, List[ScriptLine]]:
        for persona, lines in kept:
            if persona.name == self.personas.default_name:
                return persona, lines
        return kept[0]

    async def create_story(self, text: Optional[str] = None, url: Optional[str] = None) -> StoryModel:
        """
        Run the whole pipeline and persist the result.

        Args:
            text: Raw text to summarize; takes precedence over url
            url: Page to scrape when no text is given

        Returns:
            The stored story
        """
        source_text = await self.fetcher.acquire(text, url)

        kept = await self.generate_scripts(source_text)
        primary, primary_lines = self._primary(kept)

        narrated = await _gather_or_cancel([self.narrate(p, lines) for p, lines in kept])
        by_persona: Dict[str, List[Section]] = {
            persona.name: sections for (persona, _), sections in zip(kept, narrated)
        }

        source_url = url.strip() if isinstance(url, str) and url.strip() else None
        story = StoryModel(
            title=primary_lines[0].sentence,
            personas=by_persona,
            primary_persona=primary.name,
            source_url=source_url,
        )
        return self.stories.create(story)
