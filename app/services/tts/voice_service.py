"""Persona registry: narration styles and the TTS voice each one speaks with."""

from dataclasses import dataclass
from typing import Dict, List, Optional

from app.config import Settings
from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Persona:
    """A named narration style with its prompt and TTS voice."""

    name: str
    prompt: str
    voice: str

    def to_dict(self) -> dict:
        return {"name": self.name, "voice": self.voice}


class PersonaRegistry:
    """Ordered lookup of configured personas with a default fallback."""

    def __init__(self, personas: List[Persona], default: Optional[str] = None):
        if not personas:
            raise ValueError("At least one persona must be configured")
        self._personas: Dict[str, Persona] = {p.name: p for p in personas}
        if default not in self._personas:
            if default:
                logger.warning("Default persona %r is not configured, using %r", default, personas[0].name)
            default = personas[0].name
        self.default_name: str = default

    @classmethod
    def from_settings(cls, settings: Settings) -> "PersonaRegistry":
        personas = [
            Persona(
                name=name,
                prompt=settings.persona_prompts.get(name, ""),
                voice=settings.tts_voices.get(name, settings.tts_default_voice),
            )
            for name in settings.personas
        ]
        if not personas:
            personas = [Persona(name="default", prompt="", voice=settings.tts_default_voice)]
        return cls(personas, default=settings.default_persona)

    @property
    def default(self) -> Persona:
        return self._personas[self.default_name]

    def all(self) -> List[Persona]:
        """Personas in configuration order."""
        return list(self._personas.values())

    def names(self) -> List[str]:
        return list(self._personas)

    def get(self, name: Optional[str]) -> Persona:
        """Return the named persona, or the default when absent or unknown."""
        if name and name in self._personas:
            return self._personas[name]
        return self.default

    def resolve_name(self, name: Optional[str]) -> str:
        return self.get(name).name

    def to_dict(self) -> dict:
        return {
            "default": self.default_name,
            "personas": [p.to_dict() for p in self.all()],
        }
