"""Prompt assembly for script generation."""

from app.services.tts.voice_service import Persona


def build_system_prompt(structure_prompt: str, persona: Persona) -> str:
    """
    Combine the output-format instructions with a persona's tone.

    The structure prompt defines HOW to answer (sentence/action blocks and
    delimiters); the persona prompt defines what the narrator sounds like.
    """
    if not persona.prompt:
        return structure_prompt.strip()
    return f"{structure_prompt.strip()}\n\n{persona.prompt.strip()}"
