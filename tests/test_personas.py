import pytest

from app.config import STRUCTURE_PROMPT, Settings
from app.services.ai.prompts import build_system_prompt
from app.services.tts.voice_service import Persona, PersonaRegistry


def test_default_settings_configure_three_personas(monkeypatch) -> None:
    for name in ("PERSONAS", "DEFAULT_PERSONA", "TTS_VOICE_GIRL", "PROMPT_BRAIN"):
        monkeypatch.delenv(name, raising=False)

    registry = PersonaRegistry.from_settings(Settings())

    assert registry.names() == ["Brain", "Girl", "Financer"]
    assert registry.default_name == "Brain"
    assert registry.get("Girl").voice == "af_bella"
    assert "Persona: Brain" in registry.get("Brain").prompt


def test_environment_overrides_personas(monkeypatch) -> None:
    monkeypatch.setenv("PERSONAS", "Girl, Narrator")
    monkeypatch.setenv("DEFAULT_PERSONA", "Narrator")
    monkeypatch.setenv("TTS_VOICE_NARRATOR", "bf_emma")
    monkeypatch.setenv("PROMPT_NARRATOR", "Persona: Narrator, calm and plain.")

    registry = PersonaRegistry.from_settings(Settings())

    assert registry.names() == ["Girl", "Narrator"]
    assert registry.default.voice == "bf_emma"
    assert registry.default.prompt == "Persona: Narrator, calm and plain."


def test_unknown_names_fall_back_to_default() -> None:
    registry = PersonaRegistry([Persona("A", "", "v1"), Persona("B", "", "v2")], default="B")
    assert registry.get(None).name == "B"
    assert registry.get("Z").name == "B"
    assert registry.resolve_name("A") == "A"


def test_unconfigured_default_uses_first_persona() -> None:
    registry = PersonaRegistry([Persona("A", "", "v1")], default="Missing")
    assert registry.default_name == "A"


def test_registry_needs_personas() -> None:
    with pytest.raises(ValueError):
        PersonaRegistry([])


def test_system_prompt_combines_structure_and_persona() -> None:
    prompt = build_system_prompt(STRUCTURE_PROMPT, Persona("Brain", "Persona: Brain", "am_santa"))
    assert prompt.startswith("You are producing a short-form script")
    assert "END_SENTENCE" in prompt and "END_SUMMARY" in prompt
    assert prompt.endswith("Persona: Brain")
    assert build_system_prompt("Format.", Persona("Plain", "", "v")) == "Format."
