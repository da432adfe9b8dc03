"""
Story Models
Represents narrated stories stored in Firestore or the local store.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator


class PublicUrlAudio(BaseModel):
    """Audio already published at a durable public URL."""

    kind: Literal["url"] = "url"
    url: str = Field(min_length=1, description="Absolute public URL")


class StorageKeyAudio(BaseModel):
    """Audio stored privately; a signed URL is minted on every read."""

    kind: Literal["key"] = "key"
    key: str = Field(min_length=1, description="Object key inside the bucket")
    fallback: Optional[str] = Field(
        default=None,
        description="Older public URL or local path, served when the key cannot be signed",
    )


class LocalPathAudio(BaseModel):
    """Audio written to the local audio directory and served under /audio."""

    kind: Literal["path"] = "path"
    path: str = Field(min_length=1, description="Path relative to the audio mount")


AudioRef = Annotated[
    Union[PublicUrlAudio, StorageKeyAudio, LocalPathAudio],
    Field(discriminator="kind"),
]


def _is_absolute_url(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


def _legacy_audio_location(audio: Any) -> Optional[str]:
    if not isinstance(audio, str) or not audio.strip():
        return None
    audio = audio.strip()
    if _is_absolute_url(audio):
        return audio
    return audio.lstrip("/").removeprefix("audio/")


def legacy_audio_ref(section: Dict[str, Any]) -> Optional[Dict[str, str]]:
    """
    Map a section written by an older revision onto an AudioRef payload.

    Older documents carry ``key`` (a public URL or a bucket key) and/or
    ``audio`` (a local path). The most specific reference present wins;
    an ``audio`` next to a bucket key is kept as that key's fallback.
    """
    audio = _legacy_audio_location(section.get("audio"))

    key = section.get("key")
    if isinstance(key, str) and key.strip():
        key = key.strip()
        if _is_absolute_url(key):
            return {"kind": "url", "url": key}
        ref = {"kind": "key", "key": key}
        if audio:
            ref["fallback"] = audio
        return ref

    if not audio:
        return None
    if _is_absolute_url(audio):
        return {"kind": "url", "url": audio}
    return {"kind": "path", "path": audio}


class ScriptLine(BaseModel):
    """One parsed line of a model-generated script."""

    sentence: str = Field(min_length=1)
    action: Optional[str] = None


class Section(BaseModel):
    """One narrated sentence with its audio and optional animation cue."""

    text: str = Field(min_length=1, description="Sentence to be narrated")
    audio: AudioRef
    action: Optional[str] = Field(default=None, description="Animation cue")

    @model_validator(mode="before")
    @classmethod
    def _upgrade_legacy(cls, data: Any) -> Any:
        if isinstance(data, dict) and not isinstance(data.get("audio"), (dict, BaseModel)):
            ref = legacy_audio_ref(data)
            if ref is not None:
                data = {k: v for k, v in data.items() if k not in ("key", "audio")}
                data["audio"] = ref
        return data


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoryModel(BaseModel):
    """A persisted story: title plus ordered sections per persona."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="Story ID")
    title: str = Field(min_length=1, description="First narrated sentence")
    personas: Dict[str, List[Section]] = Field(
        default_factory=dict,
        description="Ordered sections keyed by persona name",
    )
    primary_persona: Optional[str] = Field(default=None, description="Persona the title came from")
    source_url: Optional[str] = Field(default=None, description="Originating page")
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="before")
    @classmethod
    def _upgrade_single_list(cls, data: Any) -> Any:
        # Single-persona documents only carry a top-level "sections" list
        if isinstance(data, dict) and not data.get("personas") and data.get("sections"):
            data = dict(data)
            name = data.get("primary_persona") or "default"
            data["personas"] = {name: data.pop("sections")}
            data["primary_persona"] = name
        if isinstance(data, dict):
            renamed = {"sourceUrl": "source_url", "createdAt": "created_at", "updatedAt": "updated_at"}
            for old, new in renamed.items():
                if old in data and new not in data:
                    data = dict(data)
                    data[new] = data.pop(old)
        return data

    def sections_for(self, persona: Optional[str], default_persona: Optional[str] = None) -> List[Section]:
        """
        Pick the section list to serve.

        Falls back from the requested persona to the default persona, then
        to the persona the title was taken from, then to any stored list.
        """
        for name in (persona, default_persona, self.primary_persona):
            if name and self.personas.get(name):
                return self.personas[name]
        for sections in self.personas.values():
            if sections:
                return sections
        return []

    def to_document(self) -> Dict[str, Any]:
        """Serialize for the document store."""
        return self.model_dump(mode="json")
