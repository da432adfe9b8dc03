"""
Confluencer Models
Document representations for stories and their audio references.
"""

from app.models.story import (
    AudioRef,
    LocalPathAudio,
    PublicUrlAudio,
    ScriptLine,
    Section,
    StorageKeyAudio,
    StoryModel,
)

__all__ = [
    "AudioRef",
    "LocalPathAudio",
    "PublicUrlAudio",
    "ScriptLine",
    "Section",
    "StorageKeyAudio",
    "StoryModel",
]
