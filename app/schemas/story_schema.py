"""
Story Request/Response Schemas
API schemas for story creation and listing.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class CreateSummaryRequest(BaseModel):
    """Body of POST /summaries. Posted text wins over url."""

    text: Optional[str] = Field(default=None, description="Raw text to summarize")
    url: Optional[str] = Field(default=None, description="Page to scrape when no text is given")

    def has_input(self) -> bool:
        return any(isinstance(v, str) and v.strip() for v in (self.text, self.url))


class SectionResponse(BaseModel):
    """A section with its audio resolved to a playable URL."""

    text: str = Field(description="Narrated sentence")
    audio: str = Field(description="Playable audio URL")
    action: Optional[str] = Field(default=None, description="Animation cue")


class StoryResponse(BaseModel):
    """Client representation of a story for one persona."""

    id: str = Field(description="Story ID")
    title: str = Field(description="Story title")
    sections: List[SectionResponse] = Field(description="Sections in narration order")
    persona: Optional[str] = Field(default=None, description="Persona the sections belong to")
    personas: List[str] = Field(default_factory=list, description="Personas stored on this story")
    source_url: Optional[str] = Field(default=None, description="Originating page")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")


class PersonaInfo(BaseModel):
    name: str
    voice: str


class PersonaListResponse(BaseModel):
    default: str = Field(description="Persona served when none is requested")
    personas: List[PersonaInfo]
