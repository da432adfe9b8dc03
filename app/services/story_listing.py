"""Read path: shape stored stories for clients."""

import random
from typing import Any, Dict, List, Optional, Sequence, TypeVar

from app.models.story import StoryModel
from app.services.storage.resolver import AudioResolver

T = TypeVar("T")


def shuffle_stories(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Return a uniformly shuffled copy (Fisher-Yates). The input is left as is."""
    rng = rng or random
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def story_view(
    story: StoryModel,
    resolver: AudioResolver,
    persona: Optional[str] = None,
    default_persona: Optional[str] = None,
) -> Dict[str, Any]:
    """Client representation of a story with playable audio URLs for one persona."""
    sections = story.sections_for(persona, default_persona)
    return {
        "id": story.id,
        "title": story.title,
        "sections": resolver.resolve_sections(sections),
        "persona": next((name for name, s in story.personas.items() if s is sections), None),
        "personas": list(story.personas),
        "source_url": story.source_url,
        "created_at": story.created_at.isoformat(),
        "updated_at": story.updated_at.isoformat(),
    }
