"""
Story CRUD
Create and read operations for the ``stories`` collection.
Works with both the Firestore client and LocalStore.
"""

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import ValidationError

from app.models.story import StoryModel
from app.utils.logger import get_logger

logger = get_logger(__name__)


class StoryCRUD:
    """Stories are written once and never updated."""

    collection_name = "stories"

    def __init__(self, db: Any):
        """
        Args:
            db: Firestore client or LocalStore instance
        """
        self.db = db

    def get_collection(self) -> Any:
        return self.db.collection(self.collection_name)

    def create(self, story: StoryModel) -> StoryModel:
        """
        Persist a new story, stamping its timestamps.

        Args:
            story: Fully built story

        Returns:
            The stored story
        """
        now = datetime.now(timezone.utc)
        story = story.model_copy(update={"created_at": now, "updated_at": now})
        self.get_collection().document(story.id).set(story.to_document())
        logger.info(
            "Story stored",
            extra={"extra_data": {"story_id": story.id, "personas": list(story.personas)}},
        )
        return story

    def _load(self, doc: Any) -> Optional[StoryModel]:
        """Validate a snapshot. Missing and malformed documents load as None."""
        data = doc.to_dict() if doc.exists else None
        if data is None:
            return None
        data.setdefault("id", doc.id)
        try:
            return StoryModel.model_validate(data)
        except ValidationError as e:
            logger.warning("Skipping malformed story %s: %d validation errors", doc.id, e.error_count())
            return None

    def get_by_id(self, story_id: str) -> Optional[StoryModel]:
        """Returns None for unknown ids and for documents that no longer validate."""
        return self._load(self.get_collection().document(story_id).get())

    def list_all(self) -> List[StoryModel]:
        """Load every story. Documents that fail validation are skipped."""
        stories = []
        for doc in self.get_collection().get():
            story = self._load(doc)
            if story is not None:
                stories.append(story)
        return stories
