"""
Confluencer Schemas
Pydantic request/response schemas for API validation and documentation.
"""

from app.schemas.responses import ApiResponse, ErrorBody, ErrorResponse
from app.schemas.story_schema import (
    CreateSummaryRequest,
    PersonaInfo,
    PersonaListResponse,
    SectionResponse,
    StoryResponse,
)

__all__ = [
    "ApiResponse",
    "ErrorBody",
    "ErrorResponse",
    "CreateSummaryRequest",
    "PersonaInfo",
    "PersonaListResponse",
    "SectionResponse",
    "StoryResponse",
]
