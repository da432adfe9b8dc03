"""Story creation and listing endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.crud.story import StoryCRUD
from app.dependencies import (
    Services,
    build_story_pipeline,
    get_audio_resolver,
    get_persona_registry,
    get_services,
    get_story_crud,
)
from app.schemas.responses import ApiResponse, ErrorResponse
from app.schemas.story_schema import CreateSummaryRequest, PersonaListResponse, StoryResponse
from app.services.story_listing import shuffle_stories, story_view
from app.services.storage.resolver import AudioResolver
from app.services.tts.voice_service import PersonaRegistry
from app.utils.exceptions import InvalidInputError, NotFoundError, StorageError
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[StoryResponse],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def create_summary(
    request: CreateSummaryRequest,
    services: Services = Depends(get_services),
) -> ApiResponse[StoryResponse]:
    """
    Summarize text or a web page into a narrated story.

    Each persona's script is parsed, every sentence is synthesized and
    uploaded, and the story is stored only when all of that succeeded.

    Raises:
        InvalidInputError: If neither text nor url is given
        ContentFetchError: If the url cannot be fetched
        ScriptGenerationError: If the model yields no sentences
    """
    if not request.has_input():
        raise InvalidInputError()

    pipeline = build_story_pipeline(services)
    story = await pipeline.create_story(text=request.text, url=request.url)

    logger.info(
        "Story created: %r",
        story.title,
        extra={"extra_data": {"story_id": story.id, "source_url": story.source_url}},
    )
    view = story_view(
        story,
        services.resolver,
        persona=story.primary_persona,
        default_persona=services.personas.default_name,
    )
    return ApiResponse.success_response(
        StoryResponse.model_validate(view), message="Story created successfully"
    )


@router.get("", response_model=ApiResponse[List[StoryResponse]])
async def list_summaries(
    persona: Optional[str] = Query(None, description="Persona whose sections to return"),
    stories: StoryCRUD = Depends(get_story_crud),
    resolver: AudioResolver = Depends(get_audio_resolver),
    personas: PersonaRegistry = Depends(get_persona_registry),
) -> ApiResponse[List[StoryResponse]]:
    """
    Return every story, audio resolved, in a fresh random order.

    Unknown or missing persona names fall back to the default persona.
    """
    selected = personas.resolve_name(persona)
    items = []
    for story in stories.list_all():
        try:
            view = story_view(story, resolver, persona=selected, default_persona=personas.default_name)
        except StorageError as e:
            logger.warning(
                "Skipping story %s: audio could not be resolved (%s)",
                story.id,
                e.message,
                extra={"extra_data": {"story_id": story.id, "details": e.details}},
            )
            continue
        items.append(StoryResponse.model_validate(view))
    return ApiResponse.success_response(
        shuffle_stories(items), message="Stories retrieved successfully"
    )


@router.get("/personas", response_model=ApiResponse[PersonaListResponse])
async def list_personas(
    personas: PersonaRegistry = Depends(get_persona_registry),
) -> ApiResponse[PersonaListResponse]:
    """Configured personas and the default one."""
    return ApiResponse.success_response(
        PersonaListResponse.model_validate(personas.to_dict()),
        message="Personas retrieved successfully",
    )


@router.get(
    "/{story_id}",
    response_model=ApiResponse[StoryResponse],
    responses={404: {"model": ErrorResponse}},
)
async def get_summary(
    story_id: str,
    persona: Optional[str] = Query(None, description="Persona whose sections to return"),
    stories: StoryCRUD = Depends(get_story_crud),
    resolver: AudioResolver = Depends(get_audio_resolver),
    personas: PersonaRegistry = Depends(get_persona_registry),
) -> ApiResponse[StoryResponse]:
    """Single story by ID."""
    story = stories.get_by_id(story_id)
    if story is None:
        raise NotFoundError("Story not found", details={"story_id": story_id})

    view = story_view(
        story,
        resolver,
        persona=personas.resolve_name(persona),
        default_persona=personas.default_name,
    )
    return ApiResponse.success_response(
        StoryResponse.model_validate(view), message="Story retrieved successfully"
    )
