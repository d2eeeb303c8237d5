# sellsight/api/v1/ideas.py

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status

from sellsight.api.deps import get_repository
from sellsight.db.repository import ProductRepository, RepositoryError
from sellsight.schemas.idea import (
    GenerateIdeasRequest,
    GenerateIdeasResponse,
    Idea,
    IdeaCreate,
    IdeaPrompt,
    IdeaStatusUpdate,
    IdeaUpdate,
)
from sellsight.services import idea_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[Idea], summary="List brainstorming ideas")
def list_ideas(repo: ProductRepository = Depends(get_repository)):
    try:
        return repo.list_ideas()
    except RepositoryError as e:
        logger.error(f"Error listing ideas: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch ideas")


@router.post("", response_model=Idea, status_code=status.HTTP_201_CREATED, summary="Create an idea")
def create_idea(payload: IdeaCreate, repo: ProductRepository = Depends(get_repository)):
    try:
        return idea_service.create_idea(repo, payload)
    except RepositoryError as e:
        logger.error(f"Error creating idea: {e}")
        raise HTTPException(status_code=500, detail="Failed to create idea")


@router.get("/prompts", response_model=List[IdeaPrompt], summary="List idea prompts")
async def list_prompts():
    """Inspiration sources the idea board can generate from."""
    return idea_service.IDEA_PROMPTS


@router.post("/generate", response_model=GenerateIdeasResponse, summary="Generate ideas")
async def generate_ideas(payload: GenerateIdeasRequest):
    """
    One or two suggestions per selected prompt. Suggestions are not saved;
    create an idea from one to keep it.
    """
    try:
        return {"ideas": idea_service.generate_ideas(payload.prompts)}
    except idea_service.UnknownPromptError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _update(repo: ProductRepository, idea_id: str, payload: IdeaUpdate) -> Idea:
    try:
        idea = idea_service.update_idea(repo, idea_id, payload)
    except RepositoryError as e:
        logger.error(f"Error updating idea {idea_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update idea")
    if idea is None:
        raise HTTPException(status_code=404, detail="Idea not found")
    return idea


@router.put("/{idea_id}", response_model=Idea, summary="Update an idea")
def update_idea(
    payload: IdeaUpdate,
    idea_id: str = Path(..., description="Idea identifier"),
    repo: ProductRepository = Depends(get_repository),
):
    return _update(repo, idea_id, payload)


@router.patch("/{idea_id}/status", response_model=Idea, summary="Change an idea's status")
def change_idea_status(
    payload: IdeaStatusUpdate,
    idea_id: str = Path(..., description="Idea identifier"),
    repo: ProductRepository = Depends(get_repository),
):
    return _update(repo, idea_id, IdeaUpdate(status=payload.status))


@router.delete("/{idea_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an idea")
def delete_idea(
    idea_id: str = Path(..., description="Idea identifier"),
    repo: ProductRepository = Depends(get_repository),
):
    try:
        deleted = repo.delete_idea(idea_id)
    except RepositoryError as e:
        logger.error(f"Error deleting idea {idea_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete idea")
    if not deleted:
        raise HTTPException(status_code=404, detail="Idea not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
