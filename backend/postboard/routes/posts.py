"""
Postboard Backend: Posts Route Handlers
=========================================

What:  The five /api/posts endpoints.
How:   Each handler delegates to PostService and renders the returned Result
       as the JSON envelope. Routes are mounted under /api by create_app().

Routes:
    GET    /api/posts        list, newest first
    POST   /api/posts        create   (X-API-Key, body PostCreate)
    GET    /api/posts/{id}   fetch one
    PUT    /api/posts/{id}   update   (X-API-Key, body PostUpdate)
    DELETE /api/posts/{id}   delete   (X-API-Key)

{id} only matches ASCII digits; anything else falls through to "Not found".

Bodies are decoded as JSON whatever the Content-Type header says, so
`curl -d '{"title": ...}'` (form-urlencoded) works like an application/json
request. An empty or undecodable body is a json_invalid error; JSON that does
not fit the schema is a validation error.
"""

import json
from typing import Any, Type

from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.database import get_db_session
from postboard.middleware.error_envelope import envelope_response
from postboard.schemas.post import PostCreate, PostUpdate
from postboard.services.post_service import post_service

router = APIRouter(tags=["Posts"])

_FAILURE = {"description": "Envelope with success=false"}


# ── Body Dependencies ─────────────────────────────────────────────────────
async def read_json_body(request: Request) -> Any:
    raw = await request.body()
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise RequestValidationError(
            [
                {
                    "type": "json_invalid",
                    "loc": ("body",),
                    "msg": "JSON decode error",
                    "input": {},
                    "ctx": {"error": str(exc)},
                }
            ]
        ) from exc


def body_as(model: Type[BaseModel]):
    """Dependency that validates the decoded JSON body against model."""

    async def validated_body(data: Any = Depends(read_json_body)) -> BaseModel:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise RequestValidationError(exc.errors(include_url=False), body=data) from exc

    return validated_body


@router.get(
    "/posts",
    summary="List all posts, newest first",
    responses={400: _FAILURE},
)
async def list_posts(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    result = await post_service.list_posts(db)
    return envelope_response(request, result)


@router.post(
    "/posts",
    summary="Create a post",
    responses={400: _FAILURE, 401: {"description": "Missing or invalid X-API-Key"}},
)
async def create_post(
    request: Request,
    payload: PostCreate = Depends(body_as(PostCreate)),
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    result = await post_service.create_post(db, payload)
    return envelope_response(request, result)


@router.get(
    "/posts/{post_id:int}",
    summary="Get a single post by id",
    responses={400: _FAILURE},
)
async def get_post(
    post_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    result = await post_service.get_post(db, post_id)
    return envelope_response(request, result)


@router.put(
    "/posts/{post_id:int}",
    summary="Update the title and/or content of a post",
    responses={400: _FAILURE, 401: {"description": "Missing or invalid X-API-Key"}},
)
async def update_post(
    post_id: int,
    request: Request,
    payload: PostUpdate = Depends(body_as(PostUpdate)),
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    """
    Partial update. Fields that are absent, null or empty are left unchanged;
    updated_at is refreshed whenever at least one field is applied.
    """
    result = await post_service.update_post(db, post_id, payload)
    return envelope_response(request, result)


@router.delete(
    "/posts/{post_id:int}",
    summary="Delete a post",
    responses={400: _FAILURE, 401: {"description": "Missing or invalid X-API-Key"}},
)
async def delete_post(
    post_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    result = await post_service.delete_post(db, post_id)
    return envelope_response(request, result)
