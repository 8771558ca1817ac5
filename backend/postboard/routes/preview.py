"""
Postboard Backend: Preview Route
==================================

Catch-all for every path outside /api/ and every method: renders the first
rows of the comments table as an HTML page. Registered after the /api mount,
so API paths never reach it.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.database import get_db_session
from postboard.services.preview_service import preview_service

router = APIRouter(tags=["Preview"])

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route(
    "/{full_path:path}",
    methods=ALL_METHODS,
    response_class=HTMLResponse,
    include_in_schema=False,
)
async def preview(full_path: str, db: AsyncSession = Depends(get_db_session)) -> HTMLResponse:
    html = await preview_service.render_page(db)
    return HTMLResponse(content=html)
