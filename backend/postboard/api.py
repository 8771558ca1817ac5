"""
Postboard Backend: API Application
====================================

What:  The FastAPI application serving everything under /api/.
Why:   A separate application gives the API its own middleware and error
       handlers: every outcome is an envelope, and the shared-secret check runs
       before routing.
How:   create_api_app() is called by create_app() and mounted at /api.

Inside this app paths are relative to the mount: /posts, /posts/{id}.
Trailing-slash redirects and the interactive docs are disabled, so
/api/posts/ and /api/docs are plain "Not found" outcomes.
"""

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from postboard import __version__
from postboard.config import Settings
from postboard.middleware.api_key import ApiKeyMiddleware
from postboard.middleware.error_envelope import (
    ErrorEnvelopeMiddleware,
    register_exception_handlers,
)
from postboard.routes import posts


def create_api_app(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
) -> FastAPI:
    api = FastAPI(
        title="Postboard API",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    api.state.settings = settings
    api.state.session_factory = session_factory

    # Last added runs first: ErrorEnvelope wraps ApiKey wraps the router
    api.add_middleware(ApiKeyMiddleware, api_key=settings.api_key)
    api.add_middleware(ErrorEnvelopeMiddleware)

    register_exception_handlers(api)

    api.include_router(posts.router)
    return api
