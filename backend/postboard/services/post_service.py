"""
Postboard Backend: Post Service
=================================

What:  The five operations on the posts table: list, get, create, update, delete.
Why:   Keeps storage access and outcome classification out of the HTTP layer.
How:   Each method takes the request's AsyncSession, performs the operation
       and returns a Result. Domain outcomes (not found, nothing to update)
       are failed Results; storage faults are caught, rolled back, logged and
       reported with a fixed per-operation message.
Who:   Called by the /api/posts route handlers.

Outcome table:
    list_posts   ok([PostResponse])      | STORAGE "Failed to fetch posts"
    get_post     ok(PostResponse)        | NOT_FOUND | STORAGE "Failed to fetch post"
    create_post  ok(PostResponse)        | STORAGE "Failed to create post"
    update_post  ok(PostResponse)        | VALIDATION | NOT_FOUND | STORAGE "Failed to update post"
    delete_post  ok(DeletedPost)         | NOT_FOUND | STORAGE "Failed to delete post"

The fault detail is written to the server log only; clients always receive
the fixed message.
"""

import logging

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.database import server_now
from postboard.errors import ErrorKind, NO_FIELDS_MESSAGE, POST_NOT_FOUND_MESSAGE
from postboard.models.post import Post
from postboard.schemas.envelope import Result
from postboard.schemas.post import DeletedPost, PostCreate, PostResponse, PostUpdate

logger = logging.getLogger(__name__)


class PostService:
    """
    Stateless service for post operations.

    Every method receives the session for the current request, so a single
    instance is shared by all requests.
    """

    async def list_posts(self, db: AsyncSession) -> Result:
        """All posts, newest first."""
        try:
            result = await db.execute(
                select(Post).order_by(desc(Post.created_at), desc(Post.id))
            )
            posts = result.scalars().all()
            return Result.ok([PostResponse.model_validate(post) for post in posts])
        except Exception as e:
            return await self._storage_fault(db, "Failed to fetch posts", e)

    async def get_post(self, db: AsyncSession, post_id: int) -> Result:
        try:
            post = await db.get(Post, post_id)
            if post is None:
                return Result.fail(ErrorKind.NOT_FOUND, POST_NOT_FOUND_MESSAGE)
            return Result.ok(PostResponse.model_validate(post))
        except Exception as e:
            return await self._storage_fault(db, "Failed to fetch post", e)

    async def create_post(self, db: AsyncSession, payload: PostCreate) -> Result:
        """
        Insert a post and return it with its id and timestamps.

        Both timestamps come from the column server defaults of the same
        INSERT, so created_at == updated_at on the returned post.
        """
        try:
            post = Post(title=payload.title, content=payload.content)
            db.add(post)
            await db.flush()
            # Load id and the server-assigned timestamps
            await db.refresh(post)
            logger.info("Post created: id=%s", post.id)
            return Result.ok(PostResponse.model_validate(post))
        except Exception as e:
            return await self._storage_fault(db, "Failed to create post", e)

    async def update_post(self, db: AsyncSession, post_id: int, payload: PostUpdate) -> Result:
        """
        Apply the present, non-empty fields of payload and refresh updated_at.

        A payload with nothing to apply is rejected before storage is touched.
        """
        changes = payload.changes()
        if not changes:
            return Result.fail(ErrorKind.VALIDATION, NO_FIELDS_MESSAGE)

        try:
            post = await db.get(Post, post_id)
            if post is None:
                return Result.fail(ErrorKind.NOT_FOUND, POST_NOT_FOUND_MESSAGE)

            for field, value in changes.items():
                setattr(post, field, value)
            post.updated_at = server_now()

            await db.flush()
            await db.refresh(post)
            logger.info("Post updated: id=%s fields=%s", post_id, sorted(changes))
            return Result.ok(PostResponse.model_validate(post))
        except Exception as e:
            return await self._storage_fault(db, "Failed to update post", e)

    async def delete_post(self, db: AsyncSession, post_id: int) -> Result:
        try:
            post = await db.get(Post, post_id)
            if post is None:
                return Result.fail(ErrorKind.NOT_FOUND, POST_NOT_FOUND_MESSAGE)

            await db.delete(post)
            await db.flush()
            logger.info("Post deleted: id=%s", post_id)
            return Result.ok(DeletedPost(id=post_id))
        except Exception as e:
            return await self._storage_fault(db, "Failed to delete post", e)

    async def _storage_fault(self, db: AsyncSession, message: str, exc: Exception) -> Result:
        # Roll back so the session-per-request commit does not hit a failed transaction
        logger.error("%s: %s: %s", message, type(exc).__name__, exc)
        await db.rollback()
        return Result.fail(ErrorKind.STORAGE, message)


post_service = PostService()
