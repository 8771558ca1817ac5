"""
Postboard Backend: Comments Preview
=====================================

What:  Builds the HTML page served for every path outside /api/.
How:   Reads the first rows of the comments table with a raw SELECT *,
       pretty-prints them as JSON and embeds the text in a Jinja2 template.

The comments table is opaque to this service: whatever columns the storage
returns are serialized as-is. Values that are not JSON-native (datetimes,
decimals) are rendered with str(). There is no error handling here; a storage
failure propagates to the application's exception handler.
"""

import json
from typing import Any, Dict, List

from jinja2 import Environment
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

PREVIEW_ROW_LIMIT = 3

_environment = Environment(autoescape=True)

_PAGE_TEMPLATE = _environment.from_string(
    """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>Postboard</title>
    <style>
      body { font-family: system-ui, sans-serif; margin: 2rem auto; max-width: 48rem; }
      pre { background: #f5f5f5; border-radius: 4px; padding: 1rem; overflow-x: auto; }
    </style>
  </head>
  <body>
    <h1>Postboard</h1>
    <p>The first {{ limit }} rows of the <code>comments</code> table:</p>
    <pre><code>{{ content }}</code></pre>
    <p>The posts API is served under <code>/api/posts</code>.</p>
  </body>
</html>
"""
)


def render_html(content: str, limit: int = PREVIEW_ROW_LIMIT) -> str:
    """Embed pre-formatted text in the preview page. The text is HTML-escaped."""
    return _PAGE_TEMPLATE.render(content=content, limit=limit)


class PreviewService:

    async def fetch_comments(self, db: AsyncSession, limit: int = PREVIEW_ROW_LIMIT) -> List[Dict[str, Any]]:
        result = await db.execute(
            text("SELECT * FROM comments LIMIT :limit"),
            {"limit": limit},
        )
        return [dict(row) for row in result.mappings().all()]

    async def render_page(self, db: AsyncSession) -> str:
        rows = await self.fetch_comments(db)
        return render_html(json.dumps(rows, indent=2, default=str))


preview_service = PreviewService()
