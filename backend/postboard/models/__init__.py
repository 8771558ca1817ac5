# Models package init
from postboard.models.comment import Comment
from postboard.models.post import Post

__all__ = ["Comment", "Post"]
