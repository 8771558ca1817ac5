"""
Reference model for the read-only `comments` table.

The preview page reads this table with a raw `SELECT *` and never depends on
these columns; the model only exists so development and test databases can be
created with create_tables().
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from postboard.database import Base


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, author={self.author!r})>"
