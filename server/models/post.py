# server/models/post.py

from sqlalchemy import Column, Integer, String, Text, DateTime
from . import Base
from .user import utcnow


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String)
    summary = Column(String)
    content = Column(Text)
    cover = Column(String, nullable=True)
    # username copied from the token, not a foreign key
    author = Column(String, index=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "title": self.title,
            "summary": self.summary,
            "content": self.content,
            "cover": self.cover,
            "author": self.author,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
