# server/models/user.py

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime
from . import Base


def utcnow():
    return datetime.now(timezone.utc)


# -------------------------------
# User Model
# -------------------------------

class User(Base):
    """
    Database model for blog authors.
    Stores username and bcrypt-hashed password for authentication.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
