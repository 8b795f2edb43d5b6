# app/models/user.py

from typing import Optional

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from pydantic import BaseModel, ConfigDict

from app.db.base_class import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(100), nullable=False, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    avatar = Column(String(255), default="")

    # Private fields, never part of a public profile
    hashed_password = Column(String(255), nullable=False)
    refresh_token = Column(String(512), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

class UserCreate(BaseModel):
    full_name: str
    email: str
    password: str
    avatar: str = ""

class UserPublic(BaseModel):
    id: int
    full_name: str
    email: str
    avatar: Optional[str] = ""

    model_config = ConfigDict(from_attributes=True)
