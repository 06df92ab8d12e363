"""
ORM models for campaigns, conversations, brand kits and audit logs.

Every record carries the id of the user that owns it.
"""

import uuid

from sqlalchemy import Column, String, Float, Boolean, Text, DateTime, JSON
from sqlalchemy.sql import func

from marketmate.storage.database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class Campaign(Base):
    __tablename__ = "campaigns"

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    goal = Column(Text, nullable=False)
    channels = Column(JSON, nullable=False, default=list)
    content = Column(JSON, nullable=False, default=dict)  # keyed by channel or social platform
    audience = Column(JSON, nullable=False, default=dict)
    budget = Column(Float, nullable=True)
    schedule = Column(JSON, nullable=False, default=dict)
    status = Column(String, nullable=False, default="draft")
    metrics = Column(JSON, nullable=False, default=dict)
    launched_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    messages = Column(JSON, nullable=False, default=list)
    conversation_metadata = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class BrandKit(Base):
    __tablename__ = "brand_kits"

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    tone = Column(Text, nullable=False)
    values = Column(Text, nullable=False, default="")
    primary_color = Column(String, nullable=True)
    secondary_color = Column(String, nullable=True)
    font_family = Column(String, nullable=True)
    logo_url = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, nullable=True, index=True)
    action = Column(String, nullable=False)
    resource = Column(String, nullable=True)
    log_metadata = Column("metadata", JSON, nullable=False, default=dict)
    status = Column(String, nullable=False, default="success")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
