"""SQLAlchemy ORM models.

Models:
    - User / Group: identities and group membership
    - Model / ModelHistory: versioned design artifacts and their snapshots
    - ModelShareInfo: sharing of a model with a user or a group
    - RelatedContent: content attached to a task or process instance
    - Task / TaskIdentityLink: runtime tasks and their candidate/participant links
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import relationship

from workflow_web.core.database import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> str:
    return str(uuid.uuid4())


user_groups = Table(
    "user_groups",
    Base.metadata,
    Column("user_id", String(255), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("group_id", String(255), ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"

    id = Column(String(255), primary_key=True, default=_uuid)
    email = Column(String(255), unique=True, index=True)
    first_name = Column(String(255))
    last_name = Column(String(255))
    created_at = Column(DateTime(timezone=True), default=_now)

    groups = relationship("Group", secondary=user_groups, lazy="selectin")

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def group_ids(self) -> list[str]:
        return [group.id for group in (self.groups or [])]


class Group(Base):
    __tablename__ = "groups"

    id = Column(String(255), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    type = Column(Integer, default=1)


class ModelColumnsMixin:
    """Columns shared by live models and their history snapshots."""

    MODEL_TYPE_BPMN = 0
    MODEL_TYPE_FORM = 2
    MODEL_TYPE_APP = 3
    MODEL_TYPE_DECISION_TABLE = 4

    name = Column(String(400), nullable=False)
    model_key = Column(String(255))
    description = Column(Text)
    model_comment = Column(Text)
    created = Column(DateTime(timezone=True), default=_now)
    created_by = Column(String(255), index=True)
    last_updated = Column(DateTime(timezone=True), default=_now, onupdate=_now)
    last_updated_by = Column(String(255))
    version = Column(Integer, nullable=False, default=1)
    model_type = Column(Integer, nullable=False, index=True)
    model_editor_json = Column(Text)


class Model(ModelColumnsMixin, Base):
    __tablename__ = "models"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)


class ModelHistory(ModelColumnsMixin, Base):
    __tablename__ = "model_history"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    model_id = Column(BigInteger, nullable=False, index=True)
    removal_date = Column(DateTime(timezone=True))


class ModelShareInfo(Base):
    __tablename__ = "model_share_info"

    PERMISSION_READ = "READ"
    PERMISSION_WRITE = "WRITE"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    model_id = Column(BigInteger, ForeignKey(Model.id, ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(255), index=True)
    group_id = Column(String(255), index=True)
    share_date = Column(DateTime(timezone=True), default=_now)
    shared_by = Column(String(255))
    permission = Column(String(16), nullable=False, default=PERMISSION_READ)

    model = relationship(Model, lazy="joined")


class RelatedContent(Base):
    __tablename__ = "related_content"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    created = Column(DateTime(timezone=True), default=_now)
    created_by = Column(String(255), index=True)
    task_id = Column(String(255), index=True)
    process_instance_id = Column(String(255), index=True)
    source = Column(String(64))
    source_id = Column(String(255))
    mime_type = Column(String(255))
    content_store_id = Column(String(255))
    content_available = Column(Boolean, nullable=False, default=False)
    related_content = Column(Boolean, nullable=False, default=False)
    link = Column(Boolean, nullable=False, default=False)
    link_url = Column(String(1024))
    field = Column(String(400))
    content_size = Column(BigInteger, default=0)
    last_modified = Column(DateTime(timezone=True), default=_now, onupdate=_now)
    last_modified_by = Column(String(255))


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(64), primary_key=True, default=_uuid)
    name = Column(String(255))
    description = Column(Text)
    assignee_id = Column(String(255), index=True)
    owner_id = Column(String(255))
    process_instance_id = Column(String(64), index=True)
    process_definition_id = Column(String(255))
    priority = Column(Integer, default=50)
    form_key = Column(String(255))
    created_at = Column(DateTime(timezone=True), default=_now)
    due_date = Column(DateTime(timezone=True))
    end_time = Column(DateTime(timezone=True))


class TaskIdentityLink(Base):
    __tablename__ = "task_identity_links"

    TYPE_CANDIDATE = "candidate"
    TYPE_PARTICIPANT = "participant"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    task_id = Column(String(64), ForeignKey(Task.id, ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(255), index=True)
    group_id = Column(String(255), index=True)
    type = Column(String(32), nullable=False)
