"""Workspace model: tenant that owns members, tasks and tags."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskhub.db.session import Base

if TYPE_CHECKING:
    from taskhub.models.tag import Tag
    from taskhub.models.task import Task
    from taskhub.models.workspace_member import WorkspaceMember

# Personal workspaces use this prefix followed by the owner's user id
PERSONAL_WORKSPACE_PREFIX = "user_"


class Workspace(Base):
    """Workspace (tenant). Id is a provider organization id or ``user_<userId>``."""

    __tablename__ = "workspaces"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    members: Mapped[list[WorkspaceMember]] = relationship(
        "WorkspaceMember",
        back_populates="workspace",
        cascade="all, delete-orphan",
        order_by="WorkspaceMember.created_at",
    )
    tasks: Mapped[list[Task]] = relationship(
        "Task",
        back_populates="workspace",
        cascade="all, delete-orphan",
        order_by="Task.created_at.desc()",
    )
    tags: Mapped[list[Tag]] = relationship(
        "Tag",
        back_populates="workspace",
        cascade="all, delete-orphan",
        order_by="Tag.name",
    )
