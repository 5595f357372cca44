"""Task model: workspace-scoped work item with optional parent (sub-tasks)."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskhub.db.session import Base
from taskhub.models.task_tag import task_tags

if TYPE_CHECKING:
    from taskhub.models.attachment import Attachment
    from taskhub.models.tag import Tag
    from taskhub.models.workspace import Workspace
    from taskhub.models.workspace_member import WorkspaceMember


class Task(Base):
    """Task. Rows with a parent_id are sub-tasks and never listed at top level."""

    __tablename__ = "tasks"

    __table_args__ = (
        Index("ix_tasks_workspace_parent_created", "workspace_id", "parent_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=lambda: uuid.uuid4().hex
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="TODO", nullable=False)
    priority: Mapped[str] = mapped_column(String(16), default="NONE", nullable=False)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    workspace_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
    )
    assignee_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("workspace_members.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    parent_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
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

    workspace: Mapped[Workspace] = relationship("Workspace", back_populates="tasks")
    assignee: Mapped[WorkspaceMember | None] = relationship(
        "WorkspaceMember", back_populates="assigned_tasks"
    )
    parent: Mapped[Task | None] = relationship(
        "Task", back_populates="sub_tasks", remote_side="Task.id"
    )
    sub_tasks: Mapped[list[Task]] = relationship(
        "Task",
        back_populates="parent",
        cascade="all, delete-orphan",
        order_by="Task.created_at",
    )
    attachments: Mapped[list[Attachment]] = relationship(
        "Attachment",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="Attachment.uploaded_at",
    )
    tags: Mapped[list[Tag]] = relationship(
        "Tag",
        secondary=task_tags,
        back_populates="tasks",
        order_by="Tag.name",
    )
