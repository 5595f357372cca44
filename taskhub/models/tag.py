"""Tag model: workspace-scoped label attached to tasks."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskhub.db.session import Base
from taskhub.models.task_tag import task_tags

if TYPE_CHECKING:
    from taskhub.models.task import Task
    from taskhub.models.workspace import Workspace

DEFAULT_TAG_COLOR = "#3B82F6"


class Tag(Base):
    """Label; name is unique within a workspace."""

    __tablename__ = "tags"

    __table_args__ = (UniqueConstraint("workspace_id", "name", name="uq_tags_workspace_name"),)

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=lambda: uuid.uuid4().hex
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(String(7), default=DEFAULT_TAG_COLOR, nullable=False)
    workspace_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
    )

    workspace: Mapped[Workspace] = relationship("Workspace", back_populates="tags")
    tasks: Mapped[list[Task]] = relationship(
        "Task", secondary=task_tags, back_populates="tags"
    )
