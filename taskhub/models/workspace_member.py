"""WorkspaceMember model: user membership in a workspace with a role."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskhub.db.session import Base

if TYPE_CHECKING:
    from taskhub.models.task import Task
    from taskhub.models.workspace import Workspace

ROLE_ADMIN = "ADMIN"
ROLE_MEMBER = "MEMBER"


class WorkspaceMember(Base):
    """Membership row; unique per (workspace_id, user_id)."""

    __tablename__ = "workspace_members"

    __table_args__ = (
        UniqueConstraint("workspace_id", "user_id", name="uq_workspace_members_workspace_user"),
    )

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=lambda: uuid.uuid4().hex
    )
    workspace_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(16), default=ROLE_MEMBER, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    workspace: Mapped[Workspace] = relationship("Workspace", back_populates="members")
    assigned_tasks: Mapped[list[Task]] = relationship(
        "Task",
        back_populates="assignee",
        order_by="Task.created_at.desc()",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
