"""task_tags association table: many-to-many between tasks and tags."""

from sqlalchemy import Column, ForeignKey, String, Table

from taskhub.db.session import Base

task_tags = Table(
    "task_tags",
    Base.metadata,
    Column(
        "task_id",
        String(32),
        ForeignKey("tasks.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        String(32),
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)
