"""TaskHub: collaborative task and kanban backend."""

__version__ = "0.1.0"
