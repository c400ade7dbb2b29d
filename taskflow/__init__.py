"""TaskFlow API: user accounts and task management over HTTP."""

__version__ = "1.0.0"
