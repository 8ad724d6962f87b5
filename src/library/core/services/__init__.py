"""Core services exports."""

# Database Service
from .database.db_session import DbSessionService

# Search Service
from .search.es_client import SearchClientService

# Background Tasks
from .tasks.background import BackgroundTaskPool

__all__ = [
    # Database Service
    "DbSessionService",
    # Search Service
    "SearchClientService",
    # Background Tasks
    "BackgroundTaskPool",
]
