from dataclasses import dataclass

from src.library.core.services import (
    BackgroundTaskPool,
    DbSessionService,
    SearchClientService,
)
from src.library.core.services.entity_service import BookService, MemberService
from src.library.runtime.config.config_data import ConfigData


@dataclass
class ApplicationDependencies:
    config: ConfigData
    database_service: DbSessionService
    search_service: SearchClientService
    task_pool: BackgroundTaskPool
    book_service: BookService
    member_service: MemberService
