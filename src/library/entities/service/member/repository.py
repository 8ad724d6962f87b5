"""Member primary store."""

from src.library.entities.core._repository import SqlEntityRepository
from src.library.entities.service.member.entity import Member
from src.library.entities.service.member.table import MemberTable


class MemberRepository(SqlEntityRepository[Member, MemberTable]):
    """Data-access layer for the ``members`` table."""

    entity_name = "member"
    entity_type = Member
    table_type = MemberTable
