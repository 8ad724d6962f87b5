"""Member search index."""

from src.library.entities.core._search import ElasticsearchEntityIndex
from src.library.entities.service.member.entity import Member


class MemberSearchIndex(ElasticsearchEntityIndex[Member]):
    entity_name = "member"
    entity_type = Member
