"""Entity package: Member."""

from .entity import Member
from .repository import MemberRepository
from .search import MemberSearchIndex
from .table import MemberTable

__all__ = ["Member", "MemberRepository", "MemberSearchIndex", "MemberTable"]
