"""Member API router."""

from fastapi import APIRouter, Depends, Query, status

from src.library.api.http.deps import get_member_service, require_bearer_token
from src.library.api.http.errors import service_failure
from src.library.core.services.entity_service import MemberService
from src.library.entities.service.member import Member

router = APIRouter(prefix="/member", tags=["members"])


@router.post(
    "",
    response_model=Member,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_bearer_token)],
)
async def create_member(
    member: Member,
    service: MemberService = Depends(get_member_service),
) -> Member:
    """Create a new member. Any ``id`` in the payload is ignored."""
    try:
        await service.create(member)
    except Exception as e:
        raise service_failure("create member", e) from e
    return member


@router.get("", response_model=list[Member])
async def get_members(
    search: str | None = Query(default=None, description="Keyword to search for"),
    service: MemberService = Depends(get_member_service),
) -> list[Member]:
    """List all members, or search the member index when ``search`` is given."""
    try:
        if search:
            return await service.search(search)
        return await service.get_all()
    except Exception as e:
        raise service_failure("get members", e) from e


@router.put(
    "",
    response_model=Member,
    dependencies=[Depends(require_bearer_token)],
)
async def update_member(
    member: Member,
    service: MemberService = Depends(get_member_service),
) -> Member:
    """Update the non-empty fields of the member identified by ``id``."""
    try:
        await service.update(member)
    except Exception as e:
        raise service_failure("update member", e) from e
    return member
