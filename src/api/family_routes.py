"""
Family API routes.

Families are created by a signed-in user, who becomes their parent. All
/api/families/{family_id} paths are restricted to members of that family.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from src.api.dependencies import (
    ensure_family_access,
    get_current_user,
    get_now,
)
from src.api.models import (
    AddMemberRequest,
    CreateFamilyRequest,
    FamilyResponse,
    FamilyStatsResponse,
    MemberOverviewResponse,
    UserResponse,
)
from src.api.response_builder import build_member_overview
from src.database import get_db
from src.models import User
from src.services import (
    FamilyHubError,
    PermissionDeniedError,
    add_family_member,
    create_family,
    get_family,
    get_family_members,
    get_family_stats,
    get_user,
    get_user_tasks,
)
from src.services.display import build_member_card

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/families", tags=["families"])


@router.post("", response_model=FamilyResponse, status_code=201)
def create_new_family(
    request: CreateFamilyRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> FamilyResponse:
    """
    Create a family; the caller joins it as parent.

    Only users without a family may create one. Members never move
    between families, and a child cannot make themself a parent this way.
    """
    if user.family_id is not None:
        raise FamilyHubError("You already belong to a family")

    family = create_family(db, request.name, user.id)
    return FamilyResponse.model_validate(family)


@router.get("/{family_id}", response_model=FamilyResponse)
def get_family_detail(
    family_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> FamilyResponse:
    ensure_family_access(user, family_id)
    family = get_family(db, family_id)
    if family is None:
        raise HTTPException(status_code=404, detail="Family not found")
    return FamilyResponse.model_validate(family)


@router.get("/{family_id}/members", response_model=list[UserResponse])
def list_members(
    family_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[UserResponse]:
    """Members in the order they joined."""
    ensure_family_access(user, family_id)
    return [UserResponse.model_validate(m) for m in get_family_members(db, family_id)]


@router.post("/{family_id}/members", response_model=UserResponse)
def add_member(
    family_id: str,
    request: AddMemberRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserResponse:
    """
    Add an existing user to the family with a role.

    Only parents and spouses may add members, and a user who already
    belongs to another family cannot be taken over.
    """
    ensure_family_access(user, family_id)
    if not user.role.can_manage_family:
        raise PermissionDeniedError("Only parents and spouses can add members")

    target = get_user(db, request.user_id)
    if target is None:
        raise HTTPException(status_code=404, detail="User not found")
    if target.family_id and target.family_id != family_id:
        raise PermissionDeniedError("User already belongs to another family")

    member = add_family_member(db, family_id, request.user_id, request.role)
    return UserResponse.model_validate(member)


@router.get("/{family_id}/members/overview", response_model=list[MemberOverviewResponse])
def members_overview(
    family_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> list[MemberOverviewResponse]:
    """Dashboard cards: level, today's progress and role display per member."""
    ensure_family_access(user, family_id)
    cards = [
        build_member_card(member, get_user_tasks(db, member.id), now)
        for member in get_family_members(db, family_id)
    ]
    return [build_member_overview(card) for card in cards]


@router.get("/{family_id}/stats", response_model=FamilyStatsResponse)
def family_stats(
    family_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> FamilyStatsResponse:
    """Task counters for the family dashboard."""
    ensure_family_access(user, family_id)
    stats = get_family_stats(db, family_id, now=now)
    return FamilyStatsResponse(**stats.to_dict())
