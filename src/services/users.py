"""
User and family storage operations.

Provides:
- User lookup, upsert-on-login and profile updates
- Family creation (promoting the creator to parent)
- Membership queries and additions
"""

import logging
from typing import Any, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.models.enums import Role
from src.models.family import Family, User

logger = logging.getLogger(__name__)

# Fields a user may change on their own profile
PROFILE_FIELDS = frozenset({
    "email",
    "first_name",
    "last_name",
    "profile_image_url",
    "date_of_birth",
    "preferences",
})


# =============================================================================
# User Operations
# =============================================================================


def get_user(session: Session, user_id: str) -> Optional[User]:
    """
    Get a user by id.

    Args:
        session: Database session
        user_id: Identity provider subject id

    Returns:
        User or None
    """
    return session.get(User, user_id)


def upsert_user(session: Session, data: dict[str, Any]) -> User:
    """
    Insert a user or update the existing row with the same id.

    Called on every login so profile fields track the identity provider.
    Points are never touched here.

    Args:
        session: Database session
        data: Column values; must include "id"

    Returns:
        The saved User
    """
    values = {k: v for k, v in data.items() if k != "gamification_points"}
    user = session.get(User, values["id"])

    if user:
        for field, value in values.items():
            setattr(user, field, value)
        logger.info(f"Updated user {user.id}")
    else:
        user = User(**values)
        session.add(user)
        logger.info(f"Created user {user.id}")

    session.commit()
    session.refresh(user)
    return user


def update_user(session: Session, user_id: str, updates: dict[str, Any]) -> Optional[User]:
    """
    Apply profile updates to a user.

    Only PROFILE_FIELDS are applied; role, family and points change
    through their own operations.

    Returns:
        Updated User, or None if not found
    """
    user = session.get(User, user_id)
    if user is None:
        return None

    for field, value in updates.items():
        if field in PROFILE_FIELDS:
            setattr(user, field, value)

    session.commit()
    session.refresh(user)
    return user


# =============================================================================
# Family Operations
# =============================================================================


def create_family(session: Session, name: str, created_by: str) -> Family:
    """
    Create a family and make its creator a parent member of it.

    Args:
        session: Database session
        name: Family display name
        created_by: Id of the creating user (must exist)

    Returns:
        The new Family
    """
    family = Family(name=name, created_by=created_by)
    session.add(family)
    session.flush()

    creator = session.get(User, created_by)
    if creator is not None:
        creator.family_id = family.id
        creator.role = Role.PARENT

    session.commit()
    session.refresh(family)
    logger.info(f"Created family {family.id} ('{name}') for user {created_by}")
    return family


def get_family(session: Session, family_id: str) -> Optional[Family]:
    """Get a family by id, or None."""
    return session.get(Family, family_id)


def get_family_members(session: Session, family_id: str) -> Sequence[User]:
    """
    Get all users whose family_id matches.

    Returns:
        Members ordered by join (creation) time
    """
    stmt = (
        select(User)
        .where(User.family_id == family_id)
        .order_by(User.created_at, User.id)
    )
    return session.scalars(stmt).all()


def add_family_member(
    session: Session,
    family_id: str,
    user_id: str,
    role: Role,
) -> Optional[User]:
    """
    Join an existing user to a family with the given role.

    Returns:
        The updated User, or None if the user does not exist
    """
    user = session.get(User, user_id)
    if user is None:
        return None

    user.family_id = family_id
    user.role = role
    session.commit()
    session.refresh(user)
    logger.info(f"Added user {user_id} to family {family_id} as {role.value}")
    return user
