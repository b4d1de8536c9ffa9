"""
Login session storage model.

Stores server-side sessions keyed by an opaque id carried in a cookie.
The session payload is JSON so the identity provider can stash extra
claims next to the user id.
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, get_json_type


class UserSession(Base):
    """
    A signed-in browser session.

    Attributes:
        sid: Opaque session id (cookie value)
        sess: Session payload; always holds "user_id"
        expire: Expiry timestamp; expired rows are ignored and purged
    """

    __tablename__ = "sessions"

    sid: Mapped[str] = mapped_column(String(128), primary_key=True)

    sess: Mapped[dict] = mapped_column(get_json_type(), nullable=False)

    expire: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("IDX_session_expire", "expire"),
    )

    @property
    def user_id(self) -> str | None:
        return (self.sess or {}).get("user_id")

    def __repr__(self) -> str:
        return f"<UserSession(user_id='{self.user_id}', expire='{self.expire}')>"
