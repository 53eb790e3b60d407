from __future__ import annotations
from sqlalchemy.orm import declarative_base, Mapped, mapped_column
from sqlalchemy import String, Integer, Boolean, UniqueConstraint, DateTime, text
from typing import Optional, Dict, Any

Base = declarative_base()


class User(Base):
    __tablename__ = 'users'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(128), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    # Free-text job title; join key into position_permissions
    position: Mapped[Optional[str]] = mapped_column(String(128))
    member_id: Mapped[Optional[int]] = mapped_column(Integer)
    town_id: Mapped[Optional[int]] = mapped_column(Integer)
    district_id: Mapped[Optional[int]] = mapped_column(Integer)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'), server_onupdate=text('CURRENT_TIMESTAMP'))

    def set_password(self, raw: str):
        from werkzeug.security import generate_password_hash
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        from werkzeug.security import check_password_hash
        if not raw or not self.password_hash:
            return False
        return check_password_hash(self.password_hash, raw)

    def to_payload(self) -> Dict[str, Any]:
        """Session payload handed to clients at login (camelCase keys)."""
        payload: Dict[str, Any] = {
            'id': self.id,
            'username': self.username,
            'name': self.name,
            'role': self.role,
        }
        optional = {
            'position': self.position,
            'memberId': self.member_id,
            'townId': self.town_id,
            'districtId': self.district_id,
        }
        payload.update({k: v for k, v in optional.items() if v is not None})
        return payload


class PositionPermission(Base):
    __tablename__ = 'position_permissions'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    position: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    permission: Mapped[str] = mapped_column(String(64), nullable=False)
    __table_args__ = (UniqueConstraint('position', 'permission', name='uq_position_permission'),)
