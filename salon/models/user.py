"""User model: the salon owner account that scopes every other table."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from salon.models.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """A salon owner. Each owner is one tenant."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    # Login secret, see salon.security.passwords; None disables the account
    password_hash: Mapped[str | None] = mapped_column(String(255))
    full_name: Mapped[str | None] = mapped_column(String(200))
    salon_name: Mapped[str | None] = mapped_column(String(200))
    cnpj: Mapped[str | None] = mapped_column(String(18))
    phone: Mapped[str | None] = mapped_column(String(20))
    address: Mapped[str | None] = mapped_column(String(500))

    def __repr__(self) -> str:
        return f"<User email={self.email} salon={self.salon_name}>"
