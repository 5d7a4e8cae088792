"""
Module: ledger_kernel.models.user
Responsibility: ORM persistence for ledger owners.
Architecture position: Kernel > Models.  May import from db/ only.

A User maps an opaque identity-provider key (external_auth_id) to the
internal id that every owned row carries.  Users are created on first
authenticated sight and never deleted by the kernel.
"""

from typing import TYPE_CHECKING

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TrackedBase

if TYPE_CHECKING:
    from ledger_kernel.models.account import Account


class User(TrackedBase):
    """A ledger owner."""

    __tablename__ = "users"

    __table_args__ = (
        UniqueConstraint("external_auth_id", name="uq_user_external_auth_id"),
    )

    external_auth_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    accounts: Mapped[list["Account"]] = relationship(
        back_populates="user",
        lazy="select",
    )

    def __repr__(self) -> str:
        return f"<User {self.external_auth_id}>"
