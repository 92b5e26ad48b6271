"""User model for authentication and data ownership."""
import enum

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from expense_tracker.models.base import BaseModel


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class User(BaseModel):
    """User model representing authenticated users."""

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Always stored lower-cased; uniqueness is case-insensitive through that.
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(
            UserRole,
            native_enum=False,
            length=20,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        default=UserRole.USER,
        nullable=False,
    )

    # Relationships
    # Transactions are removed explicitly before the user; see AdminService.delete_user.
    transactions: Mapped[list["Transaction"]] = relationship(
        "Transaction", back_populates="user", lazy="raise", passive_deletes="all"
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
