"""Transaction model representing a single income or expense entry."""
import enum
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Enum, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from expense_tracker.models.base import BaseModel

MONEY = Numeric(12, 2)


class TransactionType(str, enum.Enum):
    EXPENSE = "expense"
    INCOME = "income"


class TaxType(str, enum.Enum):
    FLAT = "flat"
    PERCENTAGE = "percentage"


def _enum_column(enum_cls: type[enum.Enum]) -> Enum:
    return Enum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda members: [m.value for m in members],
    )


class Transaction(BaseModel):
    """Transaction owned by exactly one user.

    ``total_amount`` is derived from amount, tax_type and tax_amount and is
    written by the services on every create and update.
    """

    __tablename__ = "transactions"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    type: Mapped[TransactionType] = mapped_column(
        _enum_column(TransactionType), nullable=False, index=True
    )
    tax_type: Mapped[TaxType] = mapped_column(
        _enum_column(TaxType), default=TaxType.FLAT, nullable=False
    )
    tax_amount: Mapped[Decimal] = mapped_column(MONEY, default=Decimal("0"), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="transactions", lazy="raise")

    def __repr__(self) -> str:
        return (
            f"<Transaction(id={self.id}, type={self.type}, "
            f"total_amount={self.total_amount})>"
        )
