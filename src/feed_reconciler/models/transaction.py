"""Bank feed transaction data model."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from feed_reconciler.utils.decimal_utils import ZERO, parse_amount


class TransactionStatus(Enum):
    """Review state of a bank feed row."""

    FOR_REVIEW = "for_review"
    ACCEPTED = "accepted"
    EXCLUDED = "excluded"

    @classmethod
    def from_label(cls, label: str | None) -> "TransactionStatus":
        """Parse a status from either its value or the UI tab label.

        Accepts "for_review", "For review", "FOR REVIEW", "accepted", etc.
        Blank labels default to FOR_REVIEW since the feed reads that tab.

        Args:
            label: Raw status text.

        Returns:
            Matching TransactionStatus.

        Raises:
            ValueError: If the label names no known status.
        """
        if not label or not label.strip():
            return cls.FOR_REVIEW
        key = label.strip().lower().replace(" ", "_").replace("-", "_")
        return cls(key)


class TransactionSide(Enum):
    """Direction of money movement."""

    DEBIT = "debit"  # Money out (spent)
    CREDIT = "credit"  # Money in (received)


@dataclass(frozen=True)
class BankTransaction:
    """A single row of the "for review" bank feed queue.

    Constructed by the page automation collaborator and never mutated by
    the engine. Amounts are kept as the display strings the feed shows.

    Attributes:
        date: Transaction date as displayed by the feed.
        description: Bank description line.
        payee: Payee/vendor name.
        spent: Amount spent (debit) as a currency string, may be empty.
        received: Amount received (credit) as a currency string, may be empty.
        category: Category currently shown on the row, if any.
        memo: Optional memo text.
        status: Review status of the row.
        row_handle: Opaque handle used only to address the row when applying
            an action. None when the row cannot be targeted.
        id: Feed identifier, when the source exposes one.
        suggested_category: Category pre-filled by the bank feed.
    """

    date: str
    description: str
    payee: str = ""
    spent: str = ""
    received: str = ""
    category: str | None = None
    memo: str | None = None
    status: TransactionStatus = TransactionStatus.FOR_REVIEW
    row_handle: object | None = None
    id: str | None = None
    suggested_category: str | None = None

    @property
    def spent_amount(self) -> Decimal:
        """Parsed spent amount (0 when empty or malformed)."""
        return parse_amount(self.spent)

    @property
    def received_amount(self) -> Decimal:
        """Parsed received amount (0 when empty or malformed)."""
        return parse_amount(self.received)

    @property
    def is_revenue(self) -> bool:
        """True when money was received on this row."""
        return self.received_amount > ZERO

    @property
    def side(self) -> TransactionSide:
        """Debit when anything was spent, credit otherwise."""
        if self.spent_amount > ZERO:
            return TransactionSide.DEBIT
        return TransactionSide.CREDIT

    @property
    def absolute_amount(self) -> Decimal:
        """Spent amount if positive, else the received amount."""
        spent = self.spent_amount
        if spent > ZERO:
            return spent
        return abs(self.received_amount)

    @property
    def search_text(self) -> str:
        """Lower-cased text used by keyword rules."""
        return f"{self.description} {self.payee} {self.memo or ''}".lower()

    def __repr__(self) -> str:
        return (
            f"BankTransaction(date={self.date!r}, "
            f"description={self.description[:30]!r}, "
            f"spent={self.spent!r}, received={self.received!r})"
        )
