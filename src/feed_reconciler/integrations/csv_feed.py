"""Bank feed collaborator backed by an exported CSV file.

Used for offline runs and dry runs: rows are read from the CSV export of the
"for review" tab and applied actions are recorded instead of clicked.
"""

import csv
from dataclasses import dataclass
from pathlib import Path

from feed_reconciler.errors import ConfigError, DispatchError, SessionError
from feed_reconciler.models.decision import Action
from feed_reconciler.models.transaction import BankTransaction, TransactionStatus
from feed_reconciler.utils.logging_config import get_logger

logger = get_logger(__name__)

# Canonical column -> accepted header spellings (compared case-insensitively)
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "date": ("date", "transaction date"),
    "description": ("description", "bank description"),
    "payee": ("payee", "vendor", "from/to"),
    "category": ("category", "category or match"),
    "suggested_category": ("suggested category", "suggestion"),
    "memo": ("memo", "notes"),
    "spent": ("spent", "spend", "debit"),
    "received": ("received", "receive", "credit"),
    "status": ("status",),
    "id": ("id", "transaction id"),
}

REQUIRED_COLUMNS = ("date", "description")

RESULT_HEADERS = ["row", "date", "description", "category", "action"]


@dataclass(frozen=True)
class AppliedAction:
    """Action recorded against a CSV row."""

    row: int
    date: str
    description: str
    category: str
    action: Action


class CsvBankFeed:
    """Reads "for review" transactions from a CSV export.

    The 1-based data row number serves as the row handle.
    """

    def __init__(self, path: Path):
        """Initialize the feed.

        Args:
            path: Path to the CSV export.

        Raises:
            ConfigError: If the file does not exist.
        """
        if not path.exists():
            raise ConfigError(f"Bank feed file not found: {path}")
        self.path = path
        self.applied: list[AppliedAction] = []
        self._rows: dict[int, BankTransaction] = {}

    async def read_for_review(self, limit: int) -> list[BankTransaction]:
        """Read up to ``limit`` "for review" transactions in file order.

        Rows with any other status are skipped and do not count toward
        ``limit``.

        Args:
            limit: Maximum number of rows to return.

        Returns:
            Transactions with their row numbers as handles.

        Raises:
            SessionError: If the file cannot be read or lacks required columns.
        """
        try:
            with open(self.path, encoding="utf-8-sig", errors="replace", newline="") as f:
                reader = csv.DictReader(f)
                columns = self._map_columns(reader.fieldnames or [])
                transactions: list[BankTransaction] = []
                for row_number, row in enumerate(reader, start=1):
                    if len(transactions) >= limit:
                        break
                    txn = self._to_transaction(row, columns, row_number)
                    if txn is None:
                        continue
                    if txn.status is not TransactionStatus.FOR_REVIEW:
                        logger.debug(f"Row {row_number}: status {txn.status.value}, skipping")
                        continue
                    self._rows[row_number] = txn
                    transactions.append(txn)
        except OSError as e:
            raise SessionError(f"Cannot read bank feed {self.path}: {e}") from e

        logger.info(f"Read {len(transactions)} transactions from {self.path.name}")
        return transactions

    async def apply(self, row_handle: object, category: str, action: Action) -> bool:
        """Record an action against a previously read row.

        Returns:
            True once recorded.

        Raises:
            DispatchError: If the handle does not address a known row.
        """
        if not isinstance(row_handle, int) or row_handle not in self._rows:
            raise DispatchError(f"Row not found: {row_handle!r}", row_handle=row_handle)

        txn = self._rows[row_handle]
        self.applied.append(
            AppliedAction(
                row=row_handle,
                date=txn.date,
                description=txn.description,
                category=category,
                action=action,
            )
        )
        logger.debug(f"Recorded {action.value} for row {row_handle}: {category}")
        return True

    def write_results(self, path: Path) -> int:
        """Write the recorded actions to a CSV file.

        Args:
            path: Output file path.

        Returns:
            Number of rows written.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(RESULT_HEADERS)
            for item in self.applied:
                writer.writerow(
                    [item.row, item.date, item.description, item.category, item.action.value]
                )
        logger.info(f"Wrote {len(self.applied)} applied actions to {path}")
        return len(self.applied)

    def _map_columns(self, fieldnames: list[str]) -> dict[str, str]:
        """Map canonical column names to the file's actual headers."""
        by_lower = {name.strip().lower(): name for name in fieldnames if name}
        columns: dict[str, str] = {}
        for canonical, aliases in COLUMN_ALIASES.items():
            for alias in aliases:
                if alias in by_lower:
                    columns[canonical] = by_lower[alias]
                    break

        missing = [c for c in REQUIRED_COLUMNS if c not in columns]
        if missing:
            raise SessionError(
                f"Bank feed {self.path.name} is missing required columns: {', '.join(missing)}"
            )
        return columns

    def _to_transaction(
        self, row: dict[str, str], columns: dict[str, str], row_number: int
    ) -> BankTransaction | None:
        def cell(name: str) -> str:
            header = columns.get(name)
            if header is None:
                return ""
            return (row.get(header) or "").strip()

        if not cell("date") and not cell("description"):
            return None  # Blank line

        try:
            status = TransactionStatus.from_label(cell("status"))
        except ValueError:
            logger.warning(f"Row {row_number}: unknown status {cell('status')!r}, skipping")
            return None

        return BankTransaction(
            date=cell("date"),
            description=cell("description"),
            payee=cell("payee"),
            spent=cell("spent"),
            received=cell("received"),
            category=cell("category") or None,
            memo=cell("memo") or None,
            status=status,
            row_handle=row_number,
            id=cell("id") or None,
            suggested_category=cell("suggested_category") or None,
        )
