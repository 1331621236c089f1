"""Tests for the CSV-backed bank feed."""

import asyncio
import csv
from pathlib import Path

import pytest

from feed_reconciler.errors import ConfigError, DispatchError, SessionError
from feed_reconciler.integrations.csv_feed import CsvBankFeed
from feed_reconciler.models.decision import Action
from feed_reconciler.models.transaction import TransactionStatus

SAMPLE = """\
Date,Description,Payee,Category or match,Spent,Received,Status
01/15/2025,AMAZON MKTPLACE,Amazon,,$42.10,,For review
01/16/2025,Client deposit,,,,"$500.00",For review
,,,,,,
01/17/2025,Old entry,,Rent,$900.00,,Accepted
01/18/2025,Odd row,,,$1.00,,Pending
01/19/2025,Hotel booking,,,$210.00,,
"""


@pytest.fixture
def feed_file(tmp_path: Path) -> Path:
    """Write the sample export to a temporary file."""
    path = tmp_path / "feed.csv"
    path.write_text(SAMPLE, encoding="utf-8")
    return path


class TestCsvBankFeed:
    """Tests for CsvBankFeed."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing export is a configuration error."""
        with pytest.raises(ConfigError):
            CsvBankFeed(tmp_path / "nope.csv")

    def test_reads_review_rows_with_aliases(self, feed_file: Path) -> None:
        """Test that aliased headers map to fields and row numbers become handles."""
        txns = asyncio.run(CsvBankFeed(feed_file).read_for_review(50))

        assert [t.description for t in txns] == [
            "AMAZON MKTPLACE",
            "Client deposit",
            "Hotel booking",
        ]
        assert txns[0].row_handle == 1
        assert txns[0].payee == "Amazon"
        assert txns[0].spent == "$42.10"
        assert txns[1].received == "$500.00"
        assert txns[1].row_handle == 2
        assert txns[2].row_handle == 6
        assert all(t.status is TransactionStatus.FOR_REVIEW for t in txns)

    def test_non_review_rows_do_not_count_toward_limit(self, tmp_path: Path) -> None:
        """Test that accepted and excluded rows ahead of the queue are passed over."""
        path = tmp_path / "mixed.csv"
        path.write_text(
            "Date,Description,Spent,Status\n"
            "01/01/2025,Rent,$900.00,Accepted\n"
            "01/02/2025,Transfer,$50.00,Excluded\n"
            "01/03/2025,AMAZON MKTPLACE,$42.10,For review\n"
            "01/04/2025,Hotel,$210.00,For review\n",
            encoding="utf-8",
        )

        txns = asyncio.run(CsvBankFeed(path).read_for_review(2))

        assert [t.description for t in txns] == ["AMAZON MKTPLACE", "Hotel"]
        assert [t.row_handle for t in txns] == [3, 4]

    def test_skipped_rows_cannot_be_applied(self, feed_file: Path) -> None:
        """Test that a row that was not for review has no usable handle."""
        feed = CsvBankFeed(feed_file)
        asyncio.run(feed.read_for_review(50))
        with pytest.raises(DispatchError):
            asyncio.run(feed.apply(4, "Rent", Action.ADD))

    def test_limit(self, feed_file: Path) -> None:
        """Test that no more than limit rows are returned."""
        txns = asyncio.run(CsvBankFeed(feed_file).read_for_review(1))
        assert len(txns) == 1

    def test_missing_required_columns(self, tmp_path: Path) -> None:
        """Test that an export without date or description is rejected."""
        path = tmp_path / "bad.csv"
        path.write_text("Payee,Spent\nAcme,$1\n", encoding="utf-8")
        with pytest.raises(SessionError, match="description"):
            asyncio.run(CsvBankFeed(path).read_for_review(10))

    def test_bom_header(self, tmp_path: Path) -> None:
        """Test that a UTF-8 byte order mark does not hide the first header."""
        path = tmp_path / "bom.csv"
        path.write_text("\ufeffDate,Description\n01/01/2025,Coffee\n", encoding="utf-8")
        txns = asyncio.run(CsvBankFeed(path).read_for_review(10))
        assert txns[0].date == "01/01/2025"
        assert txns[0].status is TransactionStatus.FOR_REVIEW

    def test_apply_and_write_results(self, feed_file: Path, tmp_path: Path) -> None:
        """Test that applied actions are written to the results file."""
        feed = CsvBankFeed(feed_file)
        asyncio.run(feed.read_for_review(50))

        assert asyncio.run(feed.apply(1, "Office Supplies", Action.ADD)) is True
        assert asyncio.run(feed.apply(2, "Sales", Action.MATCH)) is True

        out = tmp_path / "out" / "results.csv"
        assert feed.write_results(out) == 2
        with open(out, encoding="utf-8", newline="") as f:
            rows = list(csv.reader(f))
        assert rows[0] == ["row", "date", "description", "category", "action"]
        assert rows[1] == ["1", "01/15/2025", "AMAZON MKTPLACE", "Office Supplies", "add"]
        assert rows[2][-1] == "match"

    @pytest.mark.parametrize("handle", [99, "1", None])
    def test_apply_unknown_row(self, feed_file: Path, handle: object) -> None:
        """Test that an unknown handle raises DispatchError carrying the handle."""
        feed = CsvBankFeed(feed_file)
        asyncio.run(feed.read_for_review(50))
        with pytest.raises(DispatchError) as exc_info:
            asyncio.run(feed.apply(handle, "X", Action.ADD))
        assert exc_info.value.row_handle == handle

    def test_suggested_category_column(self, tmp_path: Path) -> None:
        """Test that the feed's pre-filled category is carried on the transaction."""
        path = tmp_path / "suggested.csv"
        path.write_text(
            "Date,Description,Suggested category\n01/01/2025,Coffee,Meals\n", encoding="utf-8"
        )
        txns = asyncio.run(CsvBankFeed(path).read_for_review(10))
        assert txns[0].suggested_category == "Meals"
