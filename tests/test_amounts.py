"""Tests for bank feed amount parsing and transaction amount properties."""

from decimal import Decimal

import pytest

from feed_reconciler.models.transaction import TransactionSide, TransactionStatus
from feed_reconciler.utils.decimal_utils import format_currency, parse_amount


class TestParseAmount:
    """Tests for parse_amount."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("$42.10", Decimal("42.10")),
            ("$1,234.56", Decimal("1234.56")),
            ("-$12.00", Decimal("-12.00")),
            ("USD 300", Decimal("300")),
            ("  7.5 ", Decimal("7.5")),
            (".5", Decimal("0.5")),
        ],
    )
    def test_parses_currency_strings(self, raw: str, expected: Decimal) -> None:
        """Test that currency symbols, commas and text are stripped."""
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("500.00 Cr.", Decimal("500.00")),
            ("12.00 -", Decimal("12.00")),
            ("1.2.3", Decimal("1.2")),
            ("5.", Decimal("5")),
            ("$1,500.00 (pending)-", Decimal("1500.00")),
        ],
    )
    def test_reads_leading_number(self, raw: str, expected: Decimal) -> None:
        """Test that a stray trailing dot or dash does not zero the amount."""
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        ["", None, "N/A", "$", "-", ".", "--5", "$-", "—", "-."],
    )
    def test_malformed_input_yields_zero(self, raw: str | None) -> None:
        """Test that parsing never raises and defaults to zero."""
        result = parse_amount(raw)
        assert result == Decimal("0")
        assert result.is_finite()

    def test_exponent_letters_are_stripped(self) -> None:
        """Test that letters cannot turn the string into an exponent or NaN."""
        assert parse_amount("1e5") == Decimal("15")
        assert parse_amount("NaN") == Decimal("0")
        assert parse_amount("Infinity") == Decimal("0")


class TestFormatCurrency:
    """Tests for format_currency."""

    def test_rounds_half_up(self) -> None:
        """Test that halves round away from zero."""
        assert format_currency(Decimal("1.005")) == "1.01"

    def test_negative_zero_normalized(self) -> None:
        """Test that a rounded negative zero prints without a sign."""
        assert format_currency(Decimal("-0.001")) == "0.00"


class TestBankTransactionAmounts:
    """Tests for derived amount properties on BankTransaction."""

    def test_debit_transaction(self, make_txn) -> None:
        """Test that a spent amount makes a debit that is not revenue."""
        txn = make_txn(spent="$300.00")
        assert txn.spent_amount == Decimal("300.00")
        assert txn.received_amount == Decimal("0")
        assert txn.side is TransactionSide.DEBIT
        assert txn.is_revenue is False
        assert txn.absolute_amount == Decimal("300.00")

    def test_credit_transaction(self, make_txn) -> None:
        """Test that a received amount makes a revenue credit."""
        txn = make_txn(received="$500.00")
        assert txn.side is TransactionSide.CREDIT
        assert txn.is_revenue is True
        assert txn.absolute_amount == Decimal("500.00")

    def test_received_with_trailing_marker_is_revenue(self, make_txn) -> None:
        """Test that a bank suffix after the amount keeps the row revenue."""
        txn = make_txn(received="500.00 Cr.")
        assert txn.received_amount == Decimal("500.00")
        assert txn.is_revenue is True

    def test_empty_amounts(self, make_txn) -> None:
        """Test that a row without amounts is a zero credit."""
        txn = make_txn()
        assert txn.side is TransactionSide.CREDIT
        assert txn.is_revenue is False
        assert txn.absolute_amount == Decimal("0")

    def test_search_text_includes_memo(self, make_txn) -> None:
        """Test that rule search text joins description, payee and memo."""
        txn = make_txn(description="ACH", payee="Acme", memo="Invoice 7")
        assert txn.search_text == "ach acme invoice 7"


class TestTransactionStatus:
    """Tests for TransactionStatus.from_label."""

    @pytest.mark.parametrize(
        ("label", "expected"),
        [
            ("For review", TransactionStatus.FOR_REVIEW),
            ("for_review", TransactionStatus.FOR_REVIEW),
            ("", TransactionStatus.FOR_REVIEW),
            (None, TransactionStatus.FOR_REVIEW),
            ("Accepted", TransactionStatus.ACCEPTED),
            ("EXCLUDED", TransactionStatus.EXCLUDED),
        ],
    )
    def test_labels(self, label: str | None, expected: TransactionStatus) -> None:
        """Test that UI labels map to statuses, blank meaning for review."""
        assert TransactionStatus.from_label(label) is expected

    def test_unknown_label_raises(self) -> None:
        """Test that an unrecognised label raises ValueError."""
        with pytest.raises(ValueError):
            TransactionStatus.from_label("Pending")
