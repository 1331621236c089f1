"""Categorization rule model."""

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from feed_reconciler.errors import ConfigError
from feed_reconciler.models.decision import Action
from feed_reconciler.models.transaction import BankTransaction

Predicate = Callable[[BankTransaction], bool]

AMOUNT_FIELDS = ("spent", "received")


def contains_any(*needles: str) -> Predicate:
    """Predicate: description, payee, or memo contains any needle (case-insensitive)."""
    lowered = tuple(n.lower() for n in needles if n)

    def predicate(txn: BankTransaction) -> bool:
        haystack = txn.search_text
        return any(needle in haystack for needle in lowered)

    return predicate


def amount_above(limit: Decimal | int | str, field: str = "spent") -> Predicate:
    """Predicate: parsed amount of ``field`` is strictly greater than ``limit``."""
    threshold = Decimal(str(limit))

    def predicate(txn: BankTransaction) -> bool:
        return _amount_of(txn, field) > threshold

    return predicate


def amount_below(limit: Decimal | int | str, field: str = "spent") -> Predicate:
    """Predicate: parsed amount of ``field`` is strictly less than ``limit``."""
    threshold = Decimal(str(limit))

    def predicate(txn: BankTransaction) -> bool:
        return _amount_of(txn, field) < threshold

    return predicate


def all_of(*predicates: Predicate) -> Predicate:
    """Predicate: every given predicate holds."""

    def predicate(txn: BankTransaction) -> bool:
        return all(p(txn) for p in predicates)

    return predicate


def _amount_of(txn: BankTransaction, field: str) -> Decimal:
    if field == "received":
        return txn.received_amount
    return txn.spent_amount


@dataclass(frozen=True)
class Rule:
    """Static pattern rule mapping transactions to a category.

    Attributes:
        name: Identifier, also used as the decision reason.
        predicate: Callable deciding whether a transaction matches.
        category: Category to assign when the rule matches.
        confidence: Fixed confidence (matcher default applies when None).
        action: Fixed action (matcher default applies when None).
    """

    name: str
    predicate: Predicate
    category: str
    confidence: float | None = None
    action: Action | None = None

    def matches(self, txn: BankTransaction) -> bool:
        """Check whether the transaction satisfies this rule."""
        return bool(self.predicate(txn))

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "Rule":
        """Create a Rule from declarative data (e.g., from rules.yaml).

        Supported keys: name, category, keywords, amount_field,
        amount_above, amount_below, confidence, action. All criteria that
        are present must hold for the rule to match.

        Args:
            data: Dictionary containing rule data.

        Returns:
            A new Rule instance.

        Raises:
            ConfigError: If required keys are missing or values are invalid.
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Rule must be a mapping, got {type(data).__name__}")

        name = data.get("name")
        category = data.get("category")
        if not name or not category:
            raise ConfigError(f"Rule requires 'name' and 'category': {data!r}")

        predicates: list[Predicate] = []

        keywords = data.get("keywords", [])
        if isinstance(keywords, str):
            keywords = [keywords]
        if not isinstance(keywords, list):
            raise ConfigError(f"Rule '{name}': 'keywords' must be a list")
        if keywords:
            predicates.append(contains_any(*[str(k) for k in keywords]))

        amount_field = str(data.get("amount_field", "spent")).lower()
        if amount_field not in AMOUNT_FIELDS:
            raise ConfigError(
                f"Rule '{name}': amount_field must be one of {AMOUNT_FIELDS}, got '{amount_field}'"
            )
        try:
            if "amount_above" in data:
                predicates.append(amount_above(str(data["amount_above"]), amount_field))
            if "amount_below" in data:
                predicates.append(amount_below(str(data["amount_below"]), amount_field))
        except InvalidOperation as e:
            raise ConfigError(f"Rule '{name}': invalid amount bound") from e

        if not predicates:
            raise ConfigError(f"Rule '{name}' has no matching criteria")

        confidence = None
        if data.get("confidence") is not None:
            try:
                confidence = float(data["confidence"])  # type: ignore[arg-type]
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Rule '{name}': invalid confidence") from e

        action = None
        if data.get("action") is not None:
            action = Action.parse(data["action"])
            if action is None:
                raise ConfigError(f"Rule '{name}': unknown action '{data['action']}'")

        predicate = predicates[0] if len(predicates) == 1 else all_of(*predicates)
        return cls(
            name=str(name),
            predicate=predicate,
            category=str(category),
            confidence=confidence,
            action=action,
        )

    def __repr__(self) -> str:
        return f"Rule(name={self.name!r}, category={self.category!r})"
