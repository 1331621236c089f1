"""Prompt templates for AI categorization."""

import json

# System prompt for categorization requests
CATEGORIZATION_SYSTEM_PROMPT = """Reply with strict JSON only. \
Do not include backticks or prose."""

EXAMPLE_CATEGORIES = (
    "Office Supplies",
    "Advertising",
    "Bank Charges",
    "Software",
    "Travel",
    "Meals & Entertainment",
    "Professional Services",
)


def build_categorization_prompt(summary: dict[str, object]) -> str:
    """Build the categorization prompt for one bank feed transaction.

    Args:
        summary: Compact transaction summary (date, description, payee, memo,
            currentCategory, amount, side, isRevenue).

    Returns:
        Prompt string.
    """
    categories = ", ".join(f'"{c}"' for c in EXAMPLE_CATEGORIES)
    return "\n".join(
        [
            "You are an experienced accountant categorizing bank feed transactions "
            "in an online accounting application.",
            'Return STRICT JSON only: {"category": string, "confidence": number, '
            '"reason": string, "action": "add" | "match" | "mark_for_review"}.',
            "Confidence is 0..1. The action is optional: use \"add\" for expenses "
            "(debits), \"match\" for revenue (credits) that should be reconciled "
            "against an existing record, and \"mark_for_review\" when a human should look.",
            f"Choose an accounting-friendly category name (e.g., {categories}).",
            "If uncertain, pick the most likely category and reduce confidence.",
            f"Transaction: {json.dumps(summary)}",
        ]
    )
