"""Bank feed reconciliation: rule and AI categorization with confidence-gated dispatch."""

__version__ = "0.1.0"
