"""Categorization and dispatch pipeline components."""

from feed_reconciler.processing.dispatcher import ActionDispatcher
from feed_reconciler.processing.engine import ReconciliationEngine
from feed_reconciler.processing.normalizer import DecisionNormalizer, normalize
from feed_reconciler.processing.policy import DispatchPolicy
from feed_reconciler.processing.rule_matcher import RuleMatcher, default_rules, match

__all__ = [
    "ActionDispatcher",
    "DecisionNormalizer",
    "DispatchPolicy",
    "ReconciliationEngine",
    "RuleMatcher",
    "default_rules",
    "match",
    "normalize",
]
