"""Derivative-rule catalog, rule-table generation and chain-rule arithmetic."""

from .catalog import BASE_NAMESPACE, DiffRule, define_diffrule, diffrule, diffrules
from .propagation import propagate_binary, propagate_unary
from .rule_table import Rule, RuleTable, build_rule_table

__all__ = [
    "BASE_NAMESPACE",
    "DiffRule",
    "Rule",
    "RuleTable",
    "build_rule_table",
    "define_diffrule",
    "diffrule",
    "diffrules",
    "propagate_binary",
    "propagate_unary",
]
