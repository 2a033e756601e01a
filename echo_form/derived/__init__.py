"""Derived field evaluation (age from date of birth, aggregate scores)."""

from echo_form.derived.evaluator import (
    DerivedFieldEvaluator,
    DerivedRelation,
    default_evaluator,
    echo_relations,
)
from echo_form.derived.methods import age_in_years, parse_date, parse_score, sum_scores

__all__ = [
    "DerivedFieldEvaluator",
    "DerivedRelation",
    "age_in_years",
    "default_evaluator",
    "echo_relations",
    "parse_date",
    "parse_score",
    "sum_scores",
]
