"""Derived field evaluator.

The evaluator is generic: each DerivedRelation names a computed target,
its source fields, and a compute function over the source values. The
echocardiography relations are declared at the bottom of this module.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import date
from typing import TYPE_CHECKING

from echo_form.derived.methods import age_in_years, sum_scores
from echo_form.errors import SchemaIntegrityError
from echo_form.registry.catalogue import (
    AGE_FIELD,
    DOB_FIELD,
    MITRAL_SCORE_FIELDS,
    MITRAL_SCORE_TOTAL_FIELD,
)
from echo_form.registry.models import Scalar
from echo_form.registry.schema import FieldSchema

if TYPE_CHECKING:
    from echo_form.state.store import FieldChange, FormState

logger = logging.getLogger(__name__)


class DerivedRelation:
    """A computed field and how to compute it from its sources."""

    def __init__(
        self,
        target: str,
        sources: Iterable[str],
        compute: Callable[[list[Scalar]], Scalar],
    ) -> None:
        """Initialize the relation.

        Args:
            target: Name of the computed field.
            sources: Names of the fields it is computed from, in order.
            compute: Function from the source values (same order) to the value.
        """
        self.target = target
        self.sources = tuple(sources)
        self.compute = compute

    def evaluate(self, state: FormState) -> Scalar:
        """Compute the target value from the current state."""
        return self.compute([state[name] for name in self.sources])

    def __repr__(self) -> str:
        return f"DerivedRelation({self.target!r} <- {list(self.sources)!r})"


class DerivedFieldEvaluator:
    """Recomputes computed fields when their sources change.

    Recomputation is idempotent: a relation whose fresh value equals the
    stored value writes nothing and publishes nothing, so repeated passes
    over unchanged sources are silent.
    """

    def __init__(self, schema: FieldSchema, relations: Iterable[DerivedRelation]) -> None:
        """Initialize and check the relations against the schema.

        Raises:
            SchemaIntegrityError: If a target is missing or not computed, a
                source is missing, a target has two relations, or the
                relations form a cycle.
        """
        self.schema = schema
        self.relations: tuple[DerivedRelation, ...] = tuple(relations)

        targets: set[str] = set()
        for relation in self.relations:
            if relation.target not in schema:
                raise SchemaIntegrityError(
                    f"Derived target {relation.target!r} is not in the schema"
                )
            if not schema.get(relation.target).is_computed:
                raise SchemaIntegrityError(
                    f"Derived target {relation.target!r} is not marked as computed"
                )
            if relation.target in targets:
                raise SchemaIntegrityError(f"Derived target {relation.target!r} has two relations")
            targets.add(relation.target)
            for source in relation.sources:
                if source not in schema:
                    raise SchemaIntegrityError(
                        f"Derived target {relation.target!r} uses unknown source {source!r}"
                    )

        self._order = self._topological_order()

    def _topological_order(self) -> list[DerivedRelation]:
        by_target = {relation.target: relation for relation in self.relations}
        ordered: list[DerivedRelation] = []
        visiting: set[str] = set()
        done: set[str] = set()

        def visit(relation: DerivedRelation) -> None:
            if relation.target in done:
                return
            if relation.target in visiting:
                raise SchemaIntegrityError(f"Cyclic derived relation at {relation.target!r}")
            visiting.add(relation.target)
            for source in relation.sources:
                if source in by_target:
                    visit(by_target[source])
            visiting.discard(relation.target)
            done.add(relation.target)
            ordered.append(relation)

        for relation in self.relations:
            visit(relation)
        return ordered

    def relations_for(self, name: str) -> list[DerivedRelation]:
        """Relations that read the named field."""
        return [relation for relation in self._order if name in relation.sources]

    def recompute(
        self,
        state: FormState,
        changed: Iterable[str] | None = None,
    ) -> list[FieldChange]:
        """Recompute the computed fields affected by a change.

        Relations run in dependency order, so a computed field that feeds
        another is refreshed first.

        Args:
            state: The form state to update.
            changed: Names of fields that changed. None recomputes every relation.

        Returns:
            The FieldChanges actually written (empty if nothing changed).
        """
        dirty = None if changed is None else set(changed)
        changes: list[FieldChange] = []

        for relation in self._order:
            if dirty is not None and dirty.isdisjoint(relation.sources):
                continue
            change = state.write_computed(relation.target, relation.evaluate(state))
            if change is not None:
                changes.append(change)
                if dirty is not None:
                    dirty.add(relation.target)

        if changes:
            logger.debug("Recomputed %s", [change.name for change in changes])
        return changes


def echo_relations(today: Callable[[], date] = date.today) -> list[DerivedRelation]:
    """The derived relations of the echocardiography report.

    Args:
        today: Clock returning the reference date for age calculation.
    """
    return [
        DerivedRelation(
            target=AGE_FIELD,
            sources=[DOB_FIELD],
            compute=lambda values: age_in_years(values[0], today()),
        ),
        DerivedRelation(
            target=MITRAL_SCORE_TOTAL_FIELD,
            sources=MITRAL_SCORE_FIELDS,
            compute=sum_scores,
        ),
    ]


def default_evaluator(
    schema: FieldSchema,
    today: Callable[[], date] = date.today,
) -> DerivedFieldEvaluator:
    """Build an evaluator with the echocardiography relations.

    Relations whose fields are absent from the schema are skipped, so a
    custom schema without a DOB or mitral score block still loads.
    """
    relations = [
        relation
        for relation in echo_relations(today)
        if relation.target in schema and all(source in schema for source in relation.sources)
    ]
    return DerivedFieldEvaluator(schema, relations)
