"""Conditions derived from catalog identifiers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kevsync.domain.model import ConditionOperator, ConditionSubject, PolicyCondition

if TYPE_CHECKING:
    from collections.abc import Iterable


def vulnerability_condition(identifier: str) -> PolicyCondition:
    return PolicyCondition(
        subject=ConditionSubject.VULNERABILITY_ID,
        operator=ConditionOperator.IS,
        value=identifier,
    )


def build_conditions(identifiers: Iterable[str]) -> tuple[PolicyCondition, ...]:
    """One ``VULNERABILITY_ID IS <id>`` condition per unique identifier, in order."""

    unique = dict.fromkeys(identifier.strip() for identifier in identifiers)
    return tuple(vulnerability_condition(identifier) for identifier in unique if identifier)


def condition_key(condition: PolicyCondition) -> str:
    return condition.value


__all__ = ["build_conditions", "condition_key", "vulnerability_condition"]
