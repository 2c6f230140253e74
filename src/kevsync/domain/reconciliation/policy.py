"""Policy attribute comparison."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kevsync.domain.model import DesiredPolicyState, RemotePolicy


def needs_policy_update(current: RemotePolicy, desired: DesiredPolicyState) -> bool:
    """Return ``True`` when operator or violation state differ."""

    return (
        current.operator != desired.operator
        or current.violation_state != desired.violation_state
    )


__all__ = ["needs_policy_update"]
