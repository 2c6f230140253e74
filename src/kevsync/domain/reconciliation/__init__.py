"""Reconciliation of a remote policy against a desired state.

Layered flow:
1) resolve or create the policy and align its attributes
2) diff and apply tags
3) resolve project references, then diff and apply project membership
4) diff and apply conditions
"""

from __future__ import annotations

from .conditions import build_conditions, vulnerability_condition
from .diff import SetDiff, diff, diff_by_key
from .engine import PolicyReconciler
from .policy import needs_policy_update
from .projects import ProjectReference, resolve_projects

__all__ = [
    "PolicyReconciler",
    "ProjectReference",
    "SetDiff",
    "build_conditions",
    "diff",
    "diff_by_key",
    "needs_policy_update",
    "resolve_projects",
    "vulnerability_condition",
]
