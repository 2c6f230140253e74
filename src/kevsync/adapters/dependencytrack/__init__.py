"""Public interface for the Dependency-Track adapter."""

from __future__ import annotations

from .client import DependencyTrackClient
from .schema import PolicyConditionPayload, PolicyPayload, ProjectPayload, TagPayload
from .translator import translate_condition, translate_policy, translate_project

__all__ = [
    "DependencyTrackClient",
    "PolicyConditionPayload",
    "PolicyPayload",
    "ProjectPayload",
    "TagPayload",
    "translate_condition",
    "translate_policy",
    "translate_project",
]
