"""Port for the remote policy service.

Every method raises ``RemoteNotFoundError`` when the service reports that the
addressed object does not exist and ``RemoteOperationError`` for every other
failure. Mutations return the object the service reports after the change.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from uuid import UUID

    from kevsync.domain.model import (
        PolicyCondition,
        PolicyOperator,
        RemotePolicy,
        RemoteProject,
        ViolationState,
    )


@runtime_checkable
class PolicyService(Protocol):
    def get_policy_by_name(self, name: str) -> RemotePolicy | None:
        """Return the policy called ``name`` or ``None`` when there is none."""
        ...

    def get_policy(self, policy_uuid: UUID) -> RemotePolicy: ...

    def create_policy(
        self,
        *,
        name: str,
        operator: PolicyOperator,
        violation_state: ViolationState,
    ) -> RemotePolicy: ...

    def update_policy(
        self,
        policy: RemotePolicy,
        *,
        operator: PolicyOperator,
        violation_state: ViolationState,
    ) -> RemotePolicy: ...

    def add_tag(self, policy_uuid: UUID, tag_name: str) -> RemotePolicy: ...

    def delete_tag(self, policy_uuid: UUID, tag_name: str) -> RemotePolicy: ...

    def add_project(self, policy_uuid: UUID, project_uuid: UUID) -> RemotePolicy: ...

    def delete_project(self, policy_uuid: UUID, project_uuid: UUID) -> RemotePolicy: ...

    def get_projects_for_name(
        self,
        name: str,
        *,
        exclude_inactive: bool = True,
        only_root: bool = False,
    ) -> list[RemoteProject]:
        """Return every project called ``name``; raises not-found when there is none."""
        ...

    def get_project_for_name_version(
        self,
        name: str,
        version: str,
        *,
        exclude_inactive: bool = True,
        only_root: bool = False,
    ) -> RemoteProject: ...

    def create_condition(
        self, policy_uuid: UUID, condition: PolicyCondition
    ) -> PolicyCondition: ...

    def delete_condition(self, condition_uuid: UUID) -> None: ...


__all__ = ["PolicyService"]
