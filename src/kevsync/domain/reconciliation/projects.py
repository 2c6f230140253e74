"""Resolution of ``name`` / ``name:version`` project references."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from kevsync.domain.errors import RemoteNotFoundError

from .diff import unique_by_key

if TYPE_CHECKING:
    from collections.abc import Iterable

    from kevsync.domain.model import RemoteProject
    from kevsync.domain.ports.policy_service import PolicyService

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProjectReference:
    name: str
    version: str | None = None

    @classmethod
    def parse(cls, reference: str) -> ProjectReference:
        """Split ``reference`` on the first colon.

        ``"app"`` selects every version of ``app``; ``"app:1.2.0"`` selects exactly
        that version. An empty version (``"app:"``) counts as no version.
        """

        name, _, version = reference.strip().partition(":")
        name = name.strip()
        if not name:
            raise ValueError(f"Invalid project reference: {reference!r}")
        return cls(name=name, version=version.strip() or None)

    def __str__(self) -> str:
        return f"{self.name}:{self.version}" if self.version is not None else self.name


def resolve_projects(
    service: PolicyService,
    references: Iterable[str],
    *,
    exclude_inactive: bool = True,
    only_root: bool = False,
) -> tuple[RemoteProject, ...]:
    """Look up every reference and return the matching projects, unique by uuid.

    References that match nothing are logged and skipped so that one retired
    project does not block the rest of the run.
    """

    resolved: list[RemoteProject] = []
    for raw in references:
        try:
            reference = ProjectReference.parse(raw)
        except ValueError:
            log.warning("Skipping malformed project reference %r", raw)
            continue

        try:
            if reference.version is not None:
                project = service.get_project_for_name_version(
                    reference.name,
                    reference.version,
                    exclude_inactive=exclude_inactive,
                    only_root=only_root,
                )
                resolved.append(project)
            else:
                resolved.extend(
                    service.get_projects_for_name(
                        reference.name,
                        exclude_inactive=exclude_inactive,
                        only_root=only_root,
                    )
                )
        except RemoteNotFoundError:
            log.warning("Project %s not found, skipping", reference)

    return tuple(unique_by_key(resolved, lambda project: project.uuid).values())


__all__ = ["ProjectReference", "resolve_projects"]
