"""HTTP client for the Dependency-Track policy API."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from kevsync.adapters.http_resilience import ResilientClient, build_limiter
from kevsync.domain.errors import RemoteNotFoundError, RemoteOperationError

from .schema import (
    PolicyConditionPayload,
    PolicyListAdapter,
    PolicyPayload,
    ProjectListAdapter,
    ProjectPayload,
)
from .translator import (
    condition_body,
    policy_create_body,
    policy_update_body,
    translate_condition,
    translate_policy,
    translate_project,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from uuid import UUID

    from kevsync.adapters.http_resilience import ClientFactory
    from kevsync.config.dependencytrack import DependencyTrackConfig
    from kevsync.domain.model import (
        PolicyCondition,
        PolicyOperator,
        RemotePolicy,
        RemoteProject,
        ViolationState,
    )

log = getLogger(__name__)

DEFAULT_PAGE_SIZE = 100
TOTAL_COUNT_HEADER = "X-Total-Count"


def _segment(value: str) -> str:
    return quote(value, safe="")


class DependencyTrackClient:
    """Synchronous facade over the Dependency-Track REST API.

    Each call opens a short-lived async client and runs it to completion, so
    callers see plain blocking methods with the configured timeout. All of those
    clients draw from one rate limiter, so ``ratelimit`` caps the whole run.
    """

    def __init__(
        self,
        *,
        config: DependencyTrackConfig,
        client_factory: ClientFactory = ResilientClient,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._resilience = config.resilience
        self._limiter = build_limiter(config.resilience.ratelimit)
        self._client_factory = client_factory
        self._page_size = page_size

    def get_policy_by_name(self, name: str) -> RemotePolicy | None:
        policies = self._run(
            lambda client: self._fetch_all(client, "policy", PolicyListAdapter)
        )
        for policy in policies:
            if policy.name == name:
                return translate_policy(policy)
        return None

    def get_policy(self, policy_uuid: UUID) -> RemotePolicy:
        payload = self._run(
            lambda client: self._request_model(
                client, "GET", f"policy/{policy_uuid}", PolicyPayload
            )
        )
        return translate_policy(payload)

    def create_policy(
        self,
        *,
        name: str,
        operator: PolicyOperator,
        violation_state: ViolationState,
    ) -> RemotePolicy:
        body = policy_create_body(name=name, operator=operator, violation_state=violation_state)
        payload = self._run(
            lambda client: self._request_model(client, "PUT", "policy", PolicyPayload, json=body)
        )
        return translate_policy(payload)

    def update_policy(
        self,
        policy: RemotePolicy,
        *,
        operator: PolicyOperator,
        violation_state: ViolationState,
    ) -> RemotePolicy:
        body = policy_update_body(policy, operator=operator, violation_state=violation_state)
        payload = self._run(
            lambda client: self._request_model(client, "POST", "policy", PolicyPayload, json=body)
        )
        return translate_policy(payload)

    def add_tag(self, policy_uuid: UUID, tag_name: str) -> RemotePolicy:
        return self._mutate_policy("POST", policy_uuid, f"tag/{_segment(tag_name)}")

    def delete_tag(self, policy_uuid: UUID, tag_name: str) -> RemotePolicy:
        return self._mutate_policy("DELETE", policy_uuid, f"tag/{_segment(tag_name)}")

    def add_project(self, policy_uuid: UUID, project_uuid: UUID) -> RemotePolicy:
        return self._mutate_policy("POST", policy_uuid, f"project/{project_uuid}")

    def delete_project(self, policy_uuid: UUID, project_uuid: UUID) -> RemotePolicy:
        return self._mutate_policy("DELETE", policy_uuid, f"project/{project_uuid}")

    def get_projects_for_name(
        self,
        name: str,
        *,
        exclude_inactive: bool = True,
        only_root: bool = False,
    ) -> list[RemoteProject]:
        projects = self._list_projects(name, exclude_inactive=exclude_inactive, only_root=only_root)
        if not projects:
            raise RemoteNotFoundError(f"project not found: {name}")
        return projects

    def get_project_for_name_version(
        self,
        name: str,
        version: str,
        *,
        exclude_inactive: bool = True,
        only_root: bool = False,
    ) -> RemoteProject:
        projects = self._list_projects(name, exclude_inactive=exclude_inactive, only_root=only_root)
        for project in projects:
            if project.version == version:
                return project
        raise RemoteNotFoundError(f"project not found: {name}:{version}")

    def create_condition(self, policy_uuid: UUID, condition: PolicyCondition) -> PolicyCondition:
        body = condition_body(condition)
        payload = self._run(
            lambda client: self._request_model(
                client,
                "PUT",
                f"policy/{policy_uuid}/condition",
                PolicyConditionPayload,
                json=body,
            )
        )
        return translate_condition(payload)

    def delete_condition(self, condition_uuid: UUID) -> None:
        self._run(
            lambda client: self._perform_request(
                client, "DELETE", f"policy/condition/{condition_uuid}"
            )
        )

    def _list_projects(
        self,
        name: str,
        *,
        exclude_inactive: bool,
        only_root: bool,
    ) -> list[RemoteProject]:
        params = {
            "name": name,
            "excludeInactive": str(exclude_inactive).lower(),
            "onlyRoot": str(only_root).lower(),
        }
        payloads = self._run(
            lambda client: self._fetch_all(client, "project", ProjectListAdapter, params=params)
        )
        # the name filter is a substring match on some server versions
        return [translate_project(payload) for payload in payloads if payload.name == name]

    def _mutate_policy(self, method: str, policy_uuid: UUID, suffix: str) -> RemotePolicy:
        async def operation(client: ResilientClient) -> PolicyPayload:
            response = await self._perform_request(
                client, method, f"policy/{policy_uuid}/{suffix}", allow_not_modified=True
            )
            if response.status_code == httpx.codes.NOT_MODIFIED or not response.content:
                # nothing changed server side, report the current policy
                return await self._request_model(
                    client, "GET", f"policy/{policy_uuid}", PolicyPayload
                )
            return _validate(PolicyPayload, response)

        return translate_policy(self._run(operation))

    def _run[T](self, operation: Callable[[ResilientClient], Awaitable[T]]) -> T:
        async def runner() -> T:
            async with self._client_factory(self._resilience, limiter=self._limiter) as client:
                return await operation(client)

        return asyncio.run(runner())

    async def _fetch_all[T](
        self,
        client: ResilientClient,
        path: str,
        adapter: TypeAdapter[list[T]],
        *,
        params: dict[str, str] | None = None,
    ) -> list[T]:
        items: list[T] = []
        page = 1
        while True:
            page_params = {
                **(params or {}),
                "pageNumber": str(page),
                "pageSize": str(self._page_size),
            }
            response = await self._perform_request(client, "GET", path, params=page_params)
            batch = _validate_list(adapter, response)
            items.extend(batch)
            total = _total_count(response)
            if not batch or len(batch) < self._page_size:
                break
            if total is not None and len(items) >= total:
                break
            page += 1
        return items

    async def _request_model[M: BaseModel](
        self,
        client: ResilientClient,
        method: str,
        path: str,
        model: type[M],
        *,
        json: dict[str, object] | None = None,
    ) -> M:
        response = await self._perform_request(client, method, path, json=json)
        return _validate(model, response)

    async def _perform_request(
        self,
        client: ResilientClient,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, object] | None = None,
        allow_not_modified: bool = False,
    ) -> httpx.Response:
        try:
            response = await client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            raise RemoteOperationError(
                f"Dependency-Track request failed: {method} {path}: {exc}"
            ) from exc

        if allow_not_modified and response.status_code == httpx.codes.NOT_MODIFIED:
            return response
        if response.status_code == httpx.codes.NOT_FOUND:
            raise RemoteNotFoundError(
                f"Dependency-Track {method} {path}: not found ({_error_detail(response)})",
                status_code=response.status_code,
            )
        if not response.is_success:
            log.error(
                "Dependency-Track API error %s on %s %s: %s",
                response.status_code,
                method,
                path,
                _error_detail(response),
            )
            raise RemoteOperationError(
                f"Dependency-Track {method} {path}: status {response.status_code}",
                status_code=response.status_code,
            )
        return response


def _validate[M: BaseModel](model: type[M], response: httpx.Response) -> M:
    try:
        return model.model_validate_json(response.content)
    except ValidationError as exc:
        raise RemoteOperationError(
            f"Unexpected Dependency-Track response payload for {model.__name__}: {exc}",
            status_code=response.status_code,
        ) from exc


def _validate_list[T](adapter: TypeAdapter[list[T]], response: httpx.Response) -> list[T]:
    try:
        return adapter.validate_json(response.content)
    except ValidationError as exc:
        raise RemoteOperationError(
            f"Unexpected Dependency-Track list payload: {exc}",
            status_code=response.status_code,
        ) from exc


def _total_count(response: httpx.Response) -> int | None:
    value = response.headers.get(TOTAL_COUNT_HEADER)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _error_detail(response: httpx.Response) -> str:
    text = response.text.strip()
    return text[:200] if text else response.reason_phrase

