from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base import Endpoint, NomadModel, escape, sort_by_create_index
from .options import QueryOptions, WriteOptions


class DeploymentState(NomadModel):
    """Rollout progress of a single task group."""

    placed_canaries: list[str] | None = None
    auto_revert: bool = False
    progress_deadline: int = 0
    require_progress_by: datetime | None = None
    promoted: bool = False
    desired_canaries: int = 0
    desired_total: int = 0
    placed_allocs: int = 0
    healthy_allocs: int = 0
    unhealthy_allocs: int = 0


class Deployment(NomadModel):
    id: str = Field(alias="ID")
    namespace: str = ""
    job_id: str = Field(default="", alias="JobID")
    job_version: int = 0
    job_modify_index: int = 0
    job_spec_modify_index: int = 0
    job_create_index: int = 0
    is_multiregion: bool = False
    task_groups: dict[str, DeploymentState] | None = None
    status: str = ""
    status_description: str = ""
    create_index: int = 0
    modify_index: int = 0
    create_time: int = 0
    modify_time: int = 0


class DeploymentUpdateResponse(NomadModel):
    eval_id: str = Field(default="", alias="EvalID")
    eval_create_index: int = 0
    deployment_modify_index: int = 0
    reverted_job_version: int | None = None


class DeploymentPauseRequest(NomadModel):
    """Pauses (`pause=True`) or resumes (`pause=False`) a deployment."""

    deployment_id: str = Field(alias="DeploymentID")
    pause: bool


class DeploymentPromoteRequest(NomadModel):
    """Promotes canaries of a deployment.

    Either set `all` or name the task `groups` to promote.
    """

    deployment_id: str = Field(alias="DeploymentID")
    all: bool = False
    groups: list[str] | None = None


class DeploymentEndpoint(Endpoint):
    async def list(self, opts: QueryOptions | None = None) -> list[Deployment]:
        """Lists deployments, newest first."""
        deployments = await self._client.request(
            "GET", "/v1/deployments", list[Deployment], opts=opts
        )
        return sort_by_create_index(deployments)

    async def get(self, id: str, opts: QueryOptions | None = None) -> Deployment:
        return await self._client.request(
            "GET", f"/v1/deployment/{escape(id)}", Deployment, opts=opts
        )

    async def fail(
        self, id: str, opts: WriteOptions | None = None
    ) -> DeploymentUpdateResponse:
        """Marks a deployment as failed, rolling back if auto-revert is set."""
        return await self._client.request(
            "POST",
            f"/v1/deployment/fail/{escape(id)}",
            DeploymentUpdateResponse,
            opts=opts,
        )

    async def pause(
        self, request: DeploymentPauseRequest, opts: WriteOptions | None = None
    ) -> DeploymentUpdateResponse:
        return await self._client.request(
            "POST",
            f"/v1/deployment/pause/{escape(request.deployment_id)}",
            DeploymentUpdateResponse,
            opts=opts,
            body=request,
        )

    async def promote(
        self, request: DeploymentPromoteRequest, opts: WriteOptions | None = None
    ) -> DeploymentUpdateResponse:
        return await self._client.request(
            "POST",
            f"/v1/deployment/promote/{escape(request.deployment_id)}",
            DeploymentUpdateResponse,
            opts=opts,
            body=request,
        )
