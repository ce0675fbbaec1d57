"""Allocations: the placement of a task group on a client node."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import Field

from .base import Endpoint, NomadModel, escape, sort_by_create_index
from .options import QueryOptions

if TYPE_CHECKING:
    from .job import Job

ALLOCATION_CLIENT_STATUS_PENDING = "pending"
ALLOCATION_CLIENT_STATUS_RUNNING = "running"
ALLOCATION_CLIENT_STATUS_COMPLETE = "complete"
ALLOCATION_CLIENT_STATUS_FAILED = "failed"
ALLOCATION_CLIENT_STATUS_LOST = "lost"


class AllocationTaskEvent(NomadModel):
    type: str = Field(default="", alias="Type")
    time: int = 0
    display_message: str = ""
    details: dict[str, str] | None = None
    message: str = ""
    signal: int = 0
    exit_code: int = 0
    driver_error: str = ""
    kill_timeout: int = 0
    kill_error: str = ""
    kill_reason: str = ""
    restart_reason: str = ""
    setup_error: str = ""
    driver_message: str = ""
    task_signal_reason: str = ""
    task_signal: str = ""
    download_error: str = ""
    validation_error: str = ""
    disk_limit: int = 0
    disk_size: int | None = None
    failed_sibling: str = ""
    vault_error: str = ""
    generic_source: str = ""


class AllocationTaskState(NomadModel):
    state: str = ""
    failed: bool = False
    restarts: int = 0
    last_restart: str | None = None
    started_at: str | None = None
    finished_at: str | None = None
    events: list[AllocationTaskEvent] | None = None


class AllocationDeploymentStatus(NomadModel):
    healthy: bool | None = None
    timestamp: str | None = None
    canary: bool = False
    modify_index: int = 0


class AllocationResourceExhausted(NomadModel):
    cpu: int = Field(default=0, alias="CPU")
    memory_mb: int = Field(default=0, alias="MemoryMB")
    disk_mb: int = Field(default=0, alias="DiskMB")


class AllocationNodeScoreMeta(NomadModel):
    """Scores a candidate node received from each scoring stage."""

    node_id: str = Field(alias="NodeID")
    scores: dict[str, float] | None = None
    norm_score: float = 0


class AllocationMetric(NomadModel):
    """Scheduler metrics describing why a placement succeeded or failed."""

    nodes_evaluated: int = 0
    nodes_filtered: int = 0
    nodes_available: dict[str, int] | None = None
    class_filtered: dict[str, int] | None = None
    constraint_filtered: dict[str, int] | None = None
    nodes_exhausted: int = 0
    class_exhausted: dict[str, int] | None = None
    dimension_exhausted: dict[str, int] | None = None
    quota_exhausted: list[str] | None = None
    resources_exhausted: dict[str, AllocationResourceExhausted] | None = None
    score_meta_data: list[AllocationNodeScoreMeta] | None = None
    allocation_time: int = 0
    coalesced_failures: int = 0


class AllocationStub(NomadModel):
    id: str = Field(alias="ID")
    eval_id: str = Field(default="", alias="EvalID")
    name: str = ""
    namespace: str = ""
    node_id: str = Field(default="", alias="NodeID")
    node_name: str = ""
    job_id: str = Field(default="", alias="JobID")
    job_type: str = ""
    job_version: int = 0
    task_group: str = ""
    desired_status: str = ""
    desired_description: str = ""
    client_status: str = ""
    client_description: str = ""
    task_states: dict[str, AllocationTaskState] | None = None
    deployment_id: str | None = Field(default=None, alias="DeploymentID")
    deployment_status: AllocationDeploymentStatus | None = None
    followup_eval_id: str | None = Field(default=None, alias="FollowupEvalID")
    preempted_allocations: list[str] | None = None
    preempted_by_allocation: str = ""
    create_index: int = 0
    modify_index: int = 0
    create_time: int = 0
    modify_time: int = 0


class Allocation(AllocationStub):
    """A full allocation, including its job and scheduling metrics."""

    job: Job | None = None
    allocated_resources: dict[str, Any] | None = None
    metrics: AllocationMetric | None = None


class AllocationEndpoint(Endpoint):
    async def list(self, opts: QueryOptions | None = None) -> list[AllocationStub]:
        """Lists allocations, newest first."""
        allocations = await self._client.request(
            "GET", "/v1/allocations", list[AllocationStub], opts=opts
        )
        return sort_by_create_index(allocations)

    async def get(self, alloc_id: str, opts: QueryOptions | None = None) -> Allocation:
        return await self._client.request(
            "GET", f"/v1/allocation/{escape(alloc_id)}", Allocation, opts=opts
        )
