"""
Evaluations: the scheduler's decisions about where and whether to place work.

Besides the plain API calls, `EvaluationEndpoint.wait` follows an evaluation
until the scheduler reaches a final decision:

    ┌──────────┐   pending    ┌──────────┐   complete   ┌─────────┐
    │ Register │─────────────>│Evaluation│────────────> │ Success │
    │   Job    │              │  (Nomad  │              └─────────┘
    └──────────┘              │Scheduler)│
                              └──────────┘
                                   │ blocked → NextEval (chain)
                                   │ failed / canceled
                                   v
                      ┌─────────────────────────┐
                      │ FailedTGAllocs set?     │
                      │ (no matching nodes,     │
                      │  resource shortage)     │
                      └─────────────────────────┘
                                   │
                                   v
                                FAILURE
"""

from __future__ import annotations

import time

import anyio
from pydantic import Field

from .allocation import AllocationMetric, AllocationStub
from .base import Endpoint, NomadModel, escape, sort_by_create_index
from .exceptions import (
    NomadEvaluationError,
    NomadJobSchedulingError,
    NomadJobTimeoutError,
    NomadNetworkError,
    NomadServerError,
)
from .logging import get_logger
from .options import QueryOptions, WriteOptions

logger = get_logger(__name__)

EVALUATION_STATUS_BLOCKED = "blocked"
EVALUATION_STATUS_PENDING = "pending"
EVALUATION_STATUS_COMPLETE = "complete"
EVALUATION_STATUS_FAILED = "failed"
EVALUATION_STATUS_CANCELED = "canceled"

# Default interval for polling evaluation status (seconds)
DEFAULT_POLL_INTERVAL_SECONDS = 1


class EvaluationDesiredUpdate(NomadModel):
    ignore: int = 0
    place: int = 0
    migrate: int = 0
    stop: int = 0
    in_place_update: int = 0
    destructive_update: int = 0
    canary: int = 0
    preemptions: int = 0


class EvaluationPlanAnnotation(NomadModel):
    desired_tg_updates: dict[str, EvaluationDesiredUpdate] | None = Field(
        default=None, alias="DesiredTGUpdates"
    )
    preempted_allocs: list[AllocationStub] | None = None


class EvaluationStub(NomadModel):
    id: str = Field(alias="ID")
    priority: int = 0
    type: str = Field(default="", alias="Type")
    triggered_by: str = ""
    namespace: str = ""
    job_id: str = Field(default="", alias="JobID")
    node_id: str = Field(default="", alias="NodeID")
    deployment_id: str = Field(default="", alias="DeploymentID")
    status: str = ""
    status_description: str = ""
    wait_until: str | None = None
    next_eval: str = ""
    previous_eval: str = ""
    blocked_eval: str = ""
    create_index: int = 0
    modify_index: int = 0
    create_time: int = 0
    modify_time: int = 0


class Evaluation(NomadModel):
    """A scheduler evaluation.

    Attributes:
        id: The evaluation ID.
        status: One of the `EVALUATION_STATUS_*` constants.
        next_eval: ID of the follow-up evaluation created when this one could
            not place everything.
        failed_tg_allocs: Placement metrics for every task group that could
            not be placed, keyed by task group name.
        related_evals: Evaluations linked to this one, only returned by `get`.
    """

    id: str = Field(alias="ID")
    priority: int = 0
    type: str = Field(default="", alias="Type")
    triggered_by: str = ""
    namespace: str = ""
    job_id: str = Field(default="", alias="JobID")
    job_modify_index: int | None = None
    node_id: str | None = Field(default=None, alias="NodeID")
    node_modify_index: int | None = None
    deployment_id: str | None = Field(default=None, alias="DeploymentID")
    status: str = EVALUATION_STATUS_PENDING
    status_description: str | None = None
    wait: int | None = None
    wait_until: str | None = None
    next_eval: str | None = None
    previous_eval: str | None = None
    blocked_eval: str | None = None
    related_evals: list[EvaluationStub] | None = None
    failed_tg_allocs: dict[str, AllocationMetric] | None = Field(
        default=None, alias="FailedTGAllocs"
    )
    plan_annotations: EvaluationPlanAnnotation | None = None
    class_eligibility: dict[str, bool] | None = None
    escaped_computed_class: bool | None = None
    quota_limit_reached: str | None = None
    annotate_plan: bool | None = None
    queued_allocations: dict[str, int] | None = None
    snapshot_index: int = 0
    create_index: int = 0
    modify_index: int = 0
    create_time: int = 0
    modify_time: int = 0


class EvaluationDeleteRequest(NomadModel):
    """Selects evaluations to delete, either by ID or by filter expression."""

    eval_ids: list[str] | None = Field(default=None, alias="EvalIDs")
    filter: str | None = None

    @classmethod
    def from_ids(cls, eval_ids: list[str]) -> "EvaluationDeleteRequest":
        return cls(eval_ids=eval_ids)

    @classmethod
    def from_filter(cls, filter: str) -> "EvaluationDeleteRequest":
        return cls(filter=filter)


class EvaluationDeleteResponse(NomadModel):
    count: int = 0


class EvaluationCountResponse(NomadModel):
    count: int = 0


def describe_placement_failures(failed_tg_allocs: dict[str, AllocationMetric]) -> str:
    """Summarizes why each task group could not be placed.

    Args:
        failed_tg_allocs: The `FailedTGAllocs` of an evaluation.

    Returns:
        One `Task group '<name>': <reasons>` entry per task group, joined
        with `; `.
    """
    failure_details = []
    for tg_name, metrics in failed_tg_allocs.items():
        reasons = []
        if metrics.nodes_evaluated == 0:
            reasons.append("no nodes evaluated")
        if not any((metrics.nodes_available or {}).values()):
            reasons.append("no nodes available")
        if metrics.constraint_filtered:
            reasons.append(
                f"constraint filtered {sum(metrics.constraint_filtered.values())} nodes"
            )
        if metrics.dimension_exhausted:
            reasons.append(
                f"resources exhausted on {sum(metrics.dimension_exhausted.values())} nodes"
            )
        detail = f"Task group {tg_name!r}: "
        detail += ", ".join(reasons) if reasons else "unknown failure"
        failure_details.append(detail)

    return "; ".join(failure_details)


class EvaluationEndpoint(Endpoint):
    async def list(self, opts: QueryOptions | None = None) -> list[Evaluation]:
        """Lists evaluations, newest first."""
        evaluations = await self._client.request(
            "GET", "/v1/evaluations", list[Evaluation], opts=opts
        )
        return sort_by_create_index(evaluations)

    async def get(self, id: str, opts: QueryOptions | None = None) -> Evaluation:
        """Returns an evaluation, including its related evaluations."""
        return await self._client.request(
            "GET",
            f"/v1/evaluation/{escape(id)}",
            Evaluation,
            opts=opts,
            params={"related": "true"},
        )

    async def allocations(
        self, id: str, opts: QueryOptions | None = None
    ) -> list[AllocationStub]:
        """Lists the allocations created or modified by an evaluation, newest first."""
        allocations = await self._client.request(
            "GET",
            f"/v1/evaluation/{escape(id)}/allocations",
            list[AllocationStub],
            opts=opts,
        )
        return sort_by_create_index(allocations)

    async def count(self, opts: QueryOptions | None = None) -> EvaluationCountResponse:
        return await self._client.request(
            "GET", "/v1/evaluations/count", EvaluationCountResponse, opts=opts
        )

    async def delete(
        self, request: EvaluationDeleteRequest, opts: WriteOptions | None = None
    ) -> EvaluationDeleteResponse:
        """Deletes evaluations by ID or filter.

        Nomad only accepts this call while the scheduler is paused.
        """
        return await self._client.request(
            "DELETE",
            "/v1/evaluations",
            EvaluationDeleteResponse,
            opts=opts,
            body=request,
        )

    async def wait(
        self,
        id: str,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        timeout: float | None = None,
        opts: QueryOptions | None = None,
    ) -> Evaluation:
        """Waits for an evaluation to reach a terminal state.

        Polls the evaluation status until it reaches a terminal state
        (complete, failed, or canceled). Follows evaluation chains
        (`NextEval`) iteratively. Transient API errors are logged and retried.

        Args:
            id: The initial evaluation ID to monitor.
            poll_interval: Seconds between status polls.
            timeout: Maximum number of seconds to wait. Waits indefinitely
                when `None`.
            opts: Optional query options used for every poll.

        Returns:
            The evaluation that completed successfully.

        Raises:
            NomadJobTimeoutError: If the evaluation does not finish in time.
            NomadJobSchedulingError: If the job fails to schedule.
            NomadEvaluationError: If the evaluation fails or is canceled.
        """
        start_time = time.monotonic()
        current_eval_id = id

        while True:
            # Check timeout
            if timeout is not None:
                elapsed = time.monotonic() - start_time
                if elapsed > timeout:
                    raise NomadJobTimeoutError(
                        f"Evaluation {current_eval_id[:8]} did not finish "
                        f"within {timeout} seconds"
                    )

            try:
                evaluation = await self.get(current_eval_id, opts=opts)
            except (NomadNetworkError, NomadServerError) as exc:
                if isinstance(exc, NomadServerError) and exc.status_code < 500:
                    raise
                logger.warning(f"Failed to get evaluation {current_eval_id!r}: {exc}")
                await anyio.sleep(poll_interval)
                continue

            status = evaluation.status
            logger.debug(f"Evaluation {current_eval_id[:8]} status: {status}")

            if status == EVALUATION_STATUS_COMPLETE:
                if evaluation.failed_tg_allocs:
                    raise NomadJobSchedulingError(
                        f"Job {evaluation.job_id!r} failed to schedule. "
                        f"Evaluation {current_eval_id[:8]} completed with "
                        "scheduling failures: "
                        + describe_placement_failures(evaluation.failed_tg_allocs)
                    )

                logger.info(f"Evaluation {current_eval_id[:8]} completed successfully")
                return evaluation

            elif status == EVALUATION_STATUS_FAILED:
                status_desc = evaluation.status_description
                raise NomadEvaluationError(
                    f"Nomad evaluation {current_eval_id[:8]} failed"
                    + (f": {status_desc}" if status_desc else "")
                )

            elif status == EVALUATION_STATUS_CANCELED:
                raise NomadEvaluationError(
                    f"Nomad evaluation {current_eval_id[:8]} was canceled"
                )

            # Non-terminal states: blocked, pending
            if evaluation.next_eval:
                logger.info(
                    f"Evaluation {current_eval_id[:8]} spawned next evaluation "
                    f"{evaluation.next_eval[:8]}, following chain..."
                )
                current_eval_id = evaluation.next_eval
                # Poll the new evaluation right away
                continue

            await anyio.sleep(poll_interval)
