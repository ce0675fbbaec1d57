"""
Jobs: the job specification model tree and the job API.

A minimal job needs a name, a type and one task group holding one task:

```python
from nomad_api.job import Job, JobRegisterRequest, JobTaskGroup, Task

job = Job.new(
    "example",
    task_groups=[
        JobTaskGroup(name="web", tasks=[Task(name="server", driver="docker")]),
    ],
)
response = await nomad.job.register(JobRegisterRequest(job=job))
await nomad.evaluation.wait(response.eval_id)
```

Durations (`KillTimeout`, `Interval`, `Delay`, ...) are nanoseconds, as in the
Nomad API.
"""

from __future__ import annotations

import base64
from typing import Any

from pydantic import Field, field_serializer, field_validator

from .allocation import Allocation, AllocationMetric, AllocationStub
from .base import Endpoint, NomadModel, escape, sort_by_create_index
from .deployment import Deployment
from .evaluation import Evaluation
from .exceptions import NomadInvalidInputError
from .options import QueryOptions, WriteOptions

# Job type constants
JOB_TYPE_SERVICE = "service"
JOB_TYPE_BATCH = "batch"
JOB_TYPE_SYSTEM = "system"
JOB_TYPE_SYSBATCH = "sysbatch"

JOB_DEFAULT_PRIORITY = 50
JOB_DEFAULT_NAMESPACE = "default"
JOB_DEFAULT_REGION = "global"


def _encode_payload(value: bytes | None) -> str | None:
    if value is None:
        return None
    return base64.b64encode(value).decode("ascii")


def _decode_payload(value: Any) -> Any:
    # Nomad transports []byte fields as base64 strings
    if isinstance(value, str):
        return base64.b64decode(value)
    return value


class Constraint(NomadModel):
    l_target: str | None = None
    r_target: str | None = None
    operand: str | None = None


class Affinity(NomadModel):
    l_target: str | None = None
    r_target: str | None = None
    operand: str | None = None
    weight: int | None = None


class JobSpreadTarget(NomadModel):
    value: str
    percent: int = Field(default=0, ge=0, le=100)


class JobSpread(NomadModel):
    attribute: str | None = None
    weight: int | None = None
    spread_target: list[JobSpreadTarget] | None = None


class JobUpdateStrategy(NomadModel):
    stagger: int | None = None
    max_parallel: int | None = None
    health_check: str | None = None
    min_healthy_time: int | None = None
    healthy_deadline: int | None = None
    progress_deadline: int | None = None
    canary: int | None = None
    auto_revert: bool | None = None
    auto_promote: bool | None = None


class JobMultiregionStrategy(NomadModel):
    max_parallel: int | None = None
    on_failure: str | None = None


class JobMultiregionRegion(NomadModel):
    name: str
    count: int | None = None
    datacenters: list[str] | None = None
    node_pool: str | None = None
    meta: dict[str, str] | None = None


class JobMultiregion(NomadModel):
    strategy: JobMultiregionStrategy | None = None
    regions: list[JobMultiregionRegion] | None = None


class JobPeriodicConfig(NomadModel):
    enabled: bool | None = None
    spec: str | None = None
    specs: list[str] | None = None
    spec_type: str | None = None
    prohibit_overlap: bool | None = None
    time_zone: str | None = None


class JobParameterizedConfig(NomadModel):
    payload: str | None = None
    meta_required: list[str] | None = None
    meta_optional: list[str] | None = None


class ReschedulePolicy(NomadModel):
    attempts: int | None = None
    interval: int | None = None
    delay: int | None = None
    delay_function: str | None = None
    max_delay: int | None = None
    unlimited: bool | None = None


class JobMigrateStrategy(NomadModel):
    max_parallel: int | None = None
    health_check: str | None = None
    min_healthy_time: int | None = None
    healthy_deadline: int | None = None


class RestartPolicy(NomadModel):
    attempts: int | None = None
    interval: int | None = None
    delay: int | None = None
    mode: str | None = None


class EphemeralDisk(NomadModel):
    migrate: bool | None = None
    size_mb: int | None = Field(default=None, alias="SizeMB")
    sticky: bool | None = None


class VolumeMount(NomadModel):
    fs_type: str | None = Field(default=None, alias="FSType")
    mount_flags: list[str] | None = None


class VolumeRequest(NomadModel):
    name: str
    type: str = Field(alias="Type")
    source: str
    read_only: bool | None = None
    mount_options: VolumeMount | None = None


class ScalingPolicy(NomadModel):
    enabled: bool | None = None
    min: int | None = None
    max: int | None = None
    policy: dict[str, Any] | None = None


class DNSConfig(NomadModel):
    servers: list[str] | None = None
    searches: list[str] | None = None
    options: list[str] | None = None


class Port(NomadModel):
    label: str
    value: int | None = None
    to: int | None = None
    host_network: str | None = None


class NetworkResource(NomadModel):
    mode: str | None = None
    device: str | None = None
    cidr: str | None = Field(default=None, alias="CIDR")
    ip: str | None = Field(default=None, alias="IP")
    mbits: int | None = None
    dns: DNSConfig | None = Field(default=None, alias="DNS")
    reserved_ports: list[Port] | None = None
    dynamic_ports: list[Port] | None = None


class RequestedDevice(NomadModel):
    name: str
    count: int | None = None
    constraints: list[Constraint] | None = None
    affinities: list[Affinity] | None = None


class TaskResources(NomadModel):
    cpu: int | None = Field(default=None, alias="CPU")
    cores: int | None = None
    memory_mb: int | None = Field(default=None, alias="MemoryMB")
    memory_max_mb: int | None = Field(default=None, alias="MemoryMaxMB")
    disk_mb: int | None = Field(default=None, alias="DiskMB")
    networks: list[NetworkResource] | None = None
    devices: list[RequestedDevice] | None = None


class CheckRestart(NomadModel):
    limit: int | None = None
    grace: int | None = None
    ignore_warnings: bool | None = None


class ServiceCheck(NomadModel):
    type: str = Field(alias="Type")
    name: str | None = None
    command: str | None = None
    args: list[str] | None = None
    path: str | None = None
    protocol: str | None = None
    port_label: str | None = None
    address_mode: str | None = None
    interval: int | None = None
    timeout: int | None = None
    initial_status: str | None = None
    tls_skip_verify: bool | None = Field(default=None, alias="TLSSkipVerify")
    method: str | None = None
    header: dict[str, list[str]] | None = None
    check_restart: CheckRestart | None = None
    grpc_service: str | None = Field(default=None, alias="GRPCService")
    grpc_use_tls: bool | None = Field(default=None, alias="GRPCUseTLS")
    success_before_passing: int | None = None
    failures_before_critical: int | None = None
    body: str | None = None


class ConsulGatewayBindAddress(NomadModel):
    address: str
    port: int


class ConsulGatewayProxy(NomadModel):
    connect_timeout: int | None = None
    envoy_gateway_bind_tagged_addresses: bool | None = None
    envoy_gateway_bind_addresses: dict[str, ConsulGatewayBindAddress] | None = None
    envoy_gateway_no_default_bind: bool | None = None
    config: dict[str, Any] | None = None


class ConsulGatewayTLSConfig(NomadModel):
    enabled: bool | None = None


class ConsulIngressService(NomadModel):
    name: str
    hosts: list[str] | None = None


class ConsulIngressListener(NomadModel):
    port: int
    protocol: str
    services: list[ConsulIngressService] = Field(default_factory=list)


class ConsulIngressGateway(NomadModel):
    tls: ConsulGatewayTLSConfig | None = Field(default=None, alias="TLS")
    listeners: list[ConsulIngressListener] | None = None


class ConsulLinkedService(NomadModel):
    name: str
    ca_file: str | None = Field(default=None, alias="CAFile")
    cert_file: str | None = None
    key_file: str | None = None
    sni: str | None = Field(default=None, alias="SNI")


class ConsulTerminatingGateway(NomadModel):
    services: list[ConsulLinkedService] = Field(default_factory=list)


class ConsulMeshGateway(NomadModel):
    mode: str


class ConsulGateway(NomadModel):
    proxy: ConsulGatewayProxy | None = None
    ingress: ConsulIngressGateway | None = None
    terminating: ConsulTerminatingGateway | None = None
    mesh: ConsulMeshGateway | None = None


class ConsulUpstream(NomadModel):
    destination_name: str
    local_bind_port: int
    datacenter: str | None = None


class ConsulProxy(NomadModel):
    local_service_address: str | None = None
    local_service_port: int | None = None
    config: dict[str, Any] | None = None
    upstreams: list[ConsulUpstream] | None = None


class ConsulSidecarService(NomadModel):
    port: str | None = None
    proxy: ConsulProxy | None = None
    tags: list[str] | None = None


class SidecarTask(NomadModel):
    name: str | None = None
    driver: str | None = None
    user: str | None = None
    config: dict[str, Any] | None = None
    env: dict[str, str] | None = None
    resources: TaskResources | None = None
    meta: dict[str, str] | None = None
    kill_timeout: int | None = None
    kill_signal: str | None = None
    shutdown_delay: int | None = None


class ConsulConnect(NomadModel):
    native: bool | None = None
    gateway: ConsulGateway | None = None
    sidecar_service: ConsulSidecarService | None = None
    sidecar_task: SidecarTask | None = None


class Service(NomadModel):
    name: str
    tags: list[str] | None = None
    canary_tags: list[str] | None = None
    port_label: str | None = None
    address_mode: str | None = None
    checks: list[ServiceCheck] | None = None
    check_restart: CheckRestart | None = None
    connect: ConsulConnect | None = None
    meta: dict[str, str] | None = None
    canary_meta: dict[str, str] | None = None
    enable_tag_override: bool | None = None
    on_update: str | None = None
    provider: str | None = None


class JobTaskLifecycle(NomadModel):
    hook: str
    sidecar: bool = False


class TemplateWaitConfig(NomadModel):
    min: int | None = None
    max: int | None = None


class TaskTemplate(NomadModel):
    source_path: str | None = None
    dest_path: str | None = None
    embedded_tmpl: str | None = None
    change_mode: str | None = None
    change_signal: str | None = None
    splay: int | None = None
    perms: str | None = None
    left_delim: str | None = None
    right_delim: str | None = None
    envvars: bool | None = None
    vault_grace: int | None = None
    wait: TemplateWaitConfig | None = None


class Vault(NomadModel):
    policies: list[str] | None = None
    namespace: str | None = None
    env: bool | None = None
    change_mode: str | None = None
    change_signal: str | None = None


class DispatchPayloadConfig(NomadModel):
    file: str


class Task(NomadModel):
    """A single unit of work run by a task driver.

    Attributes:
        name: The task name, unique within its group.
        driver: The task driver (`docker`, `exec`, `raw_exec`, ...).
        config: Driver specific configuration.
    """

    name: str
    driver: str
    config: dict[str, Any] | None = None
    constraints: list[Constraint] | None = None
    affinities: list[Affinity] | None = None
    env: dict[str, str] | None = None
    services: list[Service] | None = None
    resources: TaskResources | None = None
    meta: dict[str, str] | None = None
    kill_timeout: int | None = None
    kill_signal: str | None = None
    leader: bool | None = None
    shutdown_delay: int | None = None
    user: str | None = None
    lifecycle: JobTaskLifecycle | None = None
    templates: list[TaskTemplate] | None = None
    vault: Vault | None = None
    dispatch_payload: DispatchPayloadConfig | None = None


class JobTaskGroup(NomadModel):
    """A set of tasks that are always placed together on one node."""

    name: str
    tasks: list[Task] = Field(default_factory=list)
    count: int | None = None
    constraints: list[Constraint] | None = None
    affinities: list[Affinity] | None = None
    spreads: list[JobSpread] | None = None
    volumes: dict[str, VolumeRequest] | None = None
    restart_policy: RestartPolicy | None = None
    reschedule_policy: ReschedulePolicy | None = None
    ephemeral_disk: EphemeralDisk | None = None
    update: JobUpdateStrategy | None = None
    migrate: JobMigrateStrategy | None = None
    networks: list[NetworkResource] | None = None
    meta: dict[str, str] | None = None
    services: list[Service] | None = None
    shutdown_delay: int | None = None
    stop_after_client_disconnect: int | None = None
    max_client_disconnect: int | None = None
    scaling: ScalingPolicy | None = None
    consul_namespace: str | None = None


class JobUILink(NomadModel):
    label: str
    url: str = Field(alias="URL")


class JobUIConfig(NomadModel):
    description: str | None = None
    links: list[JobUILink] | None = None


class JobVersionTag(NomadModel):
    name: str
    description: str | None = None
    tagged_time: int = 0


class Job(NomadModel):
    """A Nomad job specification.

    The fields from `stop` onwards are set by the server and should be left
    unset when submitting a job.
    """

    name: str = ""
    id: str | None = Field(default=None, alias="ID")
    region: str | None = None
    namespace: str | None = None
    type: str | None = Field(default=None, alias="Type")
    priority: int | None = None
    all_at_once: bool | None = None
    datacenters: list[str] | None = None
    node_pool: str | None = None
    constraints: list[Constraint] | None = None
    affinities: list[Affinity] | None = None
    task_groups: list[JobTaskGroup] = Field(default_factory=list)
    update: JobUpdateStrategy | None = None
    multiregion: JobMultiregion | None = None
    spreads: list[JobSpread] | None = None
    periodic: JobPeriodicConfig | None = None
    parameterized_job: JobParameterizedConfig | None = None
    reschedule: ReschedulePolicy | None = None
    migrate: JobMigrateStrategy | None = None
    meta: dict[str, str] | None = None
    ui: JobUIConfig | None = Field(default=None, alias="UI")

    stop: bool | None = None
    parent_id: str | None = Field(default=None, alias="ParentID")
    dispatched: bool | None = None
    dispatch_idempotency_token: str | None = None
    payload: bytes | None = None
    consul_namespace: str | None = None
    vault_namespace: str | None = None
    nomad_token_id: str | None = Field(default=None, alias="NomadTokenID")
    status: str | None = None
    status_description: str | None = None
    stable: bool | None = None
    version: int | None = None
    submit_time: int | None = None
    create_index: int | None = None
    modify_index: int | None = None
    job_modify_index: int | None = None
    version_tag: JobVersionTag | None = None

    @classmethod
    def new(
        cls,
        name: str,
        task_groups: list[JobTaskGroup],
        job_type: str = JOB_TYPE_SERVICE,
        region: str = JOB_DEFAULT_REGION,
        namespace: str = JOB_DEFAULT_NAMESPACE,
        priority: int = JOB_DEFAULT_PRIORITY,
    ) -> "Job":
        """Creates a job whose ID equals its name, filled with Nomad's defaults."""
        return cls(
            id=name,
            name=name,
            type=job_type,
            region=region,
            namespace=namespace,
            priority=priority,
            task_groups=task_groups,
        )

    @field_validator("payload", mode="before")
    @classmethod
    def _validate_payload(cls, value: Any) -> Any:
        return _decode_payload(value)

    @field_serializer("payload")
    def _serialize_payload(self, value: bytes | None) -> str | None:
        return _encode_payload(value)


class JobTaskGroupSummary(NomadModel):
    queued: int = 0
    complete: int = 0
    failed: int = 0
    running: int = 0
    starting: int = 0
    lost: int = 0
    unknown: int = 0


class JobSummaryChildren(NomadModel):
    pending: int = 0
    running: int = 0
    dead: int = 0


class JobSummary(NomadModel):
    job_id: str = Field(alias="JobID")
    namespace: str = ""
    summary: dict[str, JobTaskGroupSummary] = Field(default_factory=dict)
    children: JobSummaryChildren | None = None
    create_index: int = 0
    modify_index: int = 0


class JobStub(NomadModel):
    """A job as returned by list calls."""

    id: str = Field(alias="ID")
    parent_id: str | None = Field(default=None, alias="ParentID")
    name: str = ""
    namespace: str = ""
    datacenters: list[str] | None = None
    type: str = Field(default="", alias="Type")
    priority: int = 0
    periodic: bool = False
    parameterized_job: bool = False
    stop: bool = False
    status: str = ""
    status_description: str = ""
    job_summary: JobSummary | None = None
    create_index: int = 0
    modify_index: int = 0
    job_modify_index: int = 0
    submit_time: int = 0
    meta: dict[str, str] | None = None


class JobSubmission(NomadModel):
    """The HCL or JSON source a job was submitted from."""

    source: str
    format: str
    variable_flags: dict[str, str] | None = None
    variables: str | None = None


class JobRegisterRequest(NomadModel):
    job: Job
    enforce_index: bool | None = None
    job_modify_index: int | None = None
    policy_override: bool | None = None
    preserve_counts: bool | None = None
    preserve_resources: bool | None = None
    eval_priority: int | None = None
    submission: JobSubmission | None = None


class JobRegisterResponse(NomadModel):
    eval_id: str = Field(default="", alias="EvalID")
    eval_create_index: int = 0
    job_modify_index: int = 0
    warnings: str | None = None


class JobDeregisterRequest(NomadModel):
    """Parameters for stopping a job.

    Attributes:
        job_id: The job to stop.
        purge: Remove the job from the state store instead of only stopping it.
        global_: Stop a multiregion job in every region.
        eval_priority: Priority of the resulting evaluation; `0` keeps the
            job priority.
        no_shutdown_delay: Ignore the shutdown delay of the job's groups and
            tasks.
    """

    job_id: str
    purge: bool = False
    global_: bool = False
    eval_priority: int = 0
    no_shutdown_delay: bool = False

    def query_params(self) -> dict[str, str]:
        params = {
            "purge": str(self.purge).lower(),
            "global": str(self.global_).lower(),
            "no_shutdown_delay": str(self.no_shutdown_delay).lower(),
        }
        if self.eval_priority:
            params["eval_priority"] = str(self.eval_priority)
        return params


class JobDeregisterResponse(NomadModel):
    eval_id: str = Field(default="", alias="EvalID")
    eval_create_index: int = 0
    job_modify_index: int = 0


class JobValidateRequest(NomadModel):
    job: Job


class JobValidateResponse(NomadModel):
    driver_config_validated: bool = False
    validation_errors: list[str] | None = None
    error: str | None = None
    warnings: str | None = None


class JobPlanRequest(NomadModel):
    job: Job
    diff: bool = False
    policy_override: bool = False


class FieldDiff(NomadModel):
    type: str = Field(alias="Type")
    name: str
    old: str = ""
    new: str = ""
    annotations: list[str] | None = None


class ObjectDiff(NomadModel):
    type: str = Field(alias="Type")
    name: str
    fields: list[FieldDiff] | None = None
    objects: list[ObjectDiff] | None = None


class TaskDiff(NomadModel):
    type: str = Field(alias="Type")
    name: str
    fields: list[FieldDiff] | None = None
    objects: list[ObjectDiff] | None = None
    annotations: list[str] | None = None


class TaskGroupDiff(NomadModel):
    type: str = Field(alias="Type")
    name: str
    fields: list[FieldDiff] | None = None
    objects: list[ObjectDiff] | None = None
    tasks: list[TaskDiff] | None = None
    updates: dict[str, int] | None = None


class JobDiff(NomadModel):
    type: str = Field(alias="Type")
    id: str = Field(alias="ID")
    fields: list[FieldDiff] | None = None
    objects: list[ObjectDiff] | None = None
    task_groups: list[TaskGroupDiff] | None = None


class DesiredUpdates(NomadModel):
    ignore: int = 0
    place: int = 0
    migrate: int = 0
    stop: int = 0
    in_place_update: int = 0
    destructive_update: int = 0
    canary: int = 0
    preemptions: int = 0


class PlanAnnotations(NomadModel):
    desired_tg_updates: dict[str, DesiredUpdates] | None = Field(
        default=None, alias="DesiredTGUpdates"
    )
    preempted_allocs: list[AllocationStub] | None = None


class JobPlanResponse(NomadModel):
    job_modify_index: int = 0
    created_evals: list[Evaluation] | None = None
    diff: JobDiff | None = None
    annotations: PlanAnnotations | None = None
    failed_tg_allocs: dict[str, AllocationMetric] | None = Field(
        default=None, alias="FailedTGAllocs"
    )
    next_periodic_launch: str | None = None
    warnings: str | None = None


class JobDispatchRequest(NomadModel):
    """Dispatches an instance of a parameterized job.

    The builder methods return the request itself so calls can be chained.
    """

    job_id: str = Field(alias="JobID")
    payload: bytes | None = None
    meta: dict[str, str] | None = None
    id_prefix_template: str | None = None
    priority: int | None = None

    def with_payload(self, payload: bytes) -> "JobDispatchRequest":
        self.payload = payload
        return self

    def with_meta(self, meta: dict[str, str]) -> "JobDispatchRequest":
        self.meta = meta
        return self

    def with_id_prefix_template(self, id_prefix_template: str) -> "JobDispatchRequest":
        self.id_prefix_template = id_prefix_template
        return self

    def with_priority(self, priority: int) -> "JobDispatchRequest":
        self.priority = priority
        return self

    @field_serializer("payload")
    def _serialize_payload(self, value: bytes | None) -> str | None:
        return _encode_payload(value)


class JobDispatchResponse(NomadModel):
    dispatched_job_id: str = Field(default="", alias="DispatchedJobID")
    eval_id: str = Field(default="", alias="EvalID")
    eval_create_index: int = 0
    job_create_index: int = 0


class JobVersionsResponse(NomadModel):
    versions: list[Job] = Field(default_factory=list)
    diffs: list[JobDiff] | None = None


class JobRevertRequest(NomadModel):
    job_id: str = Field(alias="JobID")
    job_version: int
    enforce_prior_version: int | None = None


class JobStabilityRequest(NomadModel):
    job_id: str = Field(alias="JobID")
    job_version: int
    stable: bool


class JobStabilityResponse(NomadModel):
    job_modify_index: int = 0


class JobEvaluateOptions(NomadModel):
    force_reschedule: bool = False


class JobEvaluationForceRequest(NomadModel):
    """Forces a new evaluation of a job, optionally rescheduling failed allocations."""

    job_id: str = Field(alias="JobID")
    eval_options: JobEvaluateOptions = Field(default_factory=JobEvaluateOptions)

    @classmethod
    def new(
        cls, job_id: str, force_reschedule: bool = False
    ) -> "JobEvaluationForceRequest":
        return cls(
            job_id=job_id,
            eval_options=JobEvaluateOptions(force_reschedule=force_reschedule),
        )


class ScalingRequest(NomadModel):
    """Changes the count of a task group.

    Attributes:
        count: The new count. Leave unset to only record a scaling event.
        target: Identifies the task group, e.g. `{"Group": "web"}`.
        error: Records the event as a scaling error.
        message: Human readable reason for the event.
        meta: Arbitrary metadata recorded with the event.
    """

    count: int | None = None
    target: dict[str, str] = Field(default_factory=dict)
    error: bool | None = None
    message: str | None = None
    meta: dict[str, Any] | None = None
    policy_override: bool | None = None


class ScalingEvent(NomadModel):
    time: int = 0
    count: int | None = None
    previous_count: int = 0
    error: bool = False
    message: str | None = None
    meta: dict[str, Any] | None = None
    eval_id: str | None = Field(default=None, alias="EvalID")


class TaskGroupScaleStatus(NomadModel):
    desired: int = 0
    placed: int = 0
    running: int = 0
    healthy: int = 0
    unhealthy: int = 0
    events: list[ScalingEvent] | None = None


class JobScaleStatus(NomadModel):
    job_id: str = Field(alias="JobID")
    namespace: str = ""
    job_create_index: int = 0
    job_modify_index: int = 0
    job_stopped: bool = False
    task_groups: dict[str, TaskGroupScaleStatus] = Field(default_factory=dict)


# Allocations embed the full job they were placed for
Allocation.model_rebuild()


class JobEndpoint(Endpoint):
    """Operations on jobs.

    List calls that return allocations, deployments or evaluations sort them
    newest first; `list` sorts jobs by ID.
    """

    async def register(
        self, request: JobRegisterRequest, opts: WriteOptions | None = None
    ) -> JobRegisterResponse:
        """Registers a new job or updates an existing one."""
        return await self._client.request(
            "POST", "/v1/jobs", JobRegisterResponse, opts=opts, body=request
        )

    async def deregister(
        self, request: JobDeregisterRequest, opts: WriteOptions | None = None
    ) -> JobDeregisterResponse:
        """Stops a job, purging it when `request.purge` is set."""
        return await self._client.request(
            "DELETE",
            f"/v1/job/{escape(request.job_id)}",
            JobDeregisterResponse,
            opts=opts,
            params=request.query_params(),
        )

    async def dispatch(
        self, request: JobDispatchRequest, opts: WriteOptions | None = None
    ) -> JobDispatchResponse:
        return await self._client.request(
            "POST",
            f"/v1/job/{escape(request.job_id)}/dispatch",
            JobDispatchResponse,
            opts=opts,
            body=request,
        )

    async def force_evaluation(
        self, request: JobEvaluationForceRequest, opts: WriteOptions | None = None
    ) -> JobRegisterResponse:
        return await self._client.request(
            "POST",
            f"/v1/job/{escape(request.job_id)}/evaluate",
            JobRegisterResponse,
            opts=opts,
            body=request,
        )

    async def force_periodic(
        self, job_id: str, opts: WriteOptions | None = None
    ) -> JobRegisterResponse:
        """Launches a periodic job immediately, ignoring its schedule."""
        return await self._client.request(
            "POST",
            f"/v1/job/{escape(job_id)}/periodic/force",
            JobRegisterResponse,
            opts=opts,
        )

    async def get(self, job_id: str, opts: QueryOptions | None = None) -> Job:
        return await self._client.request(
            "GET", f"/v1/job/{escape(job_id)}", Job, opts=opts
        )

    async def get_latest_deployment(
        self, job_id: str, opts: QueryOptions | None = None
    ) -> Deployment | None:
        """Returns the most recent deployment of a job, or `None` if it has none."""
        return await self._client.request(
            "GET",
            f"/v1/job/{escape(job_id)}/deployment",
            Deployment | None,
            opts=opts,
        )

    async def get_summary(
        self, job_id: str, opts: QueryOptions | None = None
    ) -> JobSummary:
        return await self._client.request(
            "GET", f"/v1/job/{escape(job_id)}/summary", JobSummary, opts=opts
        )

    async def list(
        self, meta: bool = False, opts: QueryOptions | None = None
    ) -> list[JobStub]:
        """Lists jobs sorted by ID.

        Args:
            meta: Include each job's metadata in the response.
            opts: Optional query options for the request.
        """
        jobs = await self._client.request(
            "GET",
            "/v1/jobs",
            list[JobStub],
            opts=opts,
            params={"meta": str(meta).lower()},
        )
        return sorted(jobs, key=lambda job: job.id)

    async def list_allocations(
        self,
        job_id: str,
        all_allocs: bool = False,
        opts: QueryOptions | None = None,
    ) -> list[AllocationStub]:
        """Lists a job's allocations.

        Args:
            job_id: The job ID.
            all_allocs: Include allocations of earlier job instances sharing
                the same ID.
            opts: Optional query options for the request.
        """
        allocations = await self._client.request(
            "GET",
            f"/v1/job/{escape(job_id)}/allocations",
            list[AllocationStub],
            opts=opts,
            params={"all": str(all_allocs).lower()},
        )
        return sort_by_create_index(allocations)

    async def list_deployments(
        self,
        job_id: str,
        all: bool = False,
        opts: QueryOptions | None = None,
    ) -> list[Deployment]:
        deployments = await self._client.request(
            "GET",
            f"/v1/job/{escape(job_id)}/deployments",
            list[Deployment],
            opts=opts,
            params={"all": str(all).lower()},
        )
        return sort_by_create_index(deployments)

    async def list_evaluations(
        self, job_id: str, opts: QueryOptions | None = None
    ) -> list[Evaluation]:
        evaluations = await self._client.request(
            "GET",
            f"/v1/job/{escape(job_id)}/evaluations",
            list[Evaluation],
            opts=opts,
        )
        return sort_by_create_index(evaluations)

    async def plan(
        self, request: JobPlanRequest, opts: WriteOptions | None = None
    ) -> JobPlanResponse:
        """Dry-runs the scheduler for a job without changing cluster state.

        Raises:
            NomadInvalidInputError: If the job has no ID.
        """
        if not request.job.id:
            raise NomadInvalidInputError("Job ID must be set to plan a job")

        return await self._client.request(
            "POST",
            f"/v1/job/{escape(request.job.id)}/plan",
            JobPlanResponse,
            opts=opts,
            body=request,
        )

    async def validate(
        self, request: JobValidateRequest, opts: WriteOptions | None = None
    ) -> JobValidateResponse:
        return await self._client.request(
            "POST", "/v1/validate/job", JobValidateResponse, opts=opts, body=request
        )

    async def versions(
        self, job_id: str, diffs: bool = False, opts: QueryOptions | None = None
    ) -> JobVersionsResponse:
        """Returns every stored version of a job, newest first."""
        return await self._client.request(
            "GET",
            f"/v1/job/{escape(job_id)}/versions",
            JobVersionsResponse,
            opts=opts,
            params={"diffs": str(diffs).lower()},
        )

    async def revert(
        self, request: JobRevertRequest, opts: WriteOptions | None = None
    ) -> JobRegisterResponse:
        return await self._client.request(
            "POST",
            f"/v1/job/{escape(request.job_id)}/revert",
            JobRegisterResponse,
            opts=opts,
            body=request,
        )

    async def set_stability(
        self, request: JobStabilityRequest, opts: WriteOptions | None = None
    ) -> JobStabilityResponse:
        return await self._client.request(
            "POST",
            f"/v1/job/{escape(request.job_id)}/stable",
            JobStabilityResponse,
            opts=opts,
            body=request,
        )

    async def scale(
        self, job_id: str, request: ScalingRequest, opts: WriteOptions | None = None
    ) -> JobRegisterResponse:
        return await self._client.request(
            "POST",
            f"/v1/job/{escape(job_id)}/scale",
            JobRegisterResponse,
            opts=opts,
            body=request,
        )

    async def scale_status(
        self, job_id: str, opts: QueryOptions | None = None
    ) -> JobScaleStatus:
        return await self._client.request(
            "GET", f"/v1/job/{escape(job_id)}/scale", JobScaleStatus, opts=opts
        )
