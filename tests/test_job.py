import pytest

from nomad_api import NomadInvalidInputError, NomadNotFoundError, WriteOptions
from nomad_api.job import (
    JOB_TYPE_BATCH,
    Job,
    JobDeregisterRequest,
    JobDispatchRequest,
    JobEvaluationForceRequest,
    JobPlanRequest,
    JobRegisterRequest,
    JobRevertRequest,
    JobStabilityRequest,
    JobTaskGroup,
    JobValidateRequest,
    NetworkResource,
    Port,
    ScalingRequest,
    Service,
    ServiceCheck,
    Task,
    TaskResources,
)

from .conftest import make_allocation, make_evaluation

pytestmark = pytest.mark.anyio


def _example_job(**kwargs) -> Job:
    return Job.new(
        "example",
        task_groups=[
            JobTaskGroup(
                name="web",
                count=2,
                tasks=[
                    Task(
                        name="server",
                        driver="docker",
                        config={"image": "nginx:1.25"},
                        resources=TaskResources(cpu=500, memory_mb=256),
                    )
                ],
            )
        ],
        **kwargs,
    )


class TestJobModel:
    def test_new_applies_defaults(self):
        job = _example_job()

        assert job.id == "example"
        assert job.name == "example"
        assert job.type == "service"
        assert job.region == "global"
        assert job.namespace == "default"
        assert job.priority == 50

    def test_to_api_uses_nomad_field_names(self):
        body = _example_job(job_type=JOB_TYPE_BATCH).to_api()

        assert body["ID"] == "example"
        assert body["Type"] == "batch"
        task = body["TaskGroups"][0]["Tasks"][0]
        assert task["Driver"] == "docker"
        assert task["Resources"] == {"CPU": 500, "MemoryMB": 256}

    def test_unset_fields_are_omitted(self):
        body = _example_job().to_api()

        assert "Periodic" not in body
        assert "Stop" not in body
        assert "Constraints" not in body["TaskGroups"][0]

    def test_network_and_service_aliases(self):
        group = JobTaskGroup(
            name="web",
            networks=[
                NetworkResource(
                    mode="bridge", dynamic_ports=[Port(label="http", to=8080)]
                )
            ],
            services=[
                Service(
                    name="web",
                    port_label="http",
                    checks=[
                        ServiceCheck(
                            type="http", path="/health", tls_skip_verify=True
                        )
                    ],
                )
            ],
        )

        body = group.to_api()

        assert body["Networks"][0]["DynamicPorts"] == [{"Label": "http", "To": 8080}]
        assert body["Services"][0]["Checks"][0]["TLSSkipVerify"] is True

    def test_payload_round_trips_as_base64(self):
        job = Job(name="dispatched", payload=b"hello")
        assert job.to_api()["Payload"] == "aGVsbG8="
        assert Job.model_validate({"Payload": "aGVsbG8="}).payload == b"hello"

    def test_parses_server_response(self):
        job = Job.model_validate(
            {
                "ID": "example",
                "Name": "example",
                "Type": "service",
                "Status": "running",
                "Version": 3,
                "Stable": True,
                "SubmitTime": 1700000000000000000,
                "TaskGroups": [
                    {
                        "Name": "web",
                        "Count": 1,
                        "Tasks": [
                            {
                                "Name": "server",
                                "Driver": "docker",
                                "Resources": {"CPU": 100, "MemoryMB": 300},
                            }
                        ],
                        "EphemeralDisk": {"SizeMB": 300},
                    }
                ],
                "Payload": None,
                "UnknownFutureField": "ignored",
            }
        )

        assert job.status == "running"
        assert job.version == 3
        assert job.task_groups[0].ephemeral_disk.size_mb == 300
        assert job.task_groups[0].tasks[0].resources.memory_mb == 300


class TestJobEndpoint:
    async def test_register(self, nomad, fake_api):
        fake_api.add(
            "POST",
            "/v1/jobs",
            {"EvalID": "eval-123", "EvalCreateIndex": 7, "JobModifyIndex": 7},
        )

        response = await nomad.job.register(JobRegisterRequest(job=_example_job()))

        assert response.eval_id == "eval-123"
        assert response.job_modify_index == 7
        body = fake_api.last_json()
        assert body["Job"]["ID"] == "example"
        assert "EnforceIndex" not in body

    async def test_register_with_write_options(self, nomad, fake_api):
        fake_api.add("POST", "/v1/jobs", {"EvalID": "eval-123"})

        await nomad.job.register(
            JobRegisterRequest(
                job=_example_job(), enforce_index=True, job_modify_index=0
            ),
            opts=WriteOptions().with_namespace("batch").with_auth_token("t"),
        )

        request = fake_api.last_request
        assert request.url.params["namespace"] == "batch"
        assert request.headers["X-Nomad-Token"] == "t"
        assert fake_api.last_json()["EnforceIndex"] is True

    async def test_get(self, nomad, fake_api):
        fake_api.add("GET", "/v1/job/example", _example_job().to_api())
        job = await nomad.job.get("example")
        assert job.task_groups[0].tasks[0].config == {"image": "nginx:1.25"}

    async def test_job_id_is_escaped(self, nomad, fake_api):
        fake_api.add("GET", "/v1/job/batch/nightly", {"ID": "batch/nightly"})

        await nomad.job.get("batch/nightly")

        assert fake_api.last_request.url.raw_path.startswith(
            b"/v1/job/batch%2Fnightly?"
        )

    async def test_get_missing_job(self, nomad, fake_api):
        fake_api.add("GET", "/v1/job/missing", status_code=404, text="job not found")
        with pytest.raises(NomadNotFoundError):
            await nomad.job.get("missing")

    async def test_list_is_sorted_by_id(self, nomad, fake_api):
        fake_api.add(
            "GET",
            "/v1/jobs",
            [
                {"ID": "zeta", "Status": "running"},
                {"ID": "alpha", "Status": "dead", "Meta": {"team": "infra"}},
            ],
        )

        jobs = await nomad.job.list(meta=True)

        assert [job.id for job in jobs] == ["alpha", "zeta"]
        assert jobs[0].meta == {"team": "infra"}
        assert fake_api.last_request.url.params["meta"] == "true"

    async def test_get_summary(self, nomad, fake_api):
        fake_api.add(
            "GET",
            "/v1/job/example/summary",
            {
                "JobID": "example",
                "Namespace": "default",
                "Summary": {"web": {"Running": 2, "Queued": 1}},
                "Children": {"Pending": 0, "Running": 0, "Dead": 0},
            },
        )

        summary = await nomad.job.get_summary("example")

        assert summary.summary["web"].running == 2
        assert summary.summary["web"].queued == 1

    async def test_get_latest_deployment(self, nomad, fake_api):
        fake_api.add(
            "GET",
            "/v1/job/example/deployment",
            {"ID": "deploy-1", "JobID": "example", "Status": "running"},
        )
        deployment = await nomad.job.get_latest_deployment("example")
        assert deployment.id == "deploy-1"

    async def test_get_latest_deployment_none(self, nomad, fake_api):
        fake_api.add("GET", "/v1/job/example/deployment", None)
        assert await nomad.job.get_latest_deployment("example") is None

    async def test_list_allocations(self, nomad, fake_api):
        fake_api.add(
            "GET",
            "/v1/job/example/allocations",
            [
                make_allocation("alloc-1", create_index=1),
                make_allocation("alloc-2", create_index=9),
            ],
        )

        allocations = await nomad.job.list_allocations("example", all_allocs=True)

        assert [a.id for a in allocations] == ["alloc-2", "alloc-1"]
        assert fake_api.last_request.url.params["all"] == "true"

    async def test_list_deployments(self, nomad, fake_api):
        fake_api.add(
            "GET",
            "/v1/job/example/deployments",
            [{"ID": "d1", "CreateIndex": 3}, {"ID": "d2", "CreateIndex": 8}],
        )

        deployments = await nomad.job.list_deployments("example")

        assert [d.id for d in deployments] == ["d2", "d1"]
        assert fake_api.last_request.url.params["all"] == "false"

    async def test_list_evaluations(self, nomad, fake_api):
        fake_api.add(
            "GET",
            "/v1/job/example/evaluations",
            [
                make_evaluation("e1", create_index=1),
                make_evaluation("e2", create_index=2),
            ],
        )

        evaluations = await nomad.job.list_evaluations("example")

        assert [e.id for e in evaluations] == ["e2", "e1"]

    async def test_deregister(self, nomad, fake_api):
        fake_api.add("DELETE", "/v1/job/example", {"EvalID": "eval-9"})

        response = await nomad.job.deregister(
            JobDeregisterRequest(job_id="example", purge=True)
        )

        assert response.eval_id == "eval-9"
        params = fake_api.last_request.url.params
        assert params["purge"] == "true"
        assert params["global"] == "false"
        assert params["no_shutdown_delay"] == "false"
        assert "eval_priority" not in params

    async def test_deregister_with_eval_priority(self, nomad, fake_api):
        fake_api.add("DELETE", "/v1/job/example", {"EvalID": "eval-9"})

        await nomad.job.deregister(
            JobDeregisterRequest(job_id="example", eval_priority=80, global_=True)
        )

        params = fake_api.last_request.url.params
        assert params["eval_priority"] == "80"
        assert params["global"] == "true"

    async def test_dispatch(self, nomad, fake_api):
        fake_api.add(
            "POST",
            "/v1/job/report/dispatch",
            {"DispatchedJobID": "report/dispatch-1", "EvalID": "eval-1"},
        )

        request = (
            JobDispatchRequest(job_id="report")
            .with_payload(b"input")
            .with_meta({"customer": "acme"})
            .with_id_prefix_template("acme")
        )
        response = await nomad.job.dispatch(
            request, opts=WriteOptions().with_idempotency_token("acme-1")
        )

        assert response.dispatched_job_id == "report/dispatch-1"
        assert fake_api.last_json() == {
            "JobID": "report",
            "Payload": "aW5wdXQ=",
            "Meta": {"customer": "acme"},
            "IdPrefixTemplate": "acme",
        }
        assert fake_api.last_request.url.params["idempotency_token"] == "acme-1"

    async def test_force_evaluation(self, nomad, fake_api):
        fake_api.add("POST", "/v1/job/example/evaluate", {"EvalID": "eval-2"})

        response = await nomad.job.force_evaluation(
            JobEvaluationForceRequest.new("example", force_reschedule=True)
        )

        assert response.eval_id == "eval-2"
        assert fake_api.last_json() == {
            "JobID": "example",
            "EvalOptions": {"ForceReschedule": True},
        }

    async def test_force_periodic(self, nomad, fake_api):
        fake_api.add("POST", "/v1/job/nightly/periodic/force", {"EvalID": "eval-3"})
        response = await nomad.job.force_periodic("nightly")
        assert response.eval_id == "eval-3"

    async def test_plan(self, nomad, fake_api):
        fake_api.add(
            "POST",
            "/v1/job/example/plan",
            {
                "JobModifyIndex": 0,
                "Diff": {
                    "Type": "Added",
                    "ID": "example",
                    "TaskGroups": [
                        {
                            "Type": "Added",
                            "Name": "web",
                            "Updates": {"create": 2},
                            "Objects": [
                                {
                                    "Type": "Added",
                                    "Name": "Update",
                                    "Objects": [{"Type": "Added", "Name": "Nested"}],
                                }
                            ],
                        }
                    ],
                },
                "Annotations": {
                    "DesiredTGUpdates": {"web": {"Place": 2}},
                },
                "FailedTGAllocs": None,
            },
        )

        response = await nomad.job.plan(JobPlanRequest(job=_example_job(), diff=True))

        assert response.diff.task_groups[0].updates == {"create": 2}
        assert response.diff.task_groups[0].objects[0].objects[0].name == "Nested"
        assert response.annotations.desired_tg_updates["web"].place == 2
        assert fake_api.last_json()["Diff"] is True

    async def test_plan_requires_job_id(self, nomad, fake_api):
        with pytest.raises(NomadInvalidInputError):
            await nomad.job.plan(JobPlanRequest(job=Job(name="no-id")))

        assert fake_api.requests == []

    async def test_validate(self, nomad, fake_api):
        fake_api.add(
            "POST",
            "/v1/validate/job",
            {
                "DriverConfigValidated": True,
                "ValidationErrors": ["group count must be positive"],
                "Error": "1 error occurred",
            },
        )

        response = await nomad.job.validate(JobValidateRequest(job=_example_job()))

        assert response.validation_errors == ["group count must be positive"]

    async def test_versions(self, nomad, fake_api):
        fake_api.add(
            "GET",
            "/v1/job/example/versions",
            {
                "Versions": [
                    {"ID": "example", "Version": 1},
                    {"ID": "example", "Version": 0},
                ],
                "Diffs": [{"Type": "Edited", "ID": "example"}],
            },
        )

        response = await nomad.job.versions("example", diffs=True)

        assert [job.version for job in response.versions] == [1, 0]
        assert response.diffs[0].type == "Edited"
        assert fake_api.last_request.url.params["diffs"] == "true"

    async def test_revert(self, nomad, fake_api):
        fake_api.add("POST", "/v1/job/example/revert", {"EvalID": "eval-4"})

        await nomad.job.revert(JobRevertRequest(job_id="example", job_version=0))

        assert fake_api.last_json() == {"JobID": "example", "JobVersion": 0}

    async def test_set_stability(self, nomad, fake_api):
        fake_api.add("POST", "/v1/job/example/stable", {"JobModifyIndex": 12})

        response = await nomad.job.set_stability(
            JobStabilityRequest(job_id="example", job_version=2, stable=True)
        )

        assert response.job_modify_index == 12
        assert fake_api.last_json() == {
            "JobID": "example",
            "JobVersion": 2,
            "Stable": True,
        }

    async def test_scale(self, nomad, fake_api):
        fake_api.add("POST", "/v1/job/example/scale", {"EvalID": "eval-5"})

        response = await nomad.job.scale(
            "example",
            ScalingRequest(count=3, target={"Group": "web"}, message="more traffic"),
        )

        assert response.eval_id == "eval-5"
        assert fake_api.last_json() == {
            "Count": 3,
            "Target": {"Group": "web"},
            "Message": "more traffic",
        }

    async def test_scale_status(self, nomad, fake_api):
        fake_api.add(
            "GET",
            "/v1/job/example/scale",
            {
                "JobID": "example",
                "Namespace": "default",
                "JobStopped": False,
                "TaskGroups": {
                    "web": {
                        "Desired": 3,
                        "Running": 2,
                        "Events": [{"Count": 3, "PreviousCount": 2, "Time": 1}],
                    }
                },
            },
        )

        status = await nomad.job.scale_status("example")

        assert status.task_groups["web"].desired == 3
        assert status.task_groups["web"].events[0].previous_count == 2
