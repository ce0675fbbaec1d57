import json
from collections import defaultdict
from typing import Any

import httpx
import pytest

from nomad_api import Config, Nomad


@pytest.fixture
def anyio_backend():
    return "asyncio"


class FakeNomadAPI:
    """An in-memory stand-in for the Nomad HTTP API.

    Responses are registered per method and path. Registering several
    responses for the same route returns them in order, the last one
    repeating. A response may also be an exception, which is raised from the
    transport as if the connection failed.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[Any]] = defaultdict(list)

    def add(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        *,
        status_code: int = 200,
        text: str | None = None,
    ) -> "FakeNomadAPI":
        if text is not None:
            response = httpx.Response(status_code, text=text)
        else:
            response = httpx.Response(status_code, json=json_body)
        self._routes[(method, path)].append(response)
        return self

    def add_error(self, method: str, path: str, error: Exception) -> "FakeNomadAPI":
        self._routes[(method, path)].append(error)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responses = self._routes.get((request.method, request.url.path))
        if not responses:
            return httpx.Response(404, text="no route registered")

        response = responses.pop(0) if len(responses) > 1 else responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def fake_api():
    return FakeNomadAPI()


def _make_nomad_client(fake_api: FakeNomadAPI, **config: Any) -> Nomad:
    """Builds a client whose requests are answered by ``fake_api``."""
    return Nomad(Config(**config), transport=httpx.MockTransport(fake_api))


@pytest.fixture
def make_nomad_client(fake_api):
    def _make(**config: Any) -> Nomad:
        return _make_nomad_client(fake_api, **config)

    return _make


@pytest.fixture
def nomad(fake_api):
    """A client for the default agent address backed by ``fake_api``."""
    return _make_nomad_client(fake_api)


def make_evaluation(
    eval_id: str = "eval-123",
    status: str = "complete",
    *,
    failed_tg_allocs: dict | None = None,
    next_eval: str = "",
    status_description: str = "",
    create_index: int = 10,
) -> dict:
    return {
        "ID": eval_id,
        "JobID": "example",
        "Namespace": "default",
        "Type": "service",
        "TriggeredBy": "job-register",
        "Status": status,
        "StatusDescription": status_description,
        "FailedTGAllocs": failed_tg_allocs,
        "NextEval": next_eval,
        "CreateIndex": create_index,
        "ModifyIndex": create_index,
    }


def make_allocation(
    alloc_id: str = "alloc-abc123",
    client_status: str = "complete",
    create_index: int = 10,
) -> dict:
    return {
        "ID": alloc_id,
        "EvalID": "eval-123",
        "Name": "example.web[0]",
        "NodeID": "node-1",
        "JobID": "example",
        "TaskGroup": "web",
        "DesiredStatus": "run",
        "ClientStatus": client_status,
        "TaskStates": {
            "server": {
                "State": "dead",
                "Failed": False,
                "Events": [{"Type": "Terminated", "ExitCode": 0}],
            }
        },
        "CreateIndex": create_index,
        "ModifyIndex": create_index,
    }
