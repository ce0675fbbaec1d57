import pytest
from pydantic import ValidationError

from nomad_api.options import QueryOptions, WriteOptions


class TestQueryOptions:
    def test_empty_options_send_nothing(self):
        opts = QueryOptions()
        assert opts.query_params() == {}
        assert opts.request_headers() == {}

    def test_builder_returns_same_instance(self):
        opts = QueryOptions()
        assert opts.with_region("eu").with_namespace("batch") is opts
        assert opts.region == "eu"
        assert opts.namespace == "batch"

    def test_all_query_params(self):
        opts = (
            QueryOptions()
            .with_region("eu")
            .with_namespace("batch")
            .with_allow_stale(True)
            .with_wait_index(42)
            .with_wait_time(30)
            .with_prefix("web")
            .with_filter('Status == "running"')
            .with_per_page(20)
            .with_next_token("abc")
            .with_reverse(False)
        )

        assert opts.query_params() == {
            "region": "eu",
            "namespace": "batch",
            "stale": "true",
            "index": "42",
            "wait": "30s",
            "prefix": "web",
            "filter": 'Status == "running"',
            "per_page": "20",
            "next_token": "abc",
            "reverse": "false",
        }

    def test_extra_params_are_merged(self):
        opts = QueryOptions().with_region("eu").with_params({"meta": "true"})
        assert opts.query_params() == {"region": "eu", "meta": "true"}

    def test_auth_token_header(self):
        opts = QueryOptions().with_auth_token("per-call-token")
        assert opts.request_headers() == {"X-Nomad-Token": "per-call-token"}

    def test_extra_headers_are_copied(self):
        headers = {"X-Request-ID": "1"}
        opts = QueryOptions().with_headers(headers).with_auth_token("t")

        result = opts.request_headers()

        assert result == {"X-Request-ID": "1", "X-Nomad-Token": "t"}
        assert headers == {"X-Request-ID": "1"}

    def test_negative_wait_index_is_rejected(self):
        with pytest.raises(ValueError):
            QueryOptions(wait_index=-1)

    def test_builders_validate_values(self):
        opts = QueryOptions()

        with pytest.raises(ValidationError):
            opts.with_wait_time(-1)

        assert opts.wait_time is None


class TestWriteOptions:
    def test_empty_options_send_nothing(self):
        opts = WriteOptions()
        assert opts.query_params() == {}
        assert opts.request_headers() == {}

    def test_query_params(self):
        opts = (
            WriteOptions()
            .with_region("eu")
            .with_namespace("batch")
            .with_idempotency_token("dispatch-1")
        )
        assert opts.query_params() == {
            "region": "eu",
            "namespace": "batch",
            "idempotency_token": "dispatch-1",
        }

    def test_headers(self):
        opts = WriteOptions().with_headers({"X-Request-ID": "1"}).with_auth_token("t")
        assert opts.request_headers() == {"X-Request-ID": "1", "X-Nomad-Token": "t"}

    def test_builders_validate_values(self):
        with pytest.raises(ValidationError):
            WriteOptions().with_region(["eu"])
