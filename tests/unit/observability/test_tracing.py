"""Tests for tracing setup and the trace_span decorator."""

import inspect

import pytest
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from studyrag.observability import init_tracer, is_tracing_enabled, shutdown_tracer, trace_span


@pytest.fixture
def exporter():
    exporter = InMemorySpanExporter()
    init_tracer(service_name="studyrag-test", exporter=exporter)
    yield exporter
    shutdown_tracer()


@trace_span("test.sync", attributes={"component": "test"})
def add(a, b):
    return a + b


@trace_span("test.async")
async def fail():
    raise RuntimeError("boom")


class TestTraceSpan:

    def test_disabled_by_default(self):
        assert not is_tracing_enabled()
        assert add(1, 2) == 3

    def test_sync_span_recorded(self, exporter):
        assert add(2, 3) == 5

        spans = exporter.get_finished_spans()
        assert [s.name for s in spans] == ["test.sync"]
        assert spans[0].attributes["component"] == "test"

    @pytest.mark.asyncio
    async def test_async_error_recorded(self, exporter):
        with pytest.raises(RuntimeError):
            await fail()

        span = exporter.get_finished_spans()[0]
        assert span.name == "test.async"
        assert span.status.status_code == StatusCode.ERROR
        assert span.events[0].name == "exception"

    def test_wrapper_kind_follows_function(self):
        assert inspect.iscoroutinefunction(fail)
        assert not inspect.iscoroutinefunction(add)

    def test_shutdown_disables(self, exporter):
        shutdown_tracer()
        assert not is_tracing_enabled()
