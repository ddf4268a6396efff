"""
Tests for the stdlib logging filter integration
"""

import logging

from telemetry_policy import AccessLogRecordFilter, FilterConfig, StaticRuntime
from telemetry_policy.filtering import (
    ComparisonOp,
    LogFilterEvaluator,
    RuntimeFilter,
    StatusCodeFilter,
    TraceableFilter,
)


def make_record(**attrs):
    record = logging.LogRecord(
        name="access",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg="request complete",
        args=(),
        exc_info=None,
    )
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


class TestAccessLogRecordFilter:
    def setup_method(self):
        self.filter = AccessLogRecordFilter(FilterConfig.create_error_config().create_evaluator())

    def test_plain_attributes(self):
        assert self.filter.filter(make_record(status_code=503)) is True
        assert self.filter.filter(make_record(status_code=200)) is False
        assert self.filter.filter(make_record(status_code=503, is_health_check=True)) is False

    def test_ctx_prefixed_attributes(self):
        assert self.filter.filter(make_record(ctx_status_code=500)) is True
        assert self.filter.filter(make_record(ctx_status_code=500, ctx_is_health_check=True)) is False

    def test_record_without_request_facts(self):
        assert self.filter.filter(make_record()) is False

    def test_context_for_record(self):
        request_id = "12345678-1234-a234-8234-123456789012"
        context = self.filter.context_for(make_record(duration_ms=40, ctx_request_id=request_id))

        assert context.status_code == 0
        assert context.duration_ms == 40
        assert context.request_id == request_id
        assert context.is_traceable is True

    def test_string_request_facts_are_coerced(self):
        assert self.filter.filter(make_record(status_code="503")) is True
        assert self.filter.filter(make_record(ctx_status_code=" 500 ")) is True
        assert self.filter.filter(make_record(status_code="200")) is False

        context = self.filter.context_for(make_record(status_code="502", duration_ms="12"))
        assert context.status_code == 502
        assert context.duration_ms == 12

    def test_unparseable_request_facts_count_as_zero(self):
        record = make_record(status_code="abc", duration_ms=[12], request_id=1234)
        context = self.filter.context_for(record)

        assert context.status_code == 0
        assert context.duration_ms == 0
        assert context.request_id == "1234"
        assert self.filter.filter(record) is False

    def test_attached_to_logger_with_string_status(self):
        logger = logging.getLogger("telemetry_policy.tests.access_strings")
        logger.setLevel(logging.INFO)
        logger.propagate = False
        handler = ListHandler()
        logger.addHandler(handler)
        logger.addFilter(self.filter)
        try:
            logger.info("failed", extra={"status_code": "503", "duration_ms": "nan"})
        finally:
            logger.removeFilter(self.filter)
            logger.removeHandler(handler)

        assert [r.getMessage() for r in handler.records] == ["failed"]

    def test_explicit_traceable_flag(self):
        record_filter = AccessLogRecordFilter(LogFilterEvaluator.build(TraceableFilter()))
        assert record_filter.filter(make_record(is_traceable=True)) is True
        assert record_filter.filter(make_record(is_traceable=False)) is False

    def test_runtime_lookup_is_passed_through(self):
        evaluator = LogFilterEvaluator.build(RuntimeFilter("access_log.sample"))
        on = AccessLogRecordFilter(evaluator, runtime_lookup=StaticRuntime({"access_log.sample": 100}))
        off = AccessLogRecordFilter(evaluator, runtime_lookup=StaticRuntime({"access_log.sample": 0}))

        assert on.filter(make_record(request_id="abc")) is True
        assert off.filter(make_record(request_id="abc")) is False

    def test_name_filter_still_applies(self):
        record_filter = AccessLogRecordFilter(
            LogFilterEvaluator.build(StatusCodeFilter.create(ComparisonOp.GE, 0)), name="other"
        )
        assert record_filter.filter(make_record(status_code=200)) is False

    def test_attached_to_logger(self):
        logger = logging.getLogger("telemetry_policy.tests.access")
        logger.setLevel(logging.INFO)
        logger.propagate = False
        handler = ListHandler()
        logger.addHandler(handler)
        logger.addFilter(self.filter)
        try:
            logger.info("ok", extra={"status_code": 200})
            logger.info("failed", extra={"status_code": 502})
            logger.info("health check", extra={"status_code": 503, "is_health_check": True})
        finally:
            logger.removeFilter(self.filter)
            logger.removeHandler(handler)

        assert [r.getMessage() for r in handler.records] == ["failed"]
