"""
Tests for runtime value lookups
"""

from telemetry_policy.runtime import (
    EnvironmentRuntime,
    StaticRuntime,
    get_integer,
    get_percentage,
    no_runtime,
)


class TestGetInteger:
    def test_parses_supported_values(self):
        runtime = StaticRuntime({"int": 7, "str": " 42 ", "float": 3.0, "bytes": b"9"})
        assert get_integer(runtime, "int", 0) == 7
        assert get_integer(runtime, "str", 0) == 42
        assert get_integer(runtime, "float", 0) == 3
        assert get_integer(runtime, "bytes", 0) == 9

    def test_falls_back_to_default(self):
        runtime = StaticRuntime(
            {
                "neg": -1,
                "text": "abc",
                "frac": 2.5,
                "flag": True,
                "empty": "",
                "superscript": "\u00b2",
                "arabic_indic": "\u0663",
                "bad_utf8": b"\xff",
            }
        )
        for key in ("neg", "text", "frac", "flag", "empty", "superscript", "arabic_indic", "bad_utf8", "missing"):
            assert get_integer(runtime, key, 11) == 11

    def test_empty_key_returns_default_without_lookup(self):
        calls = []
        assert get_integer(lambda key: calls.append(key), "", 5) == 5
        assert calls == []

    def test_percentage_clamped(self):
        runtime = StaticRuntime({"low": 30, "high": 1000})
        assert get_percentage(runtime, "low") == 30
        assert get_percentage(runtime, "high") == 100
        assert get_percentage(no_runtime, "missing") == 0


class TestStaticRuntime:
    def test_lookup(self):
        runtime = StaticRuntime({"a.b": 1})
        assert runtime("a.b") == 1
        assert runtime("c") is None

    def test_with_values_returns_new_snapshot(self):
        base = StaticRuntime({"a": 1})
        updated = base.with_values({"a": 2, "b": 3})
        assert base("a") == 1
        assert base("b") is None
        assert updated("a") == 2
        assert updated("b") == 3


class TestEnvironmentRuntime:
    def test_reads_prefixed_variable(self, monkeypatch):
        monkeypatch.setenv("TELEMETRY_POLICY_RUNTIME_ACCESS_LOG_SAMPLE_RATE", "25")
        runtime = EnvironmentRuntime()

        assert runtime.variable_name("access_log.sample-rate") == "TELEMETRY_POLICY_RUNTIME_ACCESS_LOG_SAMPLE_RATE"
        assert runtime("access_log.sample_rate") == "25"
        assert get_percentage(runtime, "access_log.sample_rate") == 25

    def test_missing_variable(self, monkeypatch):
        monkeypatch.delenv("TELEMETRY_POLICY_RUNTIME_NOT_SET", raising=False)
        assert EnvironmentRuntime()("not.set") is None

    def test_custom_prefix(self, monkeypatch):
        monkeypatch.setenv("RT_KEY", "1")
        assert EnvironmentRuntime(prefix="RT_")("key") == "1"
