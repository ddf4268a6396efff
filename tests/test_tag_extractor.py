"""
Tests for stat tag extraction
"""

import pytest

from telemetry_policy.errors import DuplicateTagError, InvalidTagRuleError
from telemetry_policy.tagging import (
    DEFAULT_TAG_CATALOG,
    ExtractionResult,
    TagExtractor,
    TagNames,
    TagRule,
)

USER_AGENT_RULE = TagRule("envoy.http_user_agent", r"^http(?=\.).*?\.user_agent\.((.+?)\.)\w+?$")
CONN_MANAGER_RULE = TagRule("envoy.http_conn_manager_prefix", r"^http\.((.*?)\.)")


class TestTagRule:
    def test_from_dict_with_proto_field_names(self):
        rule = TagRule.from_dict({"tag_name": "envoy.cluster_name", "regex": r"^cluster\.((.+?)\.)"})
        assert rule.name == "envoy.cluster_name"
        assert rule.pattern == r"^cluster\.((.+?)\.)"

    def test_from_dict_empty_regex_means_default(self):
        rule = TagRule.from_dict({"tag_name": "envoy.cluster_name", "regex": ""})
        assert rule.pattern is None

    def test_from_dict_with_short_field_names(self):
        rule = TagRule.from_dict({"name": "custom", "pattern": r"(x)"})
        assert rule == TagRule("custom", r"(x)")

    def test_to_dict(self):
        assert TagRule("a").to_dict() == {"tag_name": "a"}
        assert TagRule("a", "(b)").to_dict() == {"tag_name": "a", "regex": "(b)"}


class TestTagExtractor:
    def test_single_rule_strips_first_group_and_uses_second_as_value(self):
        extractor = TagExtractor.build(
            [TagRule("envoy.cluster_name", r"^cluster\.((.+?)\.)")], use_defaults=False
        )

        result = extractor.extract("cluster.foo_cluster.upstream_rq_timeout")

        assert isinstance(result, ExtractionResult)
        assert result.tag_extracted_name == "cluster.upstream_rq_timeout"
        assert result.tags == {"envoy.cluster_name": "foo_cluster"}

    def test_rules_apply_in_order_to_shortened_name(self):
        extractor = TagExtractor.build([USER_AGENT_RULE, CONN_MANAGER_RULE], use_defaults=False)

        result = extractor.extract("http.connection_manager_1.user_agent.ios.downstream_cx_total")

        assert result.tag_extracted_name == "http.user_agent.downstream_cx_total"
        assert result.tags == {
            "envoy.http_user_agent": "ios",
            "envoy.http_conn_manager_prefix": "connection_manager_1",
        }

    def test_reversed_order_still_extracts_both_tags(self):
        extractor = TagExtractor.build([CONN_MANAGER_RULE, USER_AGENT_RULE], use_defaults=False)

        result = extractor.extract("http.connection_manager_1.user_agent.ios.downstream_cx_total")

        # the conn manager prefix is gone before the user agent rule runs,
        # but the user agent rule does not depend on it
        assert result.tag_extracted_name == "http.user_agent.downstream_cx_total"
        assert result.tags["envoy.http_conn_manager_prefix"] == "connection_manager_1"

    def test_earlier_rule_can_consume_text_later_rule_needs(self):
        extractor = TagExtractor.build(
            [
                TagRule("first", r"^a\.((b)\.)"),
                TagRule("second", r"^a\.b\.((c)\.)"),
            ],
            use_defaults=False,
        )

        result = extractor.extract("a.b.c.d")

        assert result.tag_extracted_name == "a.c.d"
        assert result.tags == {"first": "b"}

    def test_no_match_returns_name_unchanged(self):
        extractor = TagExtractor.build(
            [TagRule("envoy.cluster_name", r"^cluster\.((.+?)\.)")], use_defaults=False
        )

        result = extractor.extract("server.uptime")

        assert result.tag_extracted_name == "server.uptime"
        assert result.tags == {}

    def test_extract_is_idempotent_on_unmatched_output(self):
        extractor = TagExtractor.build()
        first = extractor.extract("server.live")
        second = extractor.extract(first.tag_extracted_name)
        assert second == first

    def test_single_group_is_both_removed_and_value(self):
        extractor = TagExtractor.build([TagRule("suffix", r"(\.v\d+)$")], use_defaults=False)

        result = extractor.extract("api.requests.v2")

        assert result.tag_extracted_name == "api.requests"
        assert result.tags == {"suffix": ".v2"}

    def test_unmatched_second_group_falls_back_to_first(self):
        extractor = TagExtractor.build([TagRule("t", r"^foo\.((bar)?baz\.)")], use_defaults=False)

        result = extractor.extract("foo.baz.total")

        assert result.tag_extracted_name == "foo.total"
        assert result.tags == {"t": "baz."}

    def test_optional_first_group_that_did_not_match_is_skipped(self):
        extractor = TagExtractor.build([TagRule("t", r"^a(\.b)?")], use_defaults=False)

        result = extractor.extract("a.c")

        assert result.tag_extracted_name == "a.c"
        assert result.tags == {}

    def test_extra_groups_are_ignored(self):
        extractor = TagExtractor.build([TagRule("t", r"^x\.((y)(z))\.")], use_defaults=False)

        result = extractor.extract("x.yz.total")

        assert result.tag_extracted_name == "x..total"
        assert result.tags == {"t": "y"}

    def test_extract_tag(self):
        extractor = TagExtractor.build()
        assert extractor.extract_tag("cluster.foo.upstream_cx_total", TagNames.CLUSTER_NAME) == "foo"
        assert extractor.extract_tag("server.live", TagNames.CLUSTER_NAME) is None

    def test_input_string_is_not_modified_and_results_are_independent(self):
        extractor = TagExtractor.build()
        name = "cluster.foo.upstream_rq_503"

        first = extractor.extract(name)
        first.tags["extra"] = "x"
        second = extractor.extract(name)

        assert name == "cluster.foo.upstream_rq_503"
        assert "extra" not in second.tags


class TestTagExtractorBuild:
    def test_defaults_come_before_custom_rules(self):
        extractor = TagExtractor.build([TagRule("custom", r"^custom\.((.+?)\.)")])

        assert extractor.tag_names[: len(DEFAULT_TAG_CATALOG)] == DEFAULT_TAG_CATALOG.names()
        assert extractor.tag_names[-1] == "custom"
        assert len(extractor) == len(DEFAULT_TAG_CATALOG) + 1

    def test_without_defaults_only_custom_rules(self):
        extractor = TagExtractor.build([TagRule("custom", r"(x)")], use_defaults=False)
        assert extractor.tag_names == ["custom"]

    def test_custom_name_colliding_with_default_is_rejected(self):
        with pytest.raises(DuplicateTagError) as exc_info:
            TagExtractor.build([TagRule(TagNames.CLUSTER_NAME, r"^cluster\.((.+?)\.)")])
        assert exc_info.value.name == TagNames.CLUSTER_NAME

    def test_same_custom_name_twice_is_rejected(self):
        with pytest.raises(DuplicateTagError):
            TagExtractor.build([TagRule("t", "(a)"), TagRule("t", "(b)")], use_defaults=False)

    def test_rule_without_pattern_uses_catalog_regex(self):
        extractor = TagExtractor.build([TagRule(TagNames.CLUSTER_NAME)], use_defaults=False)

        result = extractor.extract("cluster.foo.upstream_cx_total")

        assert result.tags == {TagNames.CLUSTER_NAME: "foo"}
        assert extractor.rules[0].regex.pattern == DEFAULT_TAG_CATALOG.get(TagNames.CLUSTER_NAME).pattern

    def test_rule_without_pattern_and_unknown_name_is_rejected(self):
        with pytest.raises(InvalidTagRuleError, match="no default regex"):
            TagExtractor.build([TagRule("not.a.default")], use_defaults=False)

    def test_regex_without_capture_group_is_rejected(self):
        with pytest.raises(InvalidTagRuleError, match="no capture group"):
            TagExtractor.build([TagRule("t", r"^cluster\.")], use_defaults=False)

    def test_invalid_regex_is_rejected(self):
        with pytest.raises(InvalidTagRuleError, match="invalid regex"):
            TagExtractor.build([TagRule("t", r"((")], use_defaults=False)

    def test_empty_name_is_rejected(self):
        with pytest.raises(InvalidTagRuleError, match="empty"):
            TagExtractor.build([TagRule("", r"(a)")], use_defaults=False)

    def test_reduced_catalog_can_be_injected(self):
        catalog = DEFAULT_TAG_CATALOG.subset([TagNames.CLUSTER_NAME])
        extractor = TagExtractor.build(catalog=catalog)

        assert extractor.tag_names == [TagNames.CLUSTER_NAME]
        # a name from the full catalog is free to use as a custom tag
        TagExtractor.build([TagRule(TagNames.HTTP_USER_AGENT, "(x)")], catalog=catalog)
