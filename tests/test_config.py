"""
Tests for configuration loading and lookups.
"""

import json

import pytest
from pydantic import ValidationError

from unity_style_checker.config import (
    DEFAULT_MEMBER_ORDER,
    MemberCategory,
    StyleConfig,
    check_rule_ids,
    config_from_dict,
    load_config,
)
from unity_style_checker.errors import ConfigError
from unity_style_checker.finding import Severity
from unity_style_checker.parser import DeclarationKind
from unity_style_checker.utils import CasePattern


@pytest.fixture
def write_config(tmp_path):
    def _write(data):
        path = tmp_path / "style.json"
        path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
        return path
    return _write


class TestLoading:

    def test_defaults(self):
        config = load_config(None)
        assert config.extensions == (".cs",)
        assert config.strict is False
        assert config.workers is None
        assert config.member_order == DEFAULT_MEMBER_ORDER
        assert config.bool_prefixes == ("is", "has", "can")

    def test_camel_case_keys(self, write_config):
        config = load_config(write_config({
            "strict": True,
            "excludeDirs": ["Plugins"],
            "boolPrefixes": ["is", "should"],
            "formatting": {"requireBraces": False},
            "rules": {"enabled": ["NamingCheck"], "NamingCheck": {"severity": "WARNING"}},
        }))
        assert config.strict is True
        assert config.exclude_dirs == ("Plugins",)
        assert config.bool_prefixes == ("is", "should")
        assert config.formatting.require_braces is False
        assert config.formatting.space_after_comma is True
        assert config.rules.enabled == ("NamingCheck",)
        assert config.severity_for("NamingCheck", Severity.ERROR) == Severity.WARNING

    def test_extensions_normalized(self):
        assert config_from_dict({"extensions": ["CS", ".Cs"]}).extensions == (".cs", ".cs")

    @pytest.mark.parametrize("data", [
        "{not json",
        "[]",
        {"unknownKey": 1},
        {"workers": 0},
        {"extensions": []},
        {"rules": {"NamingCheck": {"severity": "fatal"}}},
        {"memberOrder": ["field", "field"]},
        {"memberOrder": ["fields"]},
        {"namingTable": [{"kind": "field", "modifiers": ["privet"], "pattern": "camelCase"}]},
        {"namingTable": [{"kind": "field", "pattern": "kebab-case"}]},
    ])
    def test_invalid(self, write_config, data):
        with pytest.raises(ConfigError):
            load_config(write_config(data))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.json")

    def test_frozen(self):
        config = StyleConfig()
        with pytest.raises(ValidationError):
            config.strict = True


class TestLookups:

    @pytest.mark.parametrize("kind,modifiers,expected", [
        (DeclarationKind.FIELD, {"private"}, CasePattern.UNDERSCORE_CAMEL),
        (DeclarationKind.FIELD, {"private", "const"}, CasePattern.SNAKE),
        (DeclarationKind.FIELD, {"public", "static"}, CasePattern.PASCAL),
        (DeclarationKind.FIELD, {"private", "static", "readonly"}, CasePattern.PASCAL),
        (DeclarationKind.FIELD, {"private", "readonly"}, CasePattern.CAMEL),
        (DeclarationKind.FIELD, {"public", "readonly"}, CasePattern.PASCAL),
        (DeclarationKind.PROPERTY, {"protected"}, CasePattern.PASCAL),
        (DeclarationKind.INTERFACE, {"public"}, CasePattern.INTERFACE),
        (DeclarationKind.CONSTRUCTOR, {"public"}, None),
    ])
    def test_naming_pattern(self, config, kind, modifiers, expected):
        assert config.naming_pattern(kind, modifiers) == expected

    def test_more_specific_user_entry_wins(self):
        config = config_from_dict({"namingTable": [
            {"kind": "field", "modifiers": ["private", "static"], "pattern": "UPPER_SNAKE_CASE"},
        ]})
        assert config.naming_pattern(DeclarationKind.FIELD, {"private", "static"}) == CasePattern.UPPER_SNAKE
        assert config.naming_pattern(DeclarationKind.FIELD, {"private"}) == CasePattern.UNDERSCORE_CAMEL

    @pytest.mark.parametrize("namespace,group", [
        ("System", 0),
        ("System.Collections.Generic", 0),
        ("Systems.Custom", 2),
        ("UnityEngine.UI", 1),
        ("Unity.Mathematics", 1),
        ("Game.Core", 2),
    ])
    def test_using_group(self, config, namespace, group):
        assert config.using_group(namespace) == group

    def test_using_group_names(self, config):
        assert [config.using_group_name(i) for i in range(3)] == ["System", "UnityEngine/UnityEditor/Unity", "other"]

    def test_partial_member_order_is_completed(self):
        config = config_from_dict({"memberOrder": ["method", "field"]})
        assert config.member_order[:2] == (MemberCategory.METHOD, MemberCategory.FIELD)
        assert set(config.member_order) == set(MemberCategory)
        assert config.member_rank(MemberCategory.SERIALIZED_FIELD) == 2

    def test_is_enabled(self):
        config = config_from_dict({"rules": {"enabled": ["NamingCheck"]}})
        assert config.is_enabled("NamingCheck")
        assert not config.is_enabled("FormattingCheck")
        assert StyleConfig().is_enabled("FormattingCheck")

    def test_check_rule_ids(self):
        config = config_from_dict({"rules": {"enabled": ["NamingCheck", "Bogus"]}})
        with pytest.raises(ConfigError, match="Bogus"):
            check_rule_ids(config, ["NamingCheck"])
        check_rule_ids(StyleConfig(), ["NamingCheck"])
