"""
Tests for FileNameCheck.
"""

import pytest

from unity_style_checker.checkers.file_name_checker import base_name


class TestBaseName:

    @pytest.mark.parametrize("type_name,expected", [
        ("MonoBehaviour", "MonoBehaviour"),
        ("UnityEngine.MonoBehaviour", "MonoBehaviour"),
        ("Singleton<Player>", "Singleton"),
        ("Game.Core.Singleton<Game.Player>", "Singleton"),
    ])
    def test_base_name(self, type_name, expected):
        assert base_name(type_name) == expected


class TestFileName:

    def test_mismatched_monobehaviour(self, run_rule):
        findings = run_rule("public class Player : MonoBehaviour { }", "FileNameCheck", path="Assets/Enemy.cs")
        assert len(findings) == 1
        finding = findings[0]
        assert finding.message == "MonoBehaviour class 'Player' must be declared in 'Player.cs', not 'Enemy.cs'"
        assert finding.suggestion == "Player.cs"
        assert (finding.line, finding.column) == (1, 14)

    @pytest.mark.parametrize("text", [
        "public class Enemy : MonoBehaviour { }",
        "public class Player { }",
        "public class Player : IDamageable { }",
        "public struct Player { }",
        "namespace Game\n{\n    public class Enemy : UnityEngine.MonoBehaviour { }\n}\n",
    ])
    def test_not_reported(self, run_rule, text):
        assert run_rule(text, "FileNameCheck", path="Assets/Enemy.cs") == []

    def test_qualified_base(self, run_rule):
        findings = run_rule("public class Player : UnityEngine.MonoBehaviour { }", "FileNameCheck", path="Enemy.cs")
        assert [f.suggestion for f in findings] == ["Player.cs"]

    def test_in_memory_source_skipped(self, run_rule):
        assert run_rule("public class Player : MonoBehaviour { }", "FileNameCheck", path="<input>") == []

    def test_configured_base_types(self, run_rule):
        text = "public class Player : Singleton<Player> { }"
        findings = run_rule(text, "FileNameCheck", path="Enemy.cs", fileNameBaseTypes=["Singleton"])
        assert [f.message for f in findings] == [
            "Singleton class 'Player' must be declared in 'Player.cs', not 'Enemy.cs'"
        ]
