"""
Tests for the command-line interface.
"""

import json

import pytest

from unity_style_checker.checkers import RULE_IDS
from unity_style_checker.cli import build_parser, main


@pytest.fixture
def bad_brace(write_cs):
    """A file whose only problem is a formatting warning."""
    return write_cs("Bad.cs", "public class Bad{\n}\n")


@pytest.fixture
def bad_name(write_cs):
    return write_cs("Sample.cs", "/// <summary>Sample.</summary>\npublic class Sample\n{\n    private int myField;\n}\n")


class TestCheckCommand:

    def test_clean_file(self, player_path, capsys):
        assert main(["check", str(player_path)]) == 0
        out = capsys.readouterr().out
        assert out == "Summary: 0 error(s), 0 warning(s), 0 info in 1 file(s)\n"

    def test_error_finding_fails(self, bad_name, capsys):
        assert main(["check", str(bad_name)]) == 1
        out = capsys.readouterr().out
        assert ":4:5: error NamingCheck Private field 'myField'" in out

    def test_warnings_fail_only_when_strict(self, bad_brace, capsys):
        args = ["check", str(bad_brace), "--enable", "FormattingCheck"]
        assert main(args) == 0
        assert main(args + ["--strict"]) == 1

    def test_strict_from_config(self, bad_brace, tmp_path):
        config = tmp_path / "style.json"
        config.write_text(json.dumps({"strict": True, "rules": {"enabled": ["FormattingCheck"]}}), encoding="utf-8")
        assert main(["check", str(bad_brace), "--config", str(config)]) == 1

    def test_json_format(self, bad_name, capsys):
        main(["check", str(bad_name), "--format", "json"])
        data = json.loads(capsys.readouterr().out)
        assert data["summary"]["by_rule"] == {"NamingCheck": 1}
        assert data["findings"][0]["suggested_fix"] == "_myField"

    def test_markdown_format(self, bad_name, capsys):
        main(["check", str(bad_name), "--format", "markdown"])
        assert capsys.readouterr().out.startswith("# Unity C# Style Report")

    def test_json_report_file(self, bad_name, tmp_path, capsys):
        report = tmp_path / "report.json"
        main(["check", str(bad_name), "--json-report", str(report)])
        assert capsys.readouterr().out.startswith(str(bad_name.as_posix()))
        assert json.loads(report.read_text(encoding="utf-8"))["summary"]["errors"] == 1

    def test_directory_input(self, bad_name, bad_brace, tmp_path, capsys):
        assert main(["check", str(tmp_path), "--workers", "2"]) == 1
        assert "in 2 file(s)" in capsys.readouterr().out


class TestConfigErrors:
    """Unusable configuration or input exits with status 2."""

    def test_single_missing_input(self, tmp_path, capsys, caplog):
        assert main(["check", str(tmp_path / "Missing.cs")]) == 2
        assert capsys.readouterr().out == ""
        assert "Input path not found" in caplog.text

    def test_missing_in_batch_is_a_finding(self, player_path, tmp_path, capsys):
        assert main(["check", str(player_path), str(tmp_path / "Missing.cs")]) == 1
        assert "error IOError Could not read file" in capsys.readouterr().out

    def test_unreadable_root_directory(self, write_cs, tmp_path, capsys, caplog, lock_dir):
        write_cs("Locked/Bad.cs", "class bad { }\n")
        locked = lock_dir(tmp_path / "Locked")
        assert main(["check", str(locked)]) == 2
        assert capsys.readouterr().out == ""
        assert "Input directory is not readable" in caplog.text

    def test_unreadable_subdirectory_fails_the_run(self, write_cs, tmp_path, capsys, lock_dir):
        write_cs("Locked/Bad.cs", "class bad { }\n")
        lock_dir(tmp_path / "Locked")
        assert main(["check", str(tmp_path)]) == 1
        assert "error IOError Could not read directory" in capsys.readouterr().out

    def test_invalid_config_file(self, player_path, tmp_path):
        config = tmp_path / "style.json"
        config.write_text("{broken", encoding="utf-8")
        assert main(["check", str(player_path), "--config", str(config)]) == 2

    def test_unknown_rule(self, player_path, caplog):
        assert main(["check", str(player_path), "--enable", "NoSuchRule"]) == 2
        assert "NoSuchRule" in caplog.text

    def test_invalid_workers(self, player_path):
        assert main(["check", str(player_path), "--workers", "0"]) == 2


class TestRulesCommand:

    def test_lists_every_rule(self, capsys):
        assert main(["rules"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert [line.split()[0] for line in lines] == list(RULE_IDS)
        assert all("enabled" in line for line in lines)

    def test_reflects_config(self, tmp_path, capsys):
        config = tmp_path / "style.json"
        config.write_text(json.dumps({
            "rules": {"enabled": ["NamingCheck"], "NamingCheck": {"severity": "info"}},
        }), encoding="utf-8")
        assert main(["rules", "--config", str(config)]) == 0
        lines = {line.split()[0]: line.split() for line in capsys.readouterr().out.splitlines()}
        assert lines["NamingCheck"][1:3] == ["info", "enabled"]
        assert lines["FormattingCheck"][2] == "disabled"


class TestParser:

    def test_check_requires_paths(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["check"])

    def test_serve_defaults(self):
        args = build_parser().parse_args(["serve"])
        assert (args.host, args.port) == (None, None)
