"""Tests for CLI."""

import json

import pytest

from declguard.cli.main import app


@pytest.fixture(autouse=True)
def _in_tmp_dir(tmp_path, monkeypatch):
    """Run each command from an empty project directory."""
    monkeypatch.chdir(tmp_path)


def _manifest(tmp_path, path, name):
    f = tmp_path / "one.json"
    f.write_text(json.dumps({
        "files": [{"path": path, "declarations": [{"kind": "interface", "name": name, "exported": True}]}]
    }))
    return str(f)


@pytest.fixture
def manifest_file(tmp_path):
    f = tmp_path / "decls.json"
    f.write_text(json.dumps({
        "files": [
            {
                "path": "src/types.ts",
                "declarations": [
                    {"kind": "interface", "name": "ButtonProps", "exported": True},
                    {"kind": "type-alias", "name": "UserId", "exported": True},
                ],
            },
            {
                "path": "src/models.d.ts",
                "declarations": [{"kind": "interface", "name": "User", "exported": True}],
            },
        ]
    }))
    return str(f)


@pytest.fixture
def clean_manifest(tmp_path):
    f = tmp_path / "clean.json"
    f.write_text(json.dumps({
        "files": [{"path": "src/a.ts", "declarations": [{"kind": "interface", "name": "AProps", "exported": True}]}]
    }))
    return str(f)


class TestValidateCommand:
    def test_validate_success(self, config_file, capsys):
        exit_code = app(["validate", str(config_file)])
        assert exit_code == 0
        captured = capsys.readouterr()
        assert "Valid" in captured.out
        assert "  + src/types/*" in captured.out
        assert "  - !src/types/legacy/*" in captured.out
        assert "Props, State" in captured.out

    def test_validate_nonexistent(self, capsys):
        exit_code = app(["validate", "/nonexistent/declguard.yaml"])
        assert exit_code == 1
        assert "Error" in capsys.readouterr().err

    def test_validate_bad_shape(self, tmp_path, capsys):
        f = tmp_path / "bad.yaml"
        f.write_text("allowedFilePatterns: 42\n")
        assert app(["validate", str(f)]) == 1


class TestLintCommand:
    def test_lint_clean(self, config_file, capsys):
        assert app(["lint", str(config_file)]) == 0
        assert "No issues found" in capsys.readouterr().out

    def test_lint_errors(self, tmp_path, capsys):
        f = tmp_path / "cfg.yaml"
        f.write_text('allowedFilePatterns: ["!src/*"]\nallowedTypeSuffixes: ["", Props, Props]\n')
        assert app(["lint", str(f)]) == 1
        out = capsys.readouterr().out
        assert "no_positive_patterns" in out
        assert "empty_suffix" in out
        assert "2 errors, 1 warning" in out


class TestMatchCommand:
    def test_match_allowed(self, capsys):
        assert app(["match", "src/types.d.ts"]) == 0
        out = capsys.readouterr().out
        assert "src/types.d.ts: allowed" in out
        assert "*.d.ts" in out

    def test_match_with_patterns(self, capsys):
        assert app(["match", "src/legacy/foo.ts", "--pattern", "src*", "--pattern", "!src/legacy*"]) == 0
        out = capsys.readouterr().out
        assert "not allowed" in out
        assert "negative matches: !src/legacy*" in out

    def test_match_with_config(self, config_file, capsys):
        assert app(["match", "src/types/user.ts", "--config", str(config_file)]) == 0
        assert "src/types/user.ts: allowed" in capsys.readouterr().out


class TestCheckCommand:
    def test_check_reports_violations(self, manifest_file, capsys):
        assert app(["check", manifest_file]) == 1
        out = capsys.readouterr().out
        assert 'Exported type "UserId"' in out
        assert "ButtonProps" not in out
        assert "1 violation in 2 files" in out

    def test_check_clean(self, clean_manifest, capsys):
        assert app(["check", clean_manifest]) == 0
        assert "No violations (1 files, 1 declarations)" in capsys.readouterr().out

    def test_check_json(self, manifest_file, capsys):
        assert app(["check", manifest_file, "--format", "json"]) == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload == [
            {
                "path": "src/types.ts",
                "messageKey": "noExportedType",
                "kind": "type-alias",
                "name": "UserId",
                "allowedPatterns": "*.d.ts",
            }
        ]

    def test_check_with_config(self, manifest_file, tmp_path, capsys):
        f = tmp_path / "cfg.yaml"
        f.write_text("allowedTypeSuffixes: [Id, Props]\n")
        assert app(["check", manifest_file, "--config", str(f)]) == 0

    def test_check_missing_manifest(self, capsys):
        assert app(["check", "/nonexistent.json"]) == 1
        assert "Error" in capsys.readouterr().err


class TestMisc:
    def test_init_prints_default_config(self, capsys):
        assert app(["init"]) == 0
        assert "allowedFilePatterns" in capsys.readouterr().out

    def test_no_command(self, capsys):
        assert app([]) == 1

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            app(["--version"])
        assert "declguard" in capsys.readouterr().out


class TestConfigDiscovery:
    def test_check_uses_cwd_config(self, tmp_path, capsys):
        (tmp_path / "declguard.yaml").write_text("allowedFilePatterns: ['src/*']\n")
        assert app(["check", _manifest(tmp_path, "src/a.ts", "User")]) == 0
        assert "No violations" in capsys.readouterr().out

    def test_check_uses_config_env_var(self, tmp_path, monkeypatch, capsys):
        cfg = tmp_path / "team.yaml"
        cfg.write_text("allowedFilePatterns: ['src/*']\n")
        monkeypatch.setenv("DECLGUARD_CONFIG", str(cfg))
        assert app(["check", _manifest(tmp_path, "src/a.ts", "User")]) == 0

    def test_check_applies_env_overrides(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("DECLGUARD_ALLOWED_TYPE_SUFFIXES", "Id,Props")
        assert app(["check", _manifest(tmp_path, "src/a.ts", "UserId")]) == 0

    def test_match_uses_cwd_config(self, tmp_path, capsys):
        (tmp_path / "declguard.yaml").write_text("allowedFilePatterns: ['src/*']\n")
        assert app(["match", "src/a.ts"]) == 0
        assert "src/a.ts: allowed" in capsys.readouterr().out

    def test_broken_cwd_config_is_reported(self, tmp_path, capsys):
        (tmp_path / "declguard.yaml").write_text("allowedFilePatterns: 42\n")
        assert app(["check", _manifest(tmp_path, "src/a.ts", "User")]) == 1
        assert "declguard.yaml" in capsys.readouterr().err


class TestLoggingFlags:
    def test_quiet_by_default(self, clean_manifest, capsys):
        assert app(["check", clean_manifest]) == 0
        assert capsys.readouterr().err == ""

    def test_verbose_json_logs_to_stderr(self, clean_manifest, capsys):
        assert app(["-v", "--log-format", "json", "check", clean_manifest]) == 0
        captured = capsys.readouterr()
        entries = [json.loads(line) for line in captured.err.splitlines()]
        summary = [e for e in entries if e["logger"] == "declguard.runner"]
        assert summary[0]["level"] == "info"
        assert summary[0]["files"] == 1
        assert summary[0]["violations"] == 0
        assert "No violations" in captured.out

    def test_debug_text_logs_carry_context(self, tmp_path, capsys):
        assert app(["-vv", "check", _manifest(tmp_path, "src/a.d.ts", "User")]) == 0
        err = capsys.readouterr().err
        assert "DEBUG" in err
        assert "file_path=src/a.d.ts" in err
        assert "patterns=['*.d.ts']" in err
