"""Tests for the command line interface."""

import json
from pathlib import Path

from click.testing import CliRunner

from chat_archiver.cli import cli


class TestConvertCommand:
    def test_convert_defaults(self, sample_export):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("conversations.json").write_text(json.dumps(sample_export), encoding="utf-8")
            result = runner.invoke(cli, ["convert"])

            assert result.exit_code == 0, result.output
            output_dir = Path("claude_conversations_markdown")
            assert len(list(output_dir.glob("*.md"))) == 3
            assert Path("claude_schema.json").exists()
            assert "Conversion complete" in result.output

    def test_convert_options(self, sample_export, tmp_path: Path):
        source = tmp_path / "export.json"
        source.write_text(json.dumps(sample_export), encoding="utf-8")
        result = CliRunner().invoke(
            cli,
            [
                "convert",
                "--input", str(source),
                "--output-dir", str(tmp_path / "archive"),
                "--schema-file", str(tmp_path / "schema.json"),
            ],
        )
        assert result.exit_code == 0, result.output
        assert (tmp_path / "archive").is_dir()
        assert (tmp_path / "schema.json").exists()

    def test_missing_input_exits_nonzero(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["convert"])
        assert result.exit_code == 1
        assert "Fatal error" in result.output

    def test_unusable_output_dir_exits_with_help(self, sample_export, tmp_path: Path):
        source = tmp_path / "export.json"
        source.write_text(json.dumps(sample_export), encoding="utf-8")
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")

        result = CliRunner().invoke(
            cli,
            ["convert", "-i", str(source), "-o", str(blocker / "out"), "--schema-file", str(tmp_path / "s.json")],
        )
        assert result.exit_code == 1
        assert not isinstance(result.exception, OSError)
        assert "Fatal error" in result.output
        assert "Troubleshooting" in result.output

    def test_partial_failure_exit_code(self, tmp_path: Path):
        source = tmp_path / "export.json"
        records = [{"uuid": "ok", "name": "Fine", "chat_messages": []}, {"uuid": "bad", "chat_messages": 3}]
        source.write_text(json.dumps(records), encoding="utf-8")
        args = ["convert", "-i", str(source), "-o", str(tmp_path / "out"), "--schema-file", str(tmp_path / "s.json")]

        assert CliRunner().invoke(cli, args).exit_code == 0
        assert CliRunner().invoke(cli, args + ["--strict"]).exit_code == 1


class TestAnalyzeCommand:
    def test_usage_without_argument(self):
        result = CliRunner().invoke(cli, ["analyze"])
        assert result.exit_code == 1
        assert "Usage: chat-archiver analyze" in result.output

    def test_analyze_writes_report(self, sample_export, tmp_path: Path):
        source = tmp_path / "export.json"
        source.write_text(json.dumps(sample_export), encoding="utf-8")
        report = tmp_path / "report.json"

        result = CliRunner().invoke(cli, ["analyze", str(source), "--report", str(report)])
        assert result.exit_code == 0, result.output
        assert json.loads(report.read_text(encoding="utf-8"))["basic"]["total_messages"] == 3

    def test_analyze_invalid_json(self, tmp_path: Path):
        source = tmp_path / "export.json"
        source.write_text("{{", encoding="utf-8")
        result = CliRunner().invoke(cli, ["analyze", str(source), "--report", str(tmp_path / "r.json")])
        assert result.exit_code == 1
        assert "Verify the file is valid JSON" in result.output
