"""Tests for end-to-end conversion runs."""

import json
from pathlib import Path

import pytest

from chat_archiver.batch import convert_records, run_conversion
from chat_archiver.exceptions import InputFileError, InputShapeError, OutputDirectoryError
from tests.conftest import FailingFileSystem, make_conversation, make_message


class TestConvertRecords:
    def test_converts_sample_export(self, sample_export, config, fs, fixed_now):
        summary = convert_records(sample_export, config, fs, fixed_now)

        assert summary.success_count == 3
        assert summary.error_count == 0
        assert summary.attachment_count == 1
        assert summary.schema_diff.status == "first_run"
        for filename in summary.written:
            assert (config.output_dir / filename).exists()
        assert config.schema_file.exists()

    def test_malformed_record_is_isolated(self, config, fs, fixed_now):
        records = [
            make_conversation(messages=[make_message("human", "hello")]),
            make_conversation(uuid="conv-bad", name="Broken", messages="not a list"),
        ]
        summary = convert_records(records, config, fs, fixed_now)

        assert summary.success_count == 1
        assert summary.error_count == 1
        assert summary.errors[0][0] == 1
        assert (config.output_dir / "2025-09-06_PythonApiDesign_2025-09-07.md").exists()

    def test_same_name_second_gets_time_suffix(self, config, fs, fixed_now):
        records = [
            make_conversation(uuid="first", messages=[make_message("human", "one")]),
            make_conversation(uuid="second", messages=[make_message("human", "two")]),
        ]
        summary = convert_records(records, config, fs, fixed_now)

        assert summary.written == [
            "2025-09-06_PythonApiDesign_2025-09-07.md",
            "2025-09-06_PythonApiDesign_2025-09-07T1407.md",
        ]
        first = (config.output_dir / summary.written[0]).read_text(encoding="utf-8")
        assert "Conversation ID: first" in first

    def test_zero_message_conversation(self, config, fs, fixed_now):
        summary = convert_records([make_conversation(name="Empty Chat")], config, fs, fixed_now)
        content = (config.output_dir / summary.written[0]).read_text(encoding="utf-8")
        assert "No messages found" in content
        assert not list(config.output_dir.glob("*_attachments"))

    def test_write_failure_counts_as_error(self, config, fixed_now):
        records = [make_conversation(name="Fails"), make_conversation(name="Works")]
        fs = FailingFileSystem({"2025-09-06_Fails_2025-09-07.md"})
        summary = convert_records(records, config, fs, fixed_now)
        assert summary.success_count == 1
        assert summary.error_count == 1
        assert "disk full" in summary.errors[0][1]

    def test_callback_per_record(self, sample_export, config, fs, fixed_now):
        seen = []
        convert_records(
            sample_export, config, fs, fixed_now, on_record=lambda i, doc, err: seen.append((i, err))
        )
        assert seen == [(0, None), (1, None), (2, None)]

    def test_non_list_input_is_fatal(self, config, fs):
        with pytest.raises(InputShapeError):
            convert_records({"uuid": "x"}, config, fs)
        assert not config.output_dir.exists()

    def test_output_dir_under_a_file_is_fatal(self, sample_export, config, fs, fixed_now):
        blocker = config.output_dir.parent / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        config.output_dir = blocker / "out"

        with pytest.raises(OutputDirectoryError) as excinfo:
            convert_records(sample_export, config, fs, fixed_now)
        assert excinfo.value.path == blocker / "out"


class TestRunConversion:
    def test_reads_configured_input(self, sample_export, config, fs, fixed_now):
        config.input_file.write_text(json.dumps(sample_export), encoding="utf-8")
        summary = run_conversion(config, fs, fixed_now)
        assert summary.success_count == 3

    def test_missing_input(self, config, fs):
        with pytest.raises(InputFileError):
            run_conversion(config, fs)

    def test_rerun_reports_unchanged_schema(self, sample_export, config, fs, fixed_now):
        config.input_file.write_text(json.dumps(sample_export), encoding="utf-8")
        run_conversion(config, fs, fixed_now)
        summary = run_conversion(config, fs, fixed_now)

        assert summary.schema_diff.status == "unchanged"
        # every document already exists, so each one is written under a suffixed name
        assert all(Path(name).stem.endswith("T1407") for name in summary.written)
