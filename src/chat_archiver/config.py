"""Configuration for the converter and the export analyzer."""

from dataclasses import dataclass
from pathlib import Path

DEFAULT_INPUT_FILE = Path("conversations.json")
DEFAULT_OUTPUT_DIR = Path("claude_conversations_markdown")
DEFAULT_SCHEMA_FILE = Path("claude_schema.json")
DEFAULT_REPORT_FILE = Path("claude_export_analysis.json")

CONVERSATION_URL_BASE = "https://claude.ai/chat/"
MODEL_LABEL = "Claude (version unknown)"

# MIME types we know how to name; anything else is saved as .txt
EXTENSION_MAP = {
    "text/plain": ".txt",
    "text/markdown": ".md",
    "text/html": ".html",
    "application/pdf": ".pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
}
DEFAULT_EXTENSION = ".txt"


@dataclass
class ConverterConfig:
    """Where the converter reads its export and writes its archive."""

    input_file: Path = DEFAULT_INPUT_FILE
    output_dir: Path = DEFAULT_OUTPUT_DIR
    schema_file: Path = DEFAULT_SCHEMA_FILE

    def __post_init__(self):
        self.input_file = Path(self.input_file)
        self.output_dir = Path(self.output_dir)
        self.schema_file = Path(self.schema_file)


@dataclass
class AnalyzerConfig:
    """Settings for the read-only export analyzer."""

    report_file: Path = DEFAULT_REPORT_FILE
    sample_limit: int = 10
    artifact_sample_limit: int = 5
    long_content_threshold: int = 1000
    artifact_hint_threshold: int = 500

    def __post_init__(self):
        self.report_file = Path(self.report_file)
