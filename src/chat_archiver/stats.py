"""Statistics over a Claude export, for the read-only analyzer."""

import json
import logging
import math
import re
from collections import Counter
from pathlib import Path

from .config import AnalyzerConfig
from .exceptions import InputFileError
from .formatting import format_file_size, parse_timestamp, utc_now
from .keypaths import collect_record_key_paths
from .parser import ARTIFACT_TOOL_NAME, load_export
from .storage import DiskFileSystem, FileSystem

logger = logging.getLogger(__name__)

CODE_BLOCK_RE = re.compile(r"```[\s\S]*?```")


def _messages(conv) -> list:
    messages = conv.get("chat_messages") if isinstance(conv, dict) else None
    return [m for m in messages if isinstance(m, dict)] if isinstance(messages, list) else []


def _non_blank(value) -> bool:
    return isinstance(value, str) and bool(value.strip())


def frequency_map(items) -> dict[str, int]:
    """Count occurrences, most common first."""
    return dict(Counter(str(item) for item in items).most_common())


def analyze_basic_structure(conversations: list) -> dict:
    """Conversation and message counts, date range and naming."""
    total_conversations = len(conversations)
    total_messages = sum(len(_messages(conv)) for conv in conversations)

    dates = sorted(
        dt
        for dt in (parse_timestamp(conv.get("created_at")) for conv in conversations if isinstance(conv, dict))
        if dt is not None
    )
    date_range = None
    if dates:
        span = dates[-1] - dates[0]
        date_range = {
            "earliest": dates[0].isoformat(),
            "latest": dates[-1].isoformat(),
            "span_days": math.ceil(span.total_seconds() / 86400),
        }

    named = sum(1 for conv in conversations if isinstance(conv, dict) and _non_blank(conv.get("name")))

    return {
        "total_conversations": total_conversations,
        "total_messages": total_messages,
        "avg_messages_per_conversation": round(total_messages / total_conversations, 1)
        if total_messages
        else 0,
        "date_range": date_range,
        "named_conversations": named,
        "unnamed_conversations": total_conversations - named,
        "conversations_with_summary": sum(
            1 for conv in conversations if isinstance(conv, dict) and _non_blank(conv.get("summary"))
        ),
    }


def analyze_attachments(conversations: list, sample_limit: int = 10) -> dict:
    """Attachment counts, MIME types, sizes and a few raw samples."""
    total = 0
    conversations_with = 0
    messages_with = 0
    types = []
    sizes = []
    samples = []

    for conv in conversations:
        has_attachments = False
        for message in _messages(conv):
            attachments = message.get("attachments")
            if not isinstance(attachments, list) or not attachments:
                continue
            has_attachments = True
            messages_with += 1
            total += len(attachments)

            for attachment in attachments:
                if not isinstance(attachment, dict):
                    continue
                if len(samples) < sample_limit:
                    samples.append({
                        "conversation_name": conv.get("name") or "Untitled",
                        "message_sender": message.get("sender"),
                        "attachment_structure": list(attachment.keys()),
                        "attachment_data": attachment,
                    })
                file_type = attachment.get("file_type") or attachment.get("type")
                if file_type:
                    types.append(file_type)
                size = attachment.get("file_size") or attachment.get("size")
                if isinstance(size, (int, float)) and not isinstance(size, bool):
                    sizes.append(size)

        if has_attachments:
            conversations_with += 1

    total_bytes = sum(sizes)
    return {
        "total_attachments": total,
        "conversations_with_attachments": conversations_with,
        "messages_with_attachments": messages_with,
        "attachment_types": frequency_map(types),
        "attachment_sizes": {
            "count": len(sizes),
            "total_bytes": total_bytes,
            "avg_size": total_bytes / len(sizes) if sizes else 0,
        },
        "sample_attachments": samples,
    }


def analyze_artifacts(conversations: list, config: AnalyzerConfig | None = None) -> dict:
    """Heuristic counts of code blocks, long text and artifact tool calls."""
    config = config or AnalyzerConfig()
    potential = 0
    code_blocks = 0
    long_blocks = 0
    tool_artifacts = 0
    content_types = []
    samples = []

    for conv in conversations:
        for message in _messages(conv):
            content = message.get("content")
            for block in content if isinstance(content, list) else []:
                if not isinstance(block, dict):
                    continue
                block_type = block.get("type")
                if block_type:
                    content_types.append(block_type)

                if block_type == "tool_use" and block.get("name") == ARTIFACT_TOOL_NAME:
                    tool_artifacts += 1

                text = block.get("text")
                if block_type != "text" or not _non_blank(text):
                    continue

                matches = CODE_BLOCK_RE.findall(text)
                code_blocks += len(matches)
                if len(text) > config.long_content_threshold:
                    long_blocks += 1

                if "```" in text or "<" in text or len(text) > config.artifact_hint_threshold:
                    potential += 1
                    if len(samples) < config.artifact_sample_limit:
                        samples.append({
                            "conversation_name": conv.get("name") or "Untitled",
                            "message_sender": message.get("sender"),
                            "content_length": len(text),
                            "has_code_blocks": bool(matches),
                            "text_preview": text[:200] + ("..." if len(text) > 200 else ""),
                        })

            # legacy flat text field
            legacy = message.get("text")
            if isinstance(legacy, str):
                code_blocks += len(CODE_BLOCK_RE.findall(legacy))
                if len(legacy) > config.long_content_threshold:
                    long_blocks += 1

    return {
        "potential_artifacts": potential,
        "code_blocks_found": code_blocks,
        "long_content_blocks": long_blocks,
        "tool_artifacts": tool_artifacts,
        "content_types": frequency_map(content_types),
        "sample_artifacts": samples,
    }


def analyze_schema(conversations: list) -> dict:
    """Field inventory per level, plus the full dotted key-path list."""
    conversation_fields = set()
    message_fields = set()
    content_fields = set()
    attachment_fields = set()
    account_fields = set()

    for conv in conversations:
        if not isinstance(conv, dict):
            continue
        conversation_fields.update(conv.keys())
        if isinstance(conv.get("account"), dict):
            account_fields.update(f"account.{key}" for key in conv["account"])

        for message in _messages(conv):
            message_fields.update(message.keys())
            content = message.get("content")
            for block in content if isinstance(content, list) else []:
                if isinstance(block, dict):
                    content_fields.update(f"content.{key}" for key in block)
            attachments = message.get("attachments")
            for attachment in attachments if isinstance(attachments, list) else []:
                if isinstance(attachment, dict):
                    attachment_fields.update(f"attachments.{key}" for key in attachment)

    groups = [conversation_fields, message_fields, content_fields, attachment_fields, account_fields]
    return {
        "conversation_fields": sorted(conversation_fields),
        "message_fields": sorted(message_fields),
        "content_fields": sorted(content_fields),
        "attachment_fields": sorted(attachment_fields),
        "account_fields": sorted(account_fields),
        "total_unique_fields": sum(len(g) for g in groups),
        "key_paths": collect_record_key_paths(conversations),
    }


def assess_conversion_readiness(results: dict) -> dict:
    """What will and will not survive conversion, based on the other sections."""
    issues = []
    opportunities = []
    recommendations = []

    total_attachments = results["attachments"]["total_attachments"]
    if total_attachments > 0:
        issues.append(
            f"{total_attachments} attachments found - only extracted text content is preserved in the export"
        )
        recommendations.append("Keep converted files and their attachment folders together")

    code_blocks = results["artifacts"]["code_blocks_found"]
    if code_blocks > 0:
        opportunities.append(f"{code_blocks} code blocks found - preserved as-is in markdown")

    tool_artifacts = results["artifacts"]["tool_artifacts"]
    if tool_artifacts > 0:
        opportunities.append(f"{tool_artifacts} artifacts found - rendered as titled code blocks")

    unnamed = results["basic"]["unnamed_conversations"]
    if unnamed > 0:
        issues.append(f"{unnamed} conversations without titles - will get generic filenames")
        recommendations.append("Consider adding conversation summaries to filename generation")

    if len(results["schema"]["content_fields"]) > 1:
        opportunities.append("Rich content structure detected - good preservation potential")

    return {
        "conversion_feasibility": "HIGH",
        "potential_issues": issues,
        "opportunities": opportunities,
        "recommendations": recommendations,
        "estimated_output_files": results["basic"]["total_conversations"],
        "estimated_total_size": "Cannot estimate without content analysis",
    }


def analyze_conversations(conversations: list, config: AnalyzerConfig | None = None) -> dict:
    """Run every analysis over already-decoded records."""
    config = config or AnalyzerConfig()
    results = {
        "basic": analyze_basic_structure(conversations),
        "attachments": analyze_attachments(conversations, config.sample_limit),
        "artifacts": analyze_artifacts(conversations, config),
        "schema": analyze_schema(conversations),
    }
    results["conversion_assessment"] = assess_conversion_readiness(results)
    return results


def analyze_export(
    path: Path,
    config: AnalyzerConfig | None = None,
    fs: FileSystem | None = None,
) -> dict:
    """Load an export file and analyze it. The input file is never modified."""
    fs = fs or DiskFileSystem()
    path = Path(path)
    conversations = load_export(path, fs)
    try:
        size = fs.size(path)
    except OSError as e:
        raise InputFileError(path, f"Could not read input file ({e})") from e

    results = {
        "file_info": {
            "path": str(path),
            "size_bytes": size,
            "size_formatted": format_file_size(size),
            "analyzed_at": utc_now().isoformat(),
        }
    }
    results.update(analyze_conversations(conversations, config))
    return results


def write_report(results: dict, path: Path, fs: FileSystem | None = None):
    """Save the analysis as pretty-printed JSON."""
    fs = fs or DiskFileSystem()
    fs.write_text(Path(path), json.dumps(results, indent=2, default=str))
    logger.info("Detailed analysis saved to %s", path)
