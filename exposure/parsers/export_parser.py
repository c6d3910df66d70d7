"""
exposure/parsers/export_parser.py
Flattens a ChatGPT-style export (conversations.json) into a list of
Message records.

Input shapes accepted:
  - one conversation object:   {"mapping": {node_id: node, ...}, ...}
  - a list of such objects:    [{"mapping": {...}}, ...]

Node shape:
  {"message": {"author": {"role": "user"},
               "content": {"parts": ["..."]},
               "create_time": 1700000000.0}}

Failure policy:
  - not valid JSON / unreadable file  → InvalidExportError (file helpers only)
  - valid JSON, wrong shape           → empty list, warning logged
  - one malformed node                → skipped, debug logged
  - unexpected error mid-conversation → partial list, error logged

No ordering is applied — messages come out in the export's own
iteration order. Analyzers that need time order work from timestamps.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from exposure.models.record import Message

logger = logging.getLogger(__name__)

# BOMs for encoding detection
BOM_UTF8     = b'\xef\xbb\xbf'
BOM_UTF16_LE = b'\xff\xfe'
BOM_UTF16_BE = b'\xfe\xff'

INVALID_EXPORT_MESSAGE = 'Invalid JSON file. Please upload a ChatGPT export.'


class ExportError(ValueError):
    """Base error for export loading."""


class InvalidExportError(ExportError):
    """The uploaded file is not readable JSON."""


# ── LOADING ──────────────────────────────────────────────────

def decode_export_bytes(raw: bytes) -> str:
    """
    Decode raw export bytes.
    Strips a UTF-8 BOM, honours UTF-16 BOMs, else UTF-8 with replace fallback.
    """
    if raw.startswith(BOM_UTF8):
        return raw[len(BOM_UTF8):].decode('utf-8', errors='replace')
    if raw.startswith(BOM_UTF16_LE):
        return raw[len(BOM_UTF16_LE):].decode('utf-16-le', errors='replace')
    if raw.startswith(BOM_UTF16_BE):
        return raw[len(BOM_UTF16_BE):].decode('utf-16-be', errors='replace')
    try:
        return raw.decode('utf-8', errors='strict')
    except UnicodeDecodeError:
        return raw.decode('utf-8', errors='replace')


def load_export_bytes(raw: bytes) -> Any:
    """Decode and parse export bytes. Raises InvalidExportError on bad JSON."""
    try:
        return json.loads(decode_export_bytes(raw))
    except (json.JSONDecodeError, RecursionError) as e:
        logger.error(f"Export is not valid JSON: {e}")
        raise InvalidExportError(INVALID_EXPORT_MESSAGE) from e


def load_export_file(path: Path) -> Any:
    """Read and parse an export file. Raises InvalidExportError on failure."""
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        logger.error(f"File read error {path.name}: {e}")
        raise InvalidExportError(INVALID_EXPORT_MESSAGE) from e
    return load_export_bytes(raw)


def parse_export_file(path: Path) -> List[Message]:
    """Load an export file and flatten it into messages."""
    messages = extract_messages(load_export_file(path))
    logger.info(f"Parsed {len(messages)} messages from {Path(path).name}")
    return messages


# ── FLATTENING ───────────────────────────────────────────────

def extract_messages(data: Any) -> List[Message]:
    """
    Flatten parsed export JSON into Message records.
    Never raises — degrades to an empty or partial list.
    """
    messages: List[Message] = []

    if isinstance(data, list):
        conversations = data
    elif isinstance(data, dict) and 'mapping' in data:
        conversations = [data]
    else:
        logger.warning(
            f"Export has no 'mapping' and is not a list "
            f"(got {type(data).__name__}) — nothing to analyse"
        )
        return messages

    try:
        for index, conversation in enumerate(conversations):
            mapping = conversation.get('mapping') if isinstance(conversation, dict) else None
            if not isinstance(mapping, dict):
                logger.debug(f"Conversation {index} has no mapping — skipped")
                continue
            for node_id, node in mapping.items():
                msg = _parse_node(node)
                if msg is None:
                    logger.debug(f"Skipped node {node_id} in conversation {index}")
                    continue
                messages.append(msg)
    except (AttributeError, TypeError, ValueError) as e:
        logger.error(f"Error parsing export after {len(messages)} messages: {e}")

    logger.info(f"Extracted {len(messages)} messages")
    return messages


def _parse_node(node: Any) -> Optional[Message]:
    if not isinstance(node, dict):
        return None
    message = node.get('message')
    if not message or not isinstance(message, dict):
        return None
    content = message.get('content')
    if not isinstance(content, dict):
        return None
    parts = content.get('parts')
    if not isinstance(parts, list):
        return None
    author = message.get('author')
    role = author.get('role') if isinstance(author, dict) else None
    if not role:
        return None

    return Message(
        role      = str(role),
        content   = ' '.join(_part_text(p) for p in parts),
        timestamp = _to_datetime(message.get('create_time')),
    )


def _part_text(part: Any) -> str:
    # image pointers and other non-text parts carry no text
    return part if isinstance(part, str) else ''


def _to_datetime(create_time: Any) -> datetime:
    """Unix seconds → local aware datetime. Missing/zero/invalid → now."""
    if create_time:
        try:
            return datetime.fromtimestamp(float(create_time), tz=timezone.utc).astimezone()
        except (OSError, OverflowError, ValueError, TypeError) as e:
            logger.debug(f"Unusable create_time {create_time!r}: {e}")
    return datetime.now().astimezone()
