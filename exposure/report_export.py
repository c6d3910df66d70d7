"""
exposure/report_export.py
Self-describing export envelope for an AnalysisResult.

Every export includes: report metadata (generated_at, source), the
serialized result, and a data integrity hash (SHA-256 of the canonical
JSON of everything else). The bare result is what the results page
reads; the envelope is for saving runs to disk.
"""

import hashlib
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from exposure.models.record import AnalysisResult
from exposure.report import result_to_dict


EXPORT_FORMAT_VERSION = "1.0"


def _build_export_payload(
    result: AnalysisResult,
    source: Optional[str] = None,
) -> Dict[str, Any]:
    """Build export payload (no hash yet)."""
    report_metadata = {
        "generated_at": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "source": source or "",
    }
    return {
        "export_format_version": EXPORT_FORMAT_VERSION,
        "report_metadata": report_metadata,
        "result": result_to_dict(result),
    }


def content_hash(payload: Dict[str, Any]) -> str:
    """SHA-256 of canonical JSON serialization of payload (no hash field)."""
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def export_to_dict(
    result: AnalysisResult,
    source: Optional[str] = None,
) -> Dict[str, Any]:
    payload = _build_export_payload(result, source)
    return {**payload, "content_hash_sha256": content_hash(payload)}


def export_to_json(
    result: AnalysisResult,
    source: Optional[str] = None,
    indent: Optional[int] = 2,
) -> str:
    """Export envelope as a JSON string."""
    return json.dumps(export_to_dict(result, source), indent=indent, ensure_ascii=False)


def verify_export(export: Dict[str, Any]) -> bool:
    """True if the envelope's hash matches its content."""
    payload = {k: v for k, v in export.items() if k != "content_hash_sha256"}
    return export.get("content_hash_sha256") == content_hash(payload)
