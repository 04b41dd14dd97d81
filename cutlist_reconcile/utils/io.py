"""File I/O utilities for part payloads."""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from json_repair import repair_json

from ..models import Part

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r'```(?:json)?\s*([\s\S]*?)\s*```')


def parse_json_text(text: str) -> Tuple[Optional[Any], Optional[str]]:
    """
    Parse JSON text produced by the upstream extraction step.

    Handles markdown code fences and repairs truncated or slightly
    malformed JSON (trailing commas, missing brackets) before giving up.

    Returns:
        Tuple of (data, error):
        - On success: (list or dict, None)
        - On failure: (None, error_message)
    """
    if not text or not text.strip():
        return None, "Empty payload"

    fenced = _FENCED_JSON.search(text)
    json_str = fenced.group(1) if fenced else text.strip()

    try:
        return json.loads(json_str), None
    except json.JSONDecodeError as e:
        logger.debug("JSON decode failed (%s), attempting repair", e)

    repaired = repair_json(json_str)
    try:
        data = json.loads(repaired)
    except json.JSONDecodeError as e:
        return None, f"JSON error: {str(e)[:100]}"

    if not isinstance(data, (dict, list)) or not data:
        return None, "Payload is not a JSON object or array"
    logger.warning("Payload JSON was malformed and has been repaired")
    return data, None


def load_json_robust(filepath: Union[str, Path]) -> Tuple[Optional[Any], Optional[str]]:
    """
    Load JSON with BOM (Byte Order Mark) handling and repair.

    Spreadsheet exports and AI payload dumps sometimes carry encoding
    issues. This function tries multiple encodings to handle these cases.

    Encoding order:
    1. utf-8-sig: UTF-8 with BOM (handles Windows exports)
    2. utf-8: Standard UTF-8
    3. latin-1: Fallback for legacy files

    Args:
        filepath: Path to JSON file

    Returns:
        Tuple of (data, error):
        - On success: (data, None)
        - On failure: (None, error_message)
    """
    filepath = Path(filepath)

    if not filepath.exists():
        return None, f"File not found: {filepath}"

    for encoding in ["utf-8-sig", "utf-8", "latin-1"]:
        try:
            with open(filepath, "r", encoding=encoding) as f:
                text = f.read()
        except UnicodeDecodeError:
            continue
        except OSError as e:
            return None, f"Error: {str(e)[:100]}"
        return parse_json_text(text)

    return None, f"Failed all encodings for: {filepath}"


def parts_from_payload(data: Any) -> Tuple[List[Part], List[str]]:
    """
    Convert an extraction payload into Part records.

    Accepts a bare list of part dicts or ``{"parts": [...], "confidence": x}``.
    A payload-level confidence is copied onto parts that carry none.
    Entries that are not objects, or that cannot be read as a part, are
    skipped and reported.

    Returns:
        Tuple of (parts, errors)
    """
    errors: List[str] = []
    payload_confidence = None

    if isinstance(data, dict):
        payload_confidence = data.get("confidence")
        records = data.get("parts")
        if records is None:
            return [], ["Payload object has no 'parts' list"]
    else:
        records = data

    if not isinstance(records, list):
        return [], [f"Expected a list of parts, got {type(records).__name__}"]

    parts: List[Part] = []
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            errors.append(f"Entry {i} is not an object")
            logger.warning("Skipping payload entry %d: not an object", i)
            continue
        record: Dict[str, Any] = dict(record)
        if not record.get("part_id") and not record.get("id"):
            record["part_id"] = f"part-{i + 1}"
        if record.get("confidence") is None and payload_confidence is not None:
            record["confidence"] = payload_confidence
        try:
            parts.append(Part.from_dict(record))
        except (ValueError, TypeError, AttributeError, OverflowError) as e:
            errors.append(f"Entry {i}: {str(e)[:100]}")
            logger.warning("Skipping payload entry %d: %s", i, e)

    return parts, errors


def load_parts(filepath: Union[str, Path]) -> Tuple[List[Part], List[str]]:
    """
    Load Part records from a JSON payload file.

    Returns:
        Tuple of (parts, errors). A file that cannot be read gives
        ([], [reason]).
    """
    data, error = load_json_robust(filepath)
    if error:
        return [], [error]
    return parts_from_payload(data)
