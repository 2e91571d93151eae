"""Canonical document <-> compact text, used for stored snapshots."""
import json
from typing import Any, Dict

from .errors import CodecError


def encode(document: Dict[str, Any]) -> str:
    return json.dumps(document, separators=(',', ':'), ensure_ascii=False)


def decode(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except (TypeError, json.JSONDecodeError) as e:
        raise CodecError(f"Could not decode snapshot: {e}") from e
    if not isinstance(data, dict):
        raise CodecError(f"Snapshot root must be an object, got {type(data).__name__}")
    return data
