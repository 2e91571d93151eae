"""One-shot check of a Figma file against its last stored snapshot."""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .differ import diff_snapshots
from .errors import DesignRadarError
from .formatter import count_by_kind
from .models import DesignChange
from .normalizer import filter_file
from .rules import DEFAULT_RULES, FilterRules

logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    file_key: str
    file_name: Optional[str]
    version: Optional[str]
    changes: List[DesignChange] = field(default_factory=list)
    first_snapshot: bool = False
    skipped: bool = False
    author: Optional[str] = None
    author_date: Optional[str] = None


def latest_author(client, file_key: str) -> Tuple[Optional[str], Optional[str]]:
    """Handle and timestamp of whoever saved the newest version, if known."""
    try:
        versions = client.get_file_versions(file_key).get('versions') or []
    except DesignRadarError as e:
        logger.warning(f"{file_key}: could not load version history: {e}")
        return None, None
    if not versions:
        return None, None
    latest = versions[0]
    return (latest.get('user') or {}).get('handle'), latest.get('created_at')


def check_file(client, store, file_key: str, rules: FilterRules = DEFAULT_RULES,
               keep_count: int = 10) -> CheckResult:
    """Fetch, normalize, diff against the previous snapshot, then store."""
    meta = client.get_file_metadata(file_key)
    version = meta.get('version')
    if version is not None and store.get_last_version(file_key) == version:
        logger.info(f"{file_key}: version {version} already checked")
        return CheckResult(file_key, meta.get('name'), version, skipped=True)

    author, author_date = latest_author(client, file_key)

    raw = client.get_file(file_key)
    current = filter_file(raw, rules)
    file_name = current.get('name') or meta.get('name') or file_key
    version = current.get('version') or version or ''

    previous = store.get_latest_snapshot(file_key)
    if previous is None:
        changes: List[DesignChange] = []
        logger.info(f"{file_key}: first snapshot, nothing to compare")
    else:
        changes = diff_snapshots(previous.document, current)
        logger.info(f"{file_key}: {previous.version} -> {version}: {count_by_kind(changes)}")

    store.save_snapshot(file_key, version, file_name, current)
    store.update_tracked_file(file_key, file_name, version)
    store.clean_old_snapshots(file_key, keep_count)

    return CheckResult(file_key, file_name, version, changes,
                       first_snapshot=previous is None,
                       author=author, author_date=author_date)
