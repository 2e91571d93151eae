"""Compact text rendering of change lists, grouped by page."""
from __future__ import annotations
from typing import Dict, Iterable, List

from .models import ChangeKind, DesignChange

ICONS = {
    ChangeKind.ADDED: '+',
    ChangeKind.REMOVED: '-',
    ChangeKind.MODIFIED: '~',
}

FIGMA_DESIGN_URL = 'https://www.figma.com/design'


def _group_by_page(changes: Iterable[DesignChange]) -> Dict[str, List[DesignChange]]:
    groups: Dict[str, List[DesignChange]] = {}
    for c in changes:
        groups.setdefault(c.page, []).append(c)
    return groups


def format_changes_for_llm(changes: List[DesignChange]) -> str:
    """Format changes as compact lines for a language model or a terminal."""
    if not changes:
        return 'No changes detected.'

    lines = []
    for page, page_changes in _group_by_page(changes).items():
        lines.append(f"[{page}]")
        for c in page_changes:
            lines.append(f"  {ICONS[c.kind]} {c.path}: {c.summary}")
    return '\n'.join(lines)


def figma_node_link(file_key: str, node_id: str) -> str:
    """Deep link to a node in the Figma editor."""
    encoded = node_id.replace(':', '-', 1)
    return f"{FIGMA_DESIGN_URL}/{file_key}?node-id={encoded}"


def count_by_kind(changes: Iterable[DesignChange]) -> Dict[str, int]:
    counts = {kind.value: 0 for kind in ChangeKind}
    for c in changes:
        counts[c.kind.value] += 1
    return counts
