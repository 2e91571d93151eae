"""
Structural diff of two canonical design documents.

Nodes are matched by ``id`` across the whole page, never by position, so a
node moved to another parent or sibling index only reports what changed on
the node itself. Paths in the output are for display only.
"""
from __future__ import annotations
import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple

from .errors import PreconditionError
from .models import ChangeKind, DesignChange

logger = logging.getLogger(__name__)

PATH_SEPARATOR = ' / '
# Keys never compared as plain values.
SKIP_KEYS = frozenset({'id', 'children'})


class NodeEntry(NamedTuple):
    node: Mapping[str, Any]
    path: str


def _node_id(node: Mapping[str, Any]) -> str:
    try:
        return node['id']
    except (KeyError, TypeError):
        raise PreconditionError(f"Canonical node without id: {node!r}") from None


def build_node_map(nodes: Iterable[Mapping[str, Any]], parent_path: str = '') -> Dict[str, NodeEntry]:
    """Flatten a node forest into ``{id: NodeEntry(node, path)}``, depth first.

    A missing ``children`` key and an empty ``children`` list are the same.
    """
    node_map: Dict[str, NodeEntry] = {}
    stack = [(node, parent_path) for node in reversed(list(nodes or []))]
    while stack:
        node, parent = stack.pop()
        node_id = _node_id(node)
        label = node.get('name') or node_id
        path = f"{parent}{PATH_SEPARATOR}{label}" if parent else label
        if node_id in node_map:
            raise PreconditionError(f"Duplicate node id {node_id!r} at {path}")
        node_map[node_id] = NodeEntry(node, path)
        for child in reversed(node.get('children') or []):
            stack.append((child, path))
    return node_map


def values_equal(a: Any, b: Any) -> bool:
    """Deep equality: lists are order-sensitive, mappings compare key sets and values."""
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        if a.keys() != b.keys():
            return False
        return all(values_equal(a[k], b[k]) for k in a)
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        if len(a) != len(b):
            return False
        return all(values_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, (Mapping, list, tuple)) or isinstance(b, (Mapping, list, tuple)):
        return False
    return a == b


def _format_scalar(val: Any) -> str:
    if val is None:
        return 'none'
    if isinstance(val, bool):
        return 'true' if val else 'false'
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    return str(val)


def format_value(val: Any) -> str:
    """Render a property value for a change summary."""
    if val is None:
        return 'none'
    if isinstance(val, str):
        return val
    if isinstance(val, (list, tuple)):
        if val and isinstance(val[0], Mapping) and val[0].get('color'):
            return ', '.join(str(f.get('color') or '') for f in val if isinstance(f, Mapping))
        return json.dumps(val, separators=(',', ':'), ensure_ascii=False)
    if isinstance(val, Mapping):
        if 'w' in val and 'h' in val:
            return (f"{_format_scalar(val['w'])}×{_format_scalar(val['h'])} "
                    f"at ({_format_scalar(val.get('x'))},{_format_scalar(val.get('y'))})")
        return json.dumps(val, separators=(',', ':'), ensure_ascii=False)
    return _format_scalar(val)


def compare_nodes(old_node: Mapping[str, Any], new_node: Mapping[str, Any],
                  path: str, page_name: str, page_id: str) -> List[DesignChange]:
    """Compare the properties of two nodes known to share an id."""
    changes: List[DesignChange] = []
    node_id = new_node.get('id') or old_node.get('id')

    all_keys = [k for k in dict.fromkeys([*old_node, *new_node]) if k not in SKIP_KEYS]

    for key in all_keys:
        in_old = key in old_node
        in_new = key in new_node
        old_val = old_node.get(key)
        new_val = new_node.get(key)

        if key == 'name':
            if in_old != in_new or not values_equal(old_val, new_val):
                changes.append(DesignChange(
                    kind=ChangeKind.MODIFIED, page=page_name, page_id=page_id,
                    node_id=node_id, path=path, property='name',
                    old_value=old_val, new_value=new_val,
                    summary=f'Renamed: "{format_value(old_val)}" → "{format_value(new_val)}"',
                ))
            continue

        if in_new and not in_old:
            changes.append(DesignChange(
                kind=ChangeKind.ADDED, page=page_name, page_id=page_id,
                node_id=node_id, path=path, property=key, new_value=new_val,
                summary=f"{key} added: {format_value(new_val)}",
            ))
        elif in_old and not in_new:
            changes.append(DesignChange(
                kind=ChangeKind.REMOVED, page=page_name, page_id=page_id,
                node_id=node_id, path=path, property=key, old_value=old_val,
                summary=f"{key} removed (was: {format_value(old_val)})",
            ))
        elif not values_equal(old_val, new_val):
            changes.append(DesignChange(
                kind=ChangeKind.MODIFIED, page=page_name, page_id=page_id,
                node_id=node_id, path=path, property=key,
                old_value=old_val, new_value=new_val,
                summary=f"{key}: {format_value(old_val)} → {format_value(new_val)}",
            ))

    return changes


def _node_label(node_id: str, node: Mapping[str, Any]) -> str:
    return f'"{node.get("name") or node_id}" ({node.get("type")})'


def diff_page(old_page: Mapping[str, Any], new_page: Mapping[str, Any]) -> List[DesignChange]:
    """Diff the node trees of two revisions of the same page."""
    changes: List[DesignChange] = []
    page_name = new_page.get('name') or old_page.get('name')
    page_id = new_page.get('id') or old_page.get('id')

    old_map = build_node_map(old_page.get('children'))
    new_map = build_node_map(new_page.get('children'))

    for node_id, old_entry in old_map.items():
        new_entry = new_map.get(node_id)
        if new_entry is None:
            changes.append(DesignChange(
                kind=ChangeKind.REMOVED, page=page_name, page_id=page_id,
                node_id=node_id, path=old_entry.path, property='node',
                old_value=old_entry.node.get('type'),
                summary=f"{_node_label(node_id, old_entry.node)} removed",
            ))
        else:
            changes.extend(compare_nodes(old_entry.node, new_entry.node,
                                         new_entry.path, page_name, page_id))

    for node_id, new_entry in new_map.items():
        if node_id not in old_map:
            changes.append(DesignChange(
                kind=ChangeKind.ADDED, page=page_name, page_id=page_id,
                node_id=node_id, path=new_entry.path, property='node',
                new_value=new_entry.node.get('type'),
                summary=f"{_node_label(node_id, new_entry.node)} added",
            ))

    logger.debug(f"Page {page_name}: {len(old_map)} -> {len(new_map)} nodes, {len(changes)} changes")
    return changes


def _page_map(document: Mapping[str, Any]) -> Dict[str, Mapping[str, Any]]:
    pages: Dict[str, Mapping[str, Any]] = {}
    for page in document.get('pages') or []:
        if 'id' not in page:
            raise PreconditionError(f"Page without id: {page.get('name', '<unnamed>')!r}")
        pages[page['id']] = page
    return pages


def diff_snapshots(old_file: Mapping[str, Any], new_file: Mapping[str, Any]) -> List[DesignChange]:
    """Compare two canonical documents and return the ordered change list."""
    changes: List[DesignChange] = []

    old_pages = _page_map(old_file)
    new_pages = _page_map(new_file)

    for page_id, new_page in new_pages.items():
        old_page = old_pages.get(page_id)
        if old_page is not None:
            changes.extend(diff_page(old_page, new_page))
        else:
            changes.append(DesignChange(
                kind=ChangeKind.ADDED, page=new_page.get('name'), page_id=page_id,
                node_id=page_id, path=new_page.get('name'), property='page',
                summary=f'New page added: "{new_page.get("name")}"',
            ))

    for page_id, old_page in old_pages.items():
        if page_id not in new_pages:
            changes.append(DesignChange(
                kind=ChangeKind.REMOVED, page=old_page.get('name'), page_id=page_id,
                node_id=page_id, path=old_page.get('name'), property='page',
                summary=f'Page removed: "{old_page.get("name")}"',
            ))

    return changes
