"""
Semantic filtering of Figma node trees.

Reduces a raw Figma node to the developer-relevant properties listed in
``rules.KEEP_PROPERTIES``. Anything off the allow-list is dropped without
notice, so changes to those properties can never show up in a diff.
Default values are omitted: absence of a key means the default.
"""
from __future__ import annotations
import logging
import math
from typing import Any, Dict, List, Mapping, Optional

from .colors import alpha_of, rgba_to_hex
from .errors import PreconditionError
from .rules import DEFAULT_RULES, PAINT_PROPERTIES, TEXT_STYLE_PROPERTIES, FilterRules

logger = logging.getLogger(__name__)


def simplify_paints(paints: Optional[List[Mapping[str, Any]]],
                    rules: FilterRules = DEFAULT_RULES) -> Optional[List[Dict[str, Any]]]:
    """Drop hidden paints and keep only type, color and paint-specific keys."""
    if not paints:
        return None
    simplified = []
    for paint in paints:
        if paint.get('visible') is False:
            continue
        entry: Dict[str, Any] = {'type': paint.get('type')}
        color = paint.get('color')
        if color:
            entry['color'] = rgba_to_hex(color)
            alpha = alpha_of(color)
            if alpha is not None:
                entry['alpha'] = alpha
        if 'opacity' in paint and paint['opacity'] != 1:
            entry['opacity'] = paint['opacity']
        if paint.get('type') in rules.gradient_types and paint.get('gradientStops'):
            entry['stops'] = [
                {'color': rgba_to_hex(stop['color']), 'pos': stop.get('position')}
                for stop in paint['gradientStops']
            ]
        if paint.get('type') == 'IMAGE':
            if 'imageRef' in paint:
                entry['imageRef'] = paint['imageRef']
            if 'scaleMode' in paint:
                entry['scaleMode'] = paint['scaleMode']
        simplified.append(entry)
    return simplified or None


def _round(value: float) -> int:
    return math.floor(value + 0.5)


def simplify_bounding_box(bb: Mapping[str, float]) -> Dict[str, int]:
    return {
        'x': _round(bb['x']),
        'y': _round(bb['y']),
        'w': _round(bb['width']),
        'h': _round(bb['height']),
    }


def _lookup(node: Mapping[str, Any], key: str, rules: FilterRules):
    """Return (present, value) for ``key``, reading typography from ``style``."""
    if key in node:
        return True, node[key]
    if rules.hoist_text_style and key in TEXT_STYLE_PROPERTIES:
        style = node.get('style')
        if isinstance(style, Mapping) and key in style:
            return True, style[key]
    return False, None


def filter_node(node: Mapping[str, Any], rules: FilterRules = DEFAULT_RULES) -> Dict[str, Any]:
    """Filter a single Figma node (and its subtree) to canonical form.

    With ``rules.hoist_text_style`` set, typography keys missing from the node
    are read from its ``style`` object. ``style`` itself is never copied to the
    output since it is not on the allow-list.
    """
    if not isinstance(node, Mapping):
        raise PreconditionError(f"Expected a node mapping, got {type(node).__name__}")
    if 'id' not in node:
        raise PreconditionError(f"Node without id: {node.get('name', '<unnamed>')!r}")

    filtered: Dict[str, Any] = {}

    for key in rules.keep_properties:
        if key == 'children':
            continue
        present, val = _lookup(node, key, rules)
        if not present:
            continue

        if rules.is_default(key, val):
            continue

        if key in PAINT_PROPERTIES:
            simplified = simplify_paints(val, rules)
            if simplified:
                filtered[key] = simplified
            continue
        if key == 'backgroundColor':
            if val:
                filtered['backgroundColor'] = rgba_to_hex(val)
                alpha = alpha_of(val)
                if alpha is not None:
                    filtered['backgroundAlpha'] = alpha
            continue
        if key == 'absoluteBoundingBox':
            if val:
                filtered['bounds'] = simplify_bounding_box(val)
            continue

        filtered[key] = val

    children = node.get('children')
    if children:
        filtered['children'] = [filter_node(child, rules) for child in children]

    return filtered


def _raw_pages(raw: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    document = raw.get('document')
    if isinstance(document, Mapping):
        return document.get('children') or []
    return raw.get('pages') or []


def filter_file(raw: Mapping[str, Any], rules: FilterRules = DEFAULT_RULES) -> Dict[str, Any]:
    """Convert a full Figma file response to a canonical document.

    Document > Canvas (pages) > nodes. A mapping that already has a
    top-level ``pages`` list is accepted too.
    """
    pages = []
    for page in _raw_pages(raw):
        if 'id' not in page:
            raise PreconditionError(f"Page without id: {page.get('name', '<unnamed>')!r}")
        pages.append({
            'id': page['id'],
            'name': page.get('name', ''),
            'children': [filter_node(child, rules) for child in page.get('children') or []],
        })

    logger.debug(f"Filtered {len(pages)} pages from {raw.get('name', '<unnamed file>')}")
    return {
        'name': raw.get('name'),
        'version': raw.get('version'),
        'lastModified': raw.get('lastModified'),
        'pages': pages,
    }
