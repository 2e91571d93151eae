"""
Normalization rule table: which Figma properties survive filtering and which
values count as defaults. Built once and passed explicitly to the normalizer.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Tuple

# Developer-relevant properties, in output order.
KEEP_PROPERTIES: Tuple[str, ...] = (
    'id', 'name', 'type', 'visible', 'opacity',
    # Visual
    'fills', 'strokes', 'strokeWeight', 'cornerRadius',
    'backgroundColor',
    # Text
    'characters', 'fontSize', 'fontFamily', 'fontWeight',
    'textAlignHorizontal', 'lineHeightPx', 'letterSpacing',
    # Layout
    'absoluteBoundingBox',
    'layoutMode', 'primaryAxisAlignItems', 'counterAxisAlignItems',
    'itemSpacing', 'paddingLeft', 'paddingRight', 'paddingTop', 'paddingBottom',
    # References
    'componentId',
    # Children (handled separately)
    'children',
)

# Property -> value that means "default", omitted from canonical output.
DEFAULT_VALUES: Dict[str, Any] = {
    'visible': True,
    'opacity': 1,
    'strokeWeight': 0,
    'cornerRadius': 0,
    'itemSpacing': 0,
    'paddingLeft': 0,
    'paddingRight': 0,
    'paddingTop': 0,
    'paddingBottom': 0,
    'layoutMode': 'NONE',
}

PAINT_PROPERTIES: FrozenSet[str] = frozenset({'fills', 'strokes'})

GRADIENT_TYPES: FrozenSet[str] = frozenset({
    'GRADIENT_LINEAR',
    'GRADIENT_RADIAL',
    'GRADIENT_ANGULAR',
    'GRADIENT_DIAMOND',
})

# Typography the REST API nests under a node's `style` object.
TEXT_STYLE_PROPERTIES: FrozenSet[str] = frozenset({
    'fontSize', 'fontFamily', 'fontWeight',
    'textAlignHorizontal', 'lineHeightPx', 'letterSpacing',
})


@dataclass(frozen=True)
class FilterRules:
    """Allow-list and default table consumed by ``normalizer.filter_node``."""
    keep_properties: Tuple[str, ...] = KEEP_PROPERTIES
    default_values: Tuple[Tuple[str, Any], ...] = tuple(DEFAULT_VALUES.items())
    gradient_types: FrozenSet[str] = GRADIENT_TYPES
    hoist_text_style: bool = True

    def is_default(self, key: str, value: Any) -> bool:
        for name, default in self.default_values:
            if name == key:
                break
        else:
            return False
        # Keep bool and number defaults apart: visible=1 is not visible=True.
        if isinstance(default, bool) or isinstance(value, bool):
            return value is default
        return value == default

    @classmethod
    def from_config(cls, config) -> 'FilterRules':
        """Build rules from the ``normalize`` section of a RadarConfig."""
        extra = tuple(
            p for p in (config.get('normalize.extra_properties') or [])
            if p not in KEEP_PROPERTIES
        )
        # `children` stays last so extras land among the plain properties.
        keep = KEEP_PROPERTIES[:-1] + extra + ('children',)
        return cls(
            keep_properties=keep,
            hoist_text_style=bool(config.get('normalize.hoist_text_style', True)),
        )


DEFAULT_RULES = FilterRules()
