"""RGBA float colors to canonical #RRGGBB hex strings."""
from __future__ import annotations
import math
import re
from typing import Dict, Mapping

HEX_RE = re.compile(r'^#([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})$')


def _channel(value: float) -> int:
    # Round half up, matching how design tools print 8-bit channels.
    scaled = math.floor(float(value) * 255 + 0.5)
    return max(0, min(255, scaled))


def rgba_to_hex(color: Mapping[str, float]) -> str:
    """Render an ``{r, g, b, a?}`` color with channels in [0, 1] as ``#RRGGBB``.

    Alpha is not part of the string; callers read it from ``alpha_of``.
    """
    r = _channel(color.get('r', 0))
    g = _channel(color.get('g', 0))
    b = _channel(color.get('b', 0))
    return f"#{r:02X}{g:02X}{b:02X}"


def hex_to_rgb(hex_color: str) -> Dict[str, float]:
    """Decode ``#RRGGBB`` back into float channels."""
    match = HEX_RE.match(hex_color or '')
    if not match:
        raise ValueError(f"Not a #RRGGBB color: {hex_color!r}")
    r, g, b = (int(part, 16) / 255 for part in match.groups())
    return {'r': r, 'g': g, 'b': b}


def alpha_of(color: Mapping[str, float]):
    """Return the alpha channel when present and not fully opaque, else None."""
    a = color.get('a')
    if a is None or a == 1:
        return None
    return a
