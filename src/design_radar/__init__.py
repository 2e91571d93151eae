"""
Design Radar - watches Figma documents for meaningful design changes.
Semantic normalization of node trees plus an identity-based structural diff.
"""

__version__ = "0.1.0"

from .differ import diff_snapshots
from .errors import DesignRadarError, PreconditionError
from .models import ChangeKind, DesignChange
from .normalizer import filter_file, filter_node
from .rules import DEFAULT_RULES, FilterRules

__all__ = [
    'diff_snapshots',
    'filter_file',
    'filter_node',
    'ChangeKind',
    'DesignChange',
    'DesignRadarError',
    'PreconditionError',
    'FilterRules',
    'DEFAULT_RULES',
]
