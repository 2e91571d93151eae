"""
Change records produced by the differ.
"""

from enum import Enum
from typing import Any, Dict, Optional
from dataclasses import dataclass


class ChangeKind(str, Enum):
    ADDED = 'ADDED'
    REMOVED = 'REMOVED'
    MODIFIED = 'MODIFIED'


@dataclass(frozen=True)
class DesignChange:
    """One reported difference, scoped to a page, a node and a property"""
    kind: ChangeKind
    page: str
    page_id: str
    node_id: str
    path: str          # "Header / Login Button", display only
    property: str      # "fills", "bounds", ... or "node" / "page"
    summary: str
    old_value: Optional[Any] = None
    new_value: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert change to dictionary for JSON serialization"""
        data = {
            'kind': self.kind.value,
            'page': self.page,
            'pageId': self.page_id,
            'nodeId': self.node_id,
            'path': self.path,
            'property': self.property,
        }
        if self.old_value is not None:
            data['oldValue'] = self.old_value
        if self.new_value is not None:
            data['newValue'] = self.new_value
        data['summary'] = self.summary
        return data
