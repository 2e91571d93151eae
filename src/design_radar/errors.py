"""Exception types raised by Design Radar."""
from typing import Optional


class DesignRadarError(Exception):
    """Base class for all Design Radar errors"""
    pass


class PreconditionError(DesignRadarError, ValueError):
    """Input tree violates a shape contract (missing or duplicate node id)"""
    pass


class CodecError(DesignRadarError):
    """Stored snapshot text could not be decoded"""
    pass


class ConfigError(DesignRadarError):
    """Configuration file could not be read or parsed"""
    pass


class FigmaAPIError(DesignRadarError):
    """Figma REST API request failed"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
