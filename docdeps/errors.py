"""Exception types raised by docdeps.

Resolution itself never raises; these cover the places that are allowed to
fail loudly, such as building a registry from bad configuration.
"""

from __future__ import annotations

from typing import List, Optional


class DocdepsError(Exception):
    """Base class for docdeps errors."""


class RegistryError(DocdepsError):
    """Raised when a template registry cannot be built."""

    def __init__(self, message: str, issues: Optional[List[str]] = None):
        self.issues = list(issues or [])
        if self.issues:
            message = f"{message}: " + "; ".join(self.issues)
        super().__init__(message)
