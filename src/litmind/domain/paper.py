"""External paper candidate produced by the search providers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

_WS_RX = re.compile(r"\s+")

# Fixture/sample ids some providers hand back when they have nothing real.
PLACEHOLDER_ID_PREFIXES = ("example",)


def normalize_title(title: Optional[str]) -> str:
    """Whitespace-collapsed, case-folded title used as the cross-provider dedup key."""
    return _WS_RX.sub(" ", (title or "").strip()).casefold()


@dataclass
class PaperCandidate:
    """
    Transient paper candidate from an external provider.

    Required field: title. Everything else may be empty when the provider
    response omits it.
    """

    title: str
    source: str = ""
    external_id: Optional[str] = None
    authors: List[str] = field(default_factory=list)
    url: Optional[str] = None
    abstract: str = ""

    @property
    def title_key(self) -> str:
        return normalize_title(self.title)

    @property
    def authors_text(self) -> str:
        return ", ".join(a for a in self.authors if a)

    def is_placeholder(self) -> bool:
        """True when the candidate has no usable external id."""
        external_id = (self.external_id or "").strip()
        if not external_id:
            return True
        return external_id.lower().startswith(PLACEHOLDER_ID_PREFIXES)
