# src/litmind/infrastructure/harvesters/__init__.py
"""
External paper harvesters.

Each harvester implements the SearchPort interface and normalizes results to
the PaperCandidate format.
"""

from .arxiv_harvester import ArxivHarvester
from .semantic_scholar_harvester import SemanticScholarHarvester

__all__ = [
    "ArxivHarvester",
    "SemanticScholarHarvester",
]
