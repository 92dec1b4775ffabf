"""
Models for document indexing.

Exports: DocumentInput, IndexingResult, TopicReprocessResult
"""

from .indexing import DocumentInput, IndexingResult, TopicReprocessResult

__all__ = ["DocumentInput", "IndexingResult", "TopicReprocessResult"]
