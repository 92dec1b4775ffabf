"""
Task modules for document indexing.

Exports: ChunkingTask, CHUNKING_VERSION
"""

from .chunking_task import CHUNKING_VERSION, ChunkingTask

__all__ = ["CHUNKING_VERSION", "ChunkingTask"]
