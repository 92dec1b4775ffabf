"""
Core business logic module.

Contains the RAG core: hybrid retrieval, cross-topic merging, context
assembly, answer generation, document chunking and the exception hierarchy.
"""
