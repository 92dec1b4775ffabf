"""Knowledge base RAG core: hybrid retrieval, cited answers and streaming chat."""

__version__ = "0.1.0"
