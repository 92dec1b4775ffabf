"""Application layer: chat orchestration over the RAG core and conversation store."""
