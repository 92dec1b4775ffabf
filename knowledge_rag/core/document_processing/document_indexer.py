"""
Document indexer.

Chunks a document, embeds the chunks in batches with the document task
type and stores them with their metadata, replacing any chunks the document
already had. Failures are reported in the result rather than raised, so one
bad document does not stop a batch.

Dependencies: knowledge_rag.boundary.providers, knowledge_rag.boundary.chunk_store
System role: Indexing pipeline feeding the chunk store
"""

import logging
import uuid

from knowledge_rag.boundary.chunk_store.chunk_schemas import ChunkRecord
from knowledge_rag.boundary.chunk_store.chunk_store import ChunkStore
from knowledge_rag.boundary.providers.embedding_provider import EmbeddingProvider
from knowledge_rag.configs.chunking import ChunkingSettings
from knowledge_rag.core.document_processing.models.indexing import (
    DocumentInput,
    IndexingResult,
    TopicReprocessResult,
)
from knowledge_rag.core.document_processing.tasks.chunking_task import (
    CHUNKING_VERSION,
    ChunkingTask,
)
from knowledge_rag.core.exceptions import KnowledgeRAGException

logger = logging.getLogger(__name__)

DEFAULT_ACL = {"scope": "org", "roles": ["admin", "employee"]}


class DocumentIndexer:
    """Chunk, embed and store documents."""

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        chunk_store: ChunkStore,
        chunker: ChunkingTask | None = None,
        batch_size: int = 10,
    ) -> None:
        self._embedding_provider = embedding_provider
        self._chunk_store = chunk_store
        self._chunker = chunker or ChunkingTask()
        self._batch_size = batch_size

    @classmethod
    def from_settings(
        cls,
        chunking: ChunkingSettings,
        embedding_provider: EmbeddingProvider,
        chunk_store: ChunkStore,
    ) -> "DocumentIndexer":
        """Build an indexer with chunk sizes and batch size from CHUNKING_ settings."""
        return cls(
            embedding_provider=embedding_provider,
            chunk_store=chunk_store,
            chunker=ChunkingTask(
                chunk_tokens=chunking.chunk_tokens,
                overlap_tokens=chunking.overlap_tokens,
                chars_per_token=chunking.chars_per_token,
            ),
            batch_size=chunking.embedding_batch_size,
        )

    async def process_document(self, document: DocumentInput) -> IndexingResult:
        """
        Index one document, replacing its existing chunks.

        Args:
            document: Document text and ownership

        Returns:
            IndexingResult: success flag, chunk count and error message
        """
        logger.info(f"{__name__}:process_document - Step 1: Chunking document {document.document_id}")
        texts = self._chunker.chunk(document.content)
        if not texts:
            return IndexingResult(
                document_id=document.document_id,
                success=False,
                error="No content to process",
            )

        try:
            embeddings: list[list[float]] = []
            total_batches = (len(texts) + self._batch_size - 1) // self._batch_size
            for start in range(0, len(texts), self._batch_size):
                batch = texts[start:start + self._batch_size]
                logger.info(
                    f"{__name__}:process_document - Step 2: Embedding batch "
                    f"{start // self._batch_size + 1}/{total_batches}"
                )
                embeddings.extend(await self._embedding_provider.embed_batch(batch, "document"))

            records = [
                self._build_record(document, text, embedding, index, len(texts))
                for index, (text, embedding) in enumerate(zip(texts, embeddings))
            ]
            replaced = await self._chunk_store.delete_document_chunks(document.document_id)
            if replaced:
                logger.info(f"{__name__}:process_document - Step 3: Replacing {replaced} existing chunks")
            await self._chunk_store.insert_chunks(records)
        except KnowledgeRAGException as e:
            logger.error(f"{__name__}:process_document - FAILED for {document.document_id}: {e}")
            return IndexingResult(
                document_id=document.document_id,
                success=False,
                error=e.message,
            )

        logger.info(f"{__name__}:process_document - Step 4 OK: {len(records)} chunks stored")
        return IndexingResult(
            document_id=document.document_id,
            success=True,
            chunk_count=len(records),
        )

    async def delete_document_embeddings(self, document_id: str) -> int:
        """Remove every chunk of a document; returns the number removed."""
        deleted = await self._chunk_store.delete_document_chunks(document_id)
        logger.info(f"{__name__}:delete_document_embeddings - Deleted {deleted} chunks of {document_id}")
        return deleted

    async def reprocess_topic(
        self,
        topic_id: str,
        documents: list[DocumentInput],
    ) -> TopicReprocessResult:
        """
        Re-index every document of a topic from scratch.

        Existing topic chunks are deleted first; documents with no text are
        skipped and documents from other topics are ignored.

        Args:
            topic_id: Topic to rebuild
            documents: Current documents of the topic

        Returns:
            TopicReprocessResult: Per-document results and success counts
        """
        await self._chunk_store.delete_topic_chunks(topic_id)

        summary = TopicReprocessResult(topic_id=topic_id)
        for document in documents:
            if document.topic_id != topic_id or not document.content.strip():
                continue
            result = await self.process_document(document)
            summary.results.append(result)
            if result.success:
                summary.processed += 1
            else:
                summary.failed += 1

        logger.info(
            f"{__name__}:reprocess_topic - Topic {topic_id}: {summary.processed} processed, {summary.failed} failed"
        )
        return summary

    @staticmethod
    def _build_record(
        document: DocumentInput,
        text: str,
        embedding: list[float],
        index: int,
        total: int,
    ) -> ChunkRecord:
        section = f"chunk_{index + 1}"
        return ChunkRecord(
            id=str(uuid.uuid4()),
            org_id=document.org_id,
            document_id=document.document_id,
            topic_id=document.topic_id,
            chunk_text=text,
            chunk_index=index,
            embedding=embedding,
            section=section,
            metadata={
                "documentTitle": document.title,
                "orgId": document.org_id,
                "topicId": document.topic_id,
                "documentId": document.document_id,
                "chunkIndex": index,
                "totalChunks": total,
                "section": section,
                "documentType": document.document_type,
                "chunkingVersion": CHUNKING_VERSION,
                "acl": dict(DEFAULT_ACL),
            },
        )
