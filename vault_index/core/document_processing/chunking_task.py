"""
Text chunking task using RecursiveCharacterTextSplitter.

Splits a vault file into retrievable chunks while recording each chunk's
character offset, which feeds the deterministic chunk ID.

Dependencies: langchain_text_splitters
System role: Chunker collaborator of the index sync engine
"""

from pathlib import PurePosixPath

from langchain_text_splitters import RecursiveCharacterTextSplitter
from pydantic import BaseModel, Field

from vault_index.models.chunk import MetadataValue


class ChunkDraft(BaseModel):
    """Chunk text and metadata before embedding."""

    content: str
    start_index: int = Field(description="Character offset of the chunk in the file")
    metadata: dict[str, MetadataValue] = Field(default_factory=dict)


class ChunkingTask:
    """Split file content into chunks using RecursiveCharacterTextSplitter."""

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
    ) -> None:
        """
        Initialize chunking task with splitter configuration.

        Args:
            chunk_size: Maximum chunk size in characters
            chunk_overlap: Overlap between consecutive chunks

        Raises:
            ValueError: When chunk_overlap is not smaller than chunk_size
        """
        if chunk_overlap >= chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")

        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            add_start_index=True,
            length_function=len,
        )

    def chunk(self, path: str, content: str) -> list[ChunkDraft]:
        """
        Split one file into chunks. Deterministic for identical content.

        Args:
            path: Vault-relative file path
            content: File text

        Returns:
            list[ChunkDraft]: Chunks in file order (empty for blank content)
        """
        if not content.strip():
            return []

        title = PurePosixPath(path).stem
        documents = self._splitter.create_documents([content])

        drafts = []
        last_start = -1
        for i, doc in enumerate(documents):
            start_index = doc.metadata.get("start_index", -1)
            if start_index <= last_start:
                start_index = last_start + 1
            last_start = start_index
            drafts.append(
                ChunkDraft(
                    content=doc.page_content,
                    start_index=start_index,
                    metadata={
                        "title": title,
                        "chunk_index": i,
                        "start_index": start_index,
                    },
                )
            )
        return drafts
