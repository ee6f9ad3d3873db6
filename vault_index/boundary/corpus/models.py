"""
Corpus models and collaborator interface.

Dependencies: pydantic
System role: Contract between the index sync engine and the live vault
"""

from typing import Protocol

from pydantic import BaseModel, Field


class CorpusFile(BaseModel):
    """One file of the live corpus listing."""

    path: str = Field(description="Vault-relative POSIX path")
    mtime: float = Field(description="Last modification time (epoch seconds)")


class Corpus(Protocol):
    """Live document collection the index is reconciled against."""

    async def list_files(self) -> list[CorpusFile]:
        """List every indexable file, in a stable enumeration order."""
        ...

    async def read_content(self, path: str) -> str:
        """
        Read a file's text.

        Raises:
            OSError: When the file cannot be read
        """
        ...
