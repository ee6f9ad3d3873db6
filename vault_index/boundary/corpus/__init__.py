"""
Live corpus boundary layer.

- Corpus: collaborator protocol (list_files, read_content)
- FileSystemCorpus: vault directory implementation
"""

from vault_index.boundary.corpus.filesystem_corpus import FileSystemCorpus
from vault_index.boundary.corpus.models import Corpus, CorpusFile

__all__ = ["Corpus", "CorpusFile", "FileSystemCorpus"]
