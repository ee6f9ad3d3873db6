"""
Index inspection.

Classifies every corpus file as indexed, unindexed or empty, and flags
indexed files whose embeddings are missing. The report can be rendered as
a markdown "Files Status" note.

Dependencies: vault_index.boundary
System role: Debug/inspection surface over the index
"""

import logging

from vault_index.boundary.corpus.models import Corpus
from vault_index.boundary.vdb.document_store import DocumentStore
from vault_index.models.index_report import IndexStatusReport

logger = logging.getLogger(__name__)


async def inspect_index(store: DocumentStore, corpus: Corpus) -> IndexStatusReport:
    """
    Build the status report for the current corpus.

    Empty (blank) files are never reported as unindexed. Unreadable files
    are left out of the report.

    Args:
        store: Document store to inspect
        corpus: Live corpus

    Returns:
        IndexStatusReport: Sorted path lists per classification
    """
    indexed_paths = await store.list_indexed_paths()
    report = IndexStatusReport()

    for corpus_file in await corpus.list_files():
        path = corpus_file.path
        try:
            content = await corpus.read_content(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"{__name__}:inspect_index - Cannot read {path}: {type(e).__name__}: {e}")
            continue

        if not content.strip():
            report.empty.append(path)
        elif path not in indexed_paths:
            report.unindexed.append(path)
        else:
            report.indexed.append(path)
            if not await store.has_embeddings(path):
                report.missing_embeddings.append(path)

    for paths in (report.indexed, report.missing_embeddings, report.unindexed, report.empty):
        paths.sort()
    return report


def render_status_markdown(report: IndexStatusReport) -> str:
    """Render the report as a markdown note linking each file."""
    missing = set(report.missing_embeddings)
    lines = [
        "# Files Status",
        f"- Indexed files: {len(report.indexed)}",
        f"\t- Files missing embeddings: {len(report.missing_embeddings)}",
        f"- Unindexed files: {len(report.unindexed)}",
        f"- Empty files: {len(report.empty)}",
        "",
        "## Indexed Files",
    ]
    lines.extend(
        f"- [[{path}]]" + (" *(embedding missing)*" if path in missing else "")
        for path in report.indexed
    )
    lines += ["", "## Unindexed Files"]
    lines.extend([f"- [[{path}]]" for path in report.unindexed] or ["No unindexed files found."])
    lines += ["", "## Empty Files"]
    lines.extend([f"- [[{path}]]" for path in report.empty] or ["No empty files found."])
    return "\n".join(lines)
