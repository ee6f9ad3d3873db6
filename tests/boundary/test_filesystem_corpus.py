"""Tests for the filesystem-backed vault corpus."""

import pytest

from vault_index.boundary.corpus.filesystem_corpus import FileSystemCorpus


@pytest.fixture
def vault(tmp_path):
    """Small vault with nested notes, a hidden directory and a non-note file."""
    (tmp_path / "notes").mkdir()
    (tmp_path / ".obsidian").mkdir()
    (tmp_path / "b.md").write_text("bananas are yellow", encoding="utf-8")
    (tmp_path / "notes" / "a.md").write_text("apples are red", encoding="utf-8")
    (tmp_path / "notes" / "image.png").write_bytes(b"\x89PNG")
    (tmp_path / ".obsidian" / "workspace.md").write_text("hidden", encoding="utf-8")
    return tmp_path


class TestFileSystemCorpus:
    """Test listing and reading vault files."""

    @pytest.mark.asyncio
    async def test_list_files_filters_and_sorts(self, vault) -> None:
        """Should list only matching files outside hidden dirs, sorted by path."""
        # Arrange
        corpus = FileSystemCorpus(vault)

        # Act
        files = await corpus.list_files()

        # Assert
        assert [f.path for f in files] == ["b.md", "notes/a.md"]
        assert all(f.mtime > 0 for f in files)

    @pytest.mark.asyncio
    async def test_extensions_without_dot_are_normalized(self, vault) -> None:
        """Should accept "png" as well as ".png"."""
        corpus = FileSystemCorpus(vault, extensions=["PNG"])

        files = await corpus.list_files()

        assert [f.path for f in files] == ["notes/image.png"]

    @pytest.mark.asyncio
    async def test_read_content(self, vault) -> None:
        """Should read a file by its vault-relative path."""
        corpus = FileSystemCorpus(vault)

        assert await corpus.read_content("notes/a.md") == "apples are red"

    @pytest.mark.asyncio
    async def test_read_missing_file_raises_os_error(self, vault) -> None:
        """Should raise an OSError for a missing file."""
        corpus = FileSystemCorpus(vault)

        with pytest.raises(OSError):
            await corpus.read_content("gone.md")

    @pytest.mark.asyncio
    async def test_read_outside_root_is_rejected(self, vault) -> None:
        """Should refuse paths that escape the vault root."""
        corpus = FileSystemCorpus(vault / "notes")

        with pytest.raises(FileNotFoundError):
            await corpus.read_content("../b.md")
