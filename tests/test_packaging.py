import zipfile
from pathlib import Path

import pytest

from core.exceptions import PackagingError
from epub.packaging import (
    compress_type_for, delete_staging, files_to_add, package_epub, write_mimetype,
)


@pytest.fixture
def staged(output_dir):
    """A minimal staging tree."""
    files = {
        "META-INF/container.xml": b"<container/>",
        "OEBPS/content.opf": b"<package/>",
        "OEBPS/toc.ncx": b"<ncx/>",
        "OEBPS/css/epub.css": b"body {}",
        "OEBPS/modules/A.html": b"<html/>",
        "OEBPS/assets/logo.png": b"\x89PNG",
        "OEBPS/assets/notes.txt": b"notes",
    }
    for name, data in files.items():
        path = output_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    write_mimetype(output_dir)
    return output_dir


class TestCompressionPolicy:
    """Test cases for the extension-based compression policy."""

    @pytest.mark.parametrize("name", [
        "OEBPS/css/epub.css", "OEBPS/modules/A.html", "OEBPS/toc.ncx", "OEBPS/content.opf",
        "OEBPS/assets/logo.jpg", "OEBPS/assets/logo.png", "META-INF/container.xml", "X.HTML",
    ])
    def test_compressed(self, name):
        assert compress_type_for(name) == zipfile.ZIP_DEFLATED

    @pytest.mark.parametrize("name", ["mimetype", "OEBPS/assets/notes.txt", "OEBPS/assets/logo.jpeg"])
    def test_stored(self, name):
        assert compress_type_for(name) == zipfile.ZIP_STORED


class TestFilesToAdd:
    """Test cases for member collection."""

    def test_order(self, staged):
        names = [name for name, _ in files_to_add(staged)]

        assert names[0] == "mimetype"
        assert names[1] == "META-INF/container.xml"
        assert all(name.startswith("OEBPS/") for name in names[2:])
        assert set(names[2:]) == {
            "OEBPS/content.opf", "OEBPS/toc.ncx", "OEBPS/css/epub.css",
            "OEBPS/modules/A.html", "OEBPS/assets/logo.png", "OEBPS/assets/notes.txt",
        }

    def test_contents(self, staged):
        members = dict(files_to_add(staged))
        assert members["mimetype"] == b"application/epub+zip"
        assert members["OEBPS/modules/A.html"] == b"<html/>"

    def test_directories_and_other_files_excluded(self, staged):
        (staged / "Demo-v1.0.0.epub").write_bytes(b"old")
        (staged / "OEBPS" / "empty").mkdir()
        names = [name for name, _ in files_to_add(staged)]
        assert "Demo-v1.0.0.epub" not in names
        assert "OEBPS/empty" not in names

    def test_missing_mimetype(self, staged):
        (staged / "mimetype").unlink()
        with pytest.raises(PackagingError):
            files_to_add(staged)

    def test_unreadable_file_skipped(self, staged, monkeypatch, caplog):
        original = Path.read_bytes

        def flaky(self):
            if self.name == "toc.ncx":
                raise PermissionError("denied")
            return original(self)

        monkeypatch.setattr(Path, "read_bytes", flaky)
        names = [name for name, _ in files_to_add(staged)]

        assert "OEBPS/toc.ncx" not in names
        assert "OEBPS/content.opf" in names
        assert "toc.ncx" in caplog.text

    def test_unreadable_file_strict(self, staged, monkeypatch):
        original = Path.read_bytes

        def flaky(self):
            if self.name == "toc.ncx":
                raise PermissionError("denied")
            return original(self)

        monkeypatch.setattr(Path, "read_bytes", flaky)
        with pytest.raises(PackagingError):
            files_to_add(staged, fail_on_unreadable=True)


class TestPackageEpub:
    """Test cases for archive creation."""

    def test_archive(self, staged, make_config):
        epub_file = package_epub(staged, make_config())

        assert epub_file == staged.resolve() / "Demo-v1.0.0.epub"
        with zipfile.ZipFile(epub_file) as z:
            infos = z.infolist()
            assert infos[0].filename == "mimetype"
            assert infos[0].compress_type == zipfile.ZIP_STORED
            assert z.read("mimetype") == b"application/epub+zip"
            by_name = {info.filename: info for info in infos}
            assert by_name["OEBPS/modules/A.html"].compress_type == zipfile.ZIP_DEFLATED
            assert by_name["OEBPS/assets/notes.txt"].compress_type == zipfile.ZIP_STORED
            assert z.testzip() is None

    def test_archive_creation_failure(self, staged, make_config):
        (staged / "Demo-v1.0.0.epub").mkdir()
        with pytest.raises(PackagingError):
            package_epub(staged, make_config())


class TestDeleteStaging:
    """Test cases for staging cleanup."""

    def test_leaves_only_archive(self, staged, make_config):
        epub_file = package_epub(staged, make_config())
        delete_staging(staged)
        assert [p.name for p in staged.iterdir()] == [epub_file.name]

    def test_missing_entries_ignored(self, output_dir):
        output_dir.mkdir()
        delete_staging(output_dir)
        assert list(output_dir.iterdir()) == []
