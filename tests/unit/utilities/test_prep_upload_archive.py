# tests/unit/utilities/test_prep_upload_archive.py

import errno
import logging
import zipfile
from unittest.mock import MagicMock, patch

import pytest

from veracode_agent.exceptions import FileSystemError
from veracode_agent.utilities.prep_upload_archive import UploadArchivePrep, create_zip_archive


@pytest.fixture
def source_tree(tmp_path):
    src = tmp_path / "src"
    (src / "pkg").mkdir(parents=True)
    (src / "pkg" / "main.py").write_text("print('hi')\n")
    (src / "pkg" / "main.pyc").write_bytes(b"\x00\x01")
    (src / "README.md").write_text("readme\n")
    (src / "debug.log").write_text("log\n")
    (src / "node_modules" / "left-pad").mkdir(parents=True)
    (src / "node_modules" / "left-pad" / "index.js").write_text("module.exports = 1\n")
    return src


# --- Tests for should_exclude_file ---
def test_should_exclude_file_custom_patterns():
    ignore = {"*.log", "build", "secret.txt"}

    assert UploadArchivePrep.should_exclude_file("app.log", ignore) is True
    assert UploadArchivePrep.should_exclude_file("logs/debug.log", ignore) is True
    assert UploadArchivePrep.should_exclude_file("build/output.js", ignore) is True
    assert UploadArchivePrep.should_exclude_file("config/secret.txt", ignore) is True
    assert UploadArchivePrep.should_exclude_file("src/main.py", ignore) is False


def test_should_exclude_file_globstar():
    ignore = ["**/*.pyc", "dist/**"]

    assert UploadArchivePrep.should_exclude_file("module.pyc", ignore) is True
    assert UploadArchivePrep.should_exclude_file("pkg/sub/module.pyc", ignore) is True
    assert UploadArchivePrep.should_exclude_file("dist/app/bundle.js", ignore) is True
    assert UploadArchivePrep.should_exclude_file("pkg/module.py", ignore) is False


def test_should_exclude_file_star_stays_in_one_directory():
    ignore = ["src/*.js"]

    assert UploadArchivePrep.should_exclude_file("src/app.js", ignore) is True
    assert UploadArchivePrep.should_exclude_file("src/lib/deep.js", ignore) is False
    assert UploadArchivePrep.should_exclude_file("other/src/app.js", ignore) is False


def test_should_exclude_file_anchored_directory():
    ignore = ["src/vendor", "docs/**/*.md"]

    assert UploadArchivePrep.should_exclude_file("src/vendor/lib/x.js", ignore) is True
    assert UploadArchivePrep.should_exclude_file("src/vendored.js", ignore) is False
    assert UploadArchivePrep.should_exclude_file("docs/index.md", ignore) is True
    assert UploadArchivePrep.should_exclude_file("docs/api/v1/ref.md", ignore) is True
    assert UploadArchivePrep.should_exclude_file("docs/api/diagram.png", ignore) is False


def test_should_exclude_file_no_patterns():
    assert UploadArchivePrep.should_exclude_file(".git/config", None) is False
    assert UploadArchivePrep.should_exclude_file(".git/config", set()) is False


def test_should_exclude_file_default_exclusions():
    defaults = UploadArchivePrep.DEFAULT_EXCLUSIONS

    assert UploadArchivePrep.should_exclude_file(".git/HEAD", defaults) is True
    assert UploadArchivePrep.should_exclude_file("pkg/__pycache__/m.cpython-311.pyc", defaults) is True
    assert UploadArchivePrep.should_exclude_file("node_modules/x/index.js", defaults) is True
    assert UploadArchivePrep.should_exclude_file("src/module.js", defaults) is False


# --- Tests for create_zip_archive ---
@pytest.mark.asyncio
async def test_create_zip_archive_real_tree(source_tree, tmp_path):
    zip_name = tmp_path / "upload.zip"

    size = await create_zip_archive(
        str(source_tree), str(zip_name), ["**/*.pyc", "*.log", "node_modules"]
    )

    assert size == zip_name.stat().st_size
    with zipfile.ZipFile(zip_name) as archive:
        names = sorted(archive.namelist())
    assert names == ["README.md", "pkg/main.py"]


@pytest.mark.asyncio
async def test_create_zip_archive_without_ignore(source_tree, tmp_path):
    zip_name = tmp_path / "upload.zip"

    await create_zip_archive(str(source_tree), str(zip_name))

    with zipfile.ZipFile(zip_name) as archive:
        assert len(archive.namelist()) == 5


@pytest.mark.asyncio
async def test_create_zip_archive_skips_itself(source_tree):
    zip_name = source_tree / "upload.zip"

    await create_zip_archive(str(source_tree), str(zip_name), ["node_modules"])

    with zipfile.ZipFile(zip_name) as archive:
        assert "upload.zip" not in archive.namelist()


@pytest.mark.asyncio
async def test_create_zip_archive_source_not_directory(tmp_path):
    with pytest.raises(FileSystemError, match="Source path is not a directory"):
        await create_zip_archive(str(tmp_path / "missing"), str(tmp_path / "out.zip"))


@pytest.mark.asyncio
@patch("os.path.getsize")
@patch("zipfile.ZipFile")
async def test_create_zip_archive_returns_size(mock_zipfile, mock_getsize, source_tree):
    mock_zipfile.return_value.__enter__.return_value = MagicMock()
    mock_getsize.return_value = 420

    size = await create_zip_archive(str(source_tree), "upload.zip")

    assert size == 420
    mock_zipfile.assert_called_once()


@pytest.mark.asyncio
@patch("os.path.getsize")
@patch("zipfile.ZipFile")
async def test_create_zip_archive_enoent_is_logged(
    mock_zipfile, mock_getsize, source_tree, caplog
):
    mock_zip_instance = MagicMock()
    missing = FileNotFoundError(errno.ENOENT, "No such file or directory", "README.md")
    mock_zip_instance.write.side_effect = [missing, None, None, None, None]
    mock_zipfile.return_value.__enter__.return_value = mock_zip_instance
    mock_getsize.return_value = 420

    with caplog.at_level(logging.WARNING, logger="veracode-agent"):
        size = await create_zip_archive(str(source_tree), "upload.zip")

    assert size == 420
    assert mock_zip_instance.write.call_count == 5
    assert "Warning:" in caplog.text
    assert "No such file or directory" in caplog.text


@pytest.mark.asyncio
@patch("zipfile.ZipFile")
async def test_create_zip_archive_fatal_warning_rejects(mock_zipfile, source_tree):
    mock_zip_instance = MagicMock()
    denied = PermissionError(errno.EACCES, "Permission denied", "README.md")
    mock_zip_instance.write.side_effect = denied
    mock_zipfile.return_value.__enter__.return_value = mock_zip_instance

    with pytest.raises(PermissionError) as excinfo:
        await create_zip_archive(str(source_tree), "upload.zip")

    assert excinfo.value is denied
    assert excinfo.value.errno == errno.EACCES


@pytest.mark.asyncio
@patch("zipfile.ZipFile")
async def test_create_zip_archive_writer_error_rejects(mock_zipfile, source_tree):
    failure = zipfile.LargeZipFile("Zipfile size would require ZIP64 extensions")
    mock_zipfile.return_value.__enter__.return_value.write.side_effect = failure

    with pytest.raises(zipfile.LargeZipFile) as excinfo:
        await create_zip_archive(str(source_tree), "upload.zip")

    assert excinfo.value is failure
