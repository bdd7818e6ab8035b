"""Tests for attachment records and readers."""

import pytest

from mime_mailer.attachments import Attachment, AttachmentReaderBase, FileAttachmentReader, base_filename


def test_file_reader_returns_bytes(tmp_path):
    path = tmp_path / "payload.bin"
    path.write_bytes(b"\x00\x01binary")

    assert FileAttachmentReader().read(str(path)) == b"\x00\x01binary"
    assert FileAttachmentReader().read(path) == b"\x00\x01binary"


def test_file_reader_propagates_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        FileAttachmentReader().read(tmp_path / "missing.bin")
    with pytest.raises(IsADirectoryError):
        FileAttachmentReader().read(tmp_path)


def test_base_reader_is_abstract():
    with pytest.raises(NotImplementedError):
        AttachmentReaderBase().read("anything")


@pytest.mark.parametrize(
    "path, expected",
    [
        ("report.pdf", "report.pdf"),
        ("/var/spool/mail/report.pdf", "report.pdf"),
        ("relative/dir/notes.txt", "notes.txt"),
    ],
)
def test_base_filename(path, expected):
    assert base_filename(path) == expected


def test_attachment_defaults_to_non_inline():
    assert Attachment("a.txt", b"a").inline is False
