"""Tests for artifact loading."""

from sibylline_sizemap.text.loading import get_file_content


class TestGetFileContent:
    def test_bytes_decoded(self):
        assert get_file_content("héllo\r\n".encode()) == "héllo\r\n"

    def test_path_read(self, tmp_path):
        artifact = tmp_path / "main.js"
        artifact.write_bytes(b"var a=1;\r\nvar b=2;\n")
        assert get_file_content(artifact) == "var a=1;\r\nvar b=2;\n"
        assert get_file_content(str(artifact)) == "var a=1;\r\nvar b=2;\n"

    def test_invalid_utf8_replaced(self):
        assert get_file_content(b"a\xffb") == "a�b"
