"""Tests for splitting decrypted reports into pages."""

from unittest.mock import patch

import pytest

from reportvault.core.document import extract_pages, is_pdf
from reportvault.core.errors import DocumentError


class TestExtractPages:
    def test_pdf_page_count(self, three_page_pdf):
        assert is_pdf(three_page_pdf)
        pages = extract_pages(three_page_pdf)
        assert len(pages) == 3
        assert all(isinstance(page, str) for page in pages)

    def test_accepts_memoryview(self, three_page_pdf):
        assert len(extract_pages(memoryview(three_page_pdf).toreadonly())) == 3

    def test_text_split_on_form_feed(self):
        assert extract_pages(b"page one\fpage two") == ["page one", "page two"]

    def test_invalid_utf8_replaced(self):
        assert extract_pages(b"caf\xe9") == ["caf�"]

    def test_empty_rejected(self):
        with pytest.raises(DocumentError):
            extract_pages(b"")

    def test_corrupt_pdf_rejected(self):
        with pytest.raises(DocumentError):
            extract_pages(b"%PDF-1.7\nthis is not a pdf body")

    @pytest.mark.parametrize(
        "error",
        [TypeError("argument of type 'NumberObject' is not iterable"),
         AttributeError("'NullObject' object has no attribute 'get_object'"),
         IndexError("list index out of range"),
         RecursionError("maximum recursion depth exceeded")],
    )
    def test_damaged_pdf_errors_become_document_error(self, three_page_pdf, error):
        with patch("reportvault.core.document.PyPDF2.PdfReader", side_effect=error):
            with pytest.raises(DocumentError) as excinfo:
                extract_pages(three_page_pdf)
        assert excinfo.value.__cause__ is error
