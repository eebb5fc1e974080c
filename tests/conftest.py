"""Shared fixtures."""

import io

import pytest
from PyPDF2 import PdfWriter

from reportvault.core.codec import ReportCodec
from reportvault.core.formats import FORMAT_V1
from reportvault.core.kdf import Argon2idKDF, PBKDF2SHA256KDF


@pytest.fixture
def fast_v1_codec():
    """v1 codec with the cheapest PBKDF2 cost the header accepts."""
    return ReportCodec(FORMAT_V1, kdf=PBKDF2SHA256KDF(iterations=10_000))


@pytest.fixture
def fast_argon2_codec():
    return ReportCodec(FORMAT_V1, kdf=Argon2idKDF(time_cost=1, memory_cost=1024, parallelism=1))


def make_pdf(pages: int) -> bytes:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=595, height=842)
    out = io.BytesIO()
    writer.write(out)
    return out.getvalue()


@pytest.fixture
def three_page_pdf() -> bytes:
    return make_pdf(3)
