"""
Tests for resume / cover-letter reference validation.
"""
import pytest

from app.errors import ValidationError
from app.services.resume import MAX_REFERENCE_LENGTH, validate_document_reference


@pytest.mark.parametrize("value", [
    "https://drive.example.com/file/abc",
    "http://example.com/cv",
    "My Resume.PDF",
    "cv.docx",
    "cv.doc",
])
def test_valid_references(value):
    assert validate_document_reference(value) == value


def test_reference_is_stripped():
    assert validate_document_reference("  cv.pdf  ") == "cv.pdf"


@pytest.mark.parametrize("value", ["cv.txt", "resume", "ftp://example.com/cv.pdf", "javascript:alert(1)"])
def test_invalid_references(value):
    with pytest.raises(ValidationError) as exc_info:
        validate_document_reference(value)

    assert exc_info.value.fields == ["resume"]


def test_required_reference_missing():
    with pytest.raises(ValidationError):
        validate_document_reference(None)
    with pytest.raises(ValidationError):
        validate_document_reference("  ")


def test_optional_reference_missing():
    assert validate_document_reference(None, field="coverLetter", required=False) is None
    assert validate_document_reference("", field="coverLetter", required=False) is None


def test_reference_too_long():
    too_long = "https://example.com/" + "a" * MAX_REFERENCE_LENGTH

    with pytest.raises(ValidationError) as exc_info:
        validate_document_reference(too_long, field="coverLetter")

    assert exc_info.value.fields == ["coverLetter"]
