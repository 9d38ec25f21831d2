"""Tests for file payload checks applied before upload."""

import pytest

from propdesk.application.dtos.documents import FilePayload
from propdesk.application.use_cases.documents.upload_rules import (
    DEFAULT_ALLOWED_CONTENT_TYPES,
    content_type_allowed,
    payload_problem,
    size_problem,
)


@pytest.mark.parametrize(
    "content_type",
    ["image/png", "IMAGE/JPEG", "application/pdf", "application/pdf; charset=binary"],
)
def test_allowed_content_types(content_type: str) -> None:
    assert content_type_allowed(content_type, DEFAULT_ALLOWED_CONTENT_TYPES)


@pytest.mark.parametrize("content_type", ["", "text/html", "application/x-msdownload", "imagex/png"])
def test_rejected_content_types(content_type: str) -> None:
    assert not content_type_allowed(content_type, DEFAULT_ALLOWED_CONTENT_TYPES)


def test_valid_payload_has_no_problem() -> None:
    assert payload_problem(FilePayload("deed.pdf", "application/pdf", b"%PDF")) is None


def test_empty_file_is_rejected() -> None:
    assert payload_problem(FilePayload("deed.pdf", "application/pdf", b"")) == "File is empty."


def test_blank_name_is_rejected() -> None:
    assert payload_problem(FilePayload("  ", "application/pdf", b"x")) == "File name is required."


def test_oversized_file_is_rejected() -> None:
    problem = payload_problem(FilePayload("big.pdf", "application/pdf", b"x" * 11), max_size=10)
    assert problem == "File exceeds the maximum size of 10 bytes."


def test_custom_allow_list() -> None:
    payload = FilePayload("notes.txt", "text/plain", b"hello")
    assert payload_problem(payload, allowed=["text/*"]) is None
    assert payload_problem(payload) == "File type text/plain is not allowed."


def test_size_problem_only_above_limit() -> None:
    assert size_problem(8, max_size=8) is None
    assert size_problem(9, max_size=8) == "File exceeds the maximum size of 8 bytes."
