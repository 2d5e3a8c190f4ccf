"""Tests for the storage service."""

import re

import pytest

from s3gate.files.s3.clients.httpx import HttpxS3Client
from s3gate.files.s3.pydantic import (
    S3DeletedOutcome,
    S3FailedOutcome,
    S3FailureKind,
    S3FetchedOutcome,
    S3ListedOutcome,
    S3StoredOutcome,
)
from s3gate.services.storage import StorageService
from tests.utils import FakeS3Backend


@pytest.mark.asyncio
async def test_upload_preserving_name(storage_service: StorageService, fake_s3: FakeS3Backend) -> None:
    """Test that a preserved name becomes the key."""
    outcome = await storage_service.upload("report.pdf", b"%PDF", "application/pdf", folder="docs", preserve_name=True)

    assert isinstance(outcome, S3StoredOutcome)
    assert outcome.key == "docs/report.pdf"
    assert outcome.public_url == "https://s3.test.local/uploads/docs/report.pdf"
    assert fake_s3.objects["docs/report.pdf"] == (b"%PDF", "application/pdf")


@pytest.mark.asyncio
async def test_upload_generates_unique_names(storage_service: StorageService) -> None:
    """Test that two uploads of one name get two keys."""
    first = await storage_service.upload("photo.jpg", b"1", "image/jpeg")
    second = await storage_service.upload("photo.jpg", b"2", "image/jpeg")

    assert isinstance(first, S3StoredOutcome)
    assert isinstance(second, S3StoredOutcome)
    assert first.key != second.key
    assert re.fullmatch(r"\d+-[a-z0-9]{8}\.jpg", first.key)


@pytest.mark.asyncio
async def test_get_and_delete(storage_service: StorageService) -> None:
    """Test fetching and deleting an uploaded file."""
    await storage_service.upload("a.txt", b"hello", "text/plain", preserve_name=True)

    fetched = await storage_service.get("a.txt")
    deleted = await storage_service.delete("a.txt")
    deleted_again = await storage_service.delete("a.txt")

    assert isinstance(fetched, S3FetchedOutcome)
    assert fetched.as_base64() == "aGVsbG8="
    assert isinstance(deleted, S3DeletedOutcome)
    assert isinstance(deleted_again, S3DeletedOutcome)


@pytest.mark.asyncio
async def test_list_uses_default_limit(storage_service: StorageService, fake_s3: FakeS3Backend) -> None:
    """Test that the default page size is sent when none is given."""
    outcome = await storage_service.list()

    assert isinstance(outcome, S3ListedOutcome)
    assert outcome.objects == []
    assert fake_s3.requests[-1].url.params["max-keys"] == "200"


@pytest.mark.asyncio
async def test_missing_file_is_a_failed_outcome(storage_service: StorageService) -> None:
    """Test that a missing key comes back as a provider failure, not an exception."""
    outcome = await storage_service.get("missing.txt")

    assert isinstance(outcome, S3FailedOutcome)
    assert outcome.kind is S3FailureKind.PROVIDER_ERROR
    assert outcome.detail == "Failed to get: 404 NoSuchKey (The specified key does not exist.)"


@pytest.mark.asyncio
async def test_proxy_interception_is_a_failed_outcome(
    storage_service: StorageService,
    fake_s3: FakeS3Backend,
) -> None:
    """Test that every operation reports interception as a failed outcome."""
    fake_s3.intercept_with_html = True

    outcomes = [
        await storage_service.list(),
        await storage_service.get("a.txt"),
        await storage_service.upload("a.txt", b"a", "text/plain"),
        await storage_service.delete("a.txt"),
    ]

    for outcome in outcomes:
        assert isinstance(outcome, S3FailedOutcome)
        assert outcome.kind is S3FailureKind.PROXY_INTERCEPTED


@pytest.mark.asyncio
async def test_custom_default_limit(s3_client: HttpxS3Client, fake_s3: FakeS3Backend) -> None:
    """Test a configured default page size."""
    service = StorageService(s3_client, default_list_limit=25)

    await service.list(prefix="docs/")

    assert fake_s3.requests[-1].url.params["max-keys"] == "25"
    assert fake_s3.requests[-1].url.params["prefix"] == "docs/"


@pytest.mark.asyncio
async def test_upload_without_name(storage_service: StorageService, fake_s3: FakeS3Backend) -> None:
    """Test that a name made only of slashes is malformed input and nothing is sent."""
    outcome = await storage_service.upload("///", b"a", "text/plain", preserve_name=True)

    assert isinstance(outcome, S3FailedOutcome)
    assert outcome.kind is S3FailureKind.MALFORMED_INPUT
    assert fake_s3.requests == []


@pytest.mark.asyncio
async def test_dot_segment_keys_are_malformed(storage_service: StorageService, fake_s3: FakeS3Backend) -> None:
    """Test that keys with dot segments never reach the provider."""
    outcomes = [
        await storage_service.upload("../../x.png", b"a", "image/png", folder="avatars", preserve_name=True),
        await storage_service.get("a/./b.png"),
        await storage_service.delete("a/../b.png"),
    ]

    for outcome in outcomes:
        assert isinstance(outcome, S3FailedOutcome)
        assert outcome.kind is S3FailureKind.MALFORMED_INPUT
        assert "path segment" in outcome.detail
    assert fake_s3.requests == []
