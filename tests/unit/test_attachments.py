"""
Attachment manager tests.

Validation limits per mode, storage keys, upload failure mapping,
all-or-nothing batches and best-effort removal.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from pathlib import Path

import pytest

from src.adapters.local_storage import LocalObjectStore
from src.components.attachments import (
    DEFAULT_IMAGE_KINDS,
    AttachmentManager,
    RandomToken,
    attach_images,
    avatar_key_from_url,
    build_storage_key,
    detach_image,
    file_extension,
    kinds_from_rules,
    validate_image,
)
from src.components.markup import process_content
from src.core.ports.storage import KeyExistsError, KeyNotFoundError, StorageError, StoredObject
from src.domain.entities import FlatDraft, ImageFile, UploadedImage

MB = 1024 * 1024
NOW = datetime(2024, 1, 1, tzinfo=UTC)
NOW_MS = int(NOW.timestamp() * 1000)


# --- Mock Ports ---


class MockObjectStore:
    """In-memory object store; keys listed in fail_keys raise on write."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.fail_with: StorageError | None = None
        self.fail_names: set[str] = set()
        self.delete_error: StorageError | None = None
        self.deleted: list[tuple[str, str]] = []

    async def put_object(self, bucket, key, data, content_type, *, cache_control="3600"):
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with
        if any(key.endswith(name) for name in self.fail_names):
            raise StorageError("quota exceeded")
        if (bucket, key) in self.objects:
            raise KeyExistsError(key)
        self.objects[(bucket, key)] = data
        return StoredObject(
            key=key,
            bucket=bucket,
            size_bytes=len(data),
            content_type=content_type,
            public_url=self.get_public_url(bucket, key),
        )

    async def delete_object(self, bucket, key):
        self.deleted.append((bucket, key))
        if self.delete_error is not None:
            raise self.delete_error
        self.objects.pop((bucket, key), None)

    def get_public_url(self, bucket, key):
        return f"https://cdn.test/{bucket}/{key}"


class FixedClock:
    def now(self) -> datetime:
        return NOW


class CountingTokens:
    def __init__(self) -> None:
        self.count = 0

    def token(self) -> str:
        self.count += 1
        return f"tok{self.count}"


def _file(name: str = "cat.png", size: int = 100, content_type: str = "image/png") -> ImageFile:
    return ImageFile(filename=name, content_type=content_type, data=b"x" * size)


@pytest.fixture
def store() -> MockObjectStore:
    return MockObjectStore()


@pytest.fixture
def manager(store: MockObjectStore) -> AttachmentManager:
    return AttachmentManager(storage=store, clock=FixedClock(), tokens=CountingTokens())


# --- Validation ---


class TestValidateImage:
    def test_six_mb_avatar_is_too_large(self) -> None:
        errors = validate_image(_file(size=6 * MB), DEFAULT_IMAGE_KINDS["avatar"])

        assert len(errors) == 1
        assert errors[0].code == "file_too_large"
        assert errors[0].message == "Image size cannot exceed 5MB"

    def test_six_mb_content_image_passes(self) -> None:
        assert validate_image(_file(size=6 * MB), DEFAULT_IMAGE_KINDS["content"]) == []

    def test_exact_limit_passes(self) -> None:
        assert validate_image(_file(size=5 * MB), DEFAULT_IMAGE_KINDS["avatar"]) == []

    def test_non_image_is_rejected(self) -> None:
        errors = validate_image(
            _file("notes.pdf", content_type="application/pdf"),
            DEFAULT_IMAGE_KINDS["content"],
        )

        assert errors[0].code == "invalid_file_type"

    def test_kinds_from_rules(self, rules) -> None:
        kinds = kinds_from_rules(rules.uploads)

        assert kinds["avatar"].max_upload_bytes == 5 * MB
        assert kinds["content"].max_upload_bytes == 10 * MB
        assert kinds["content"].random_token
        assert not kinds["avatar"].random_token


# --- Keys ---


class TestStorageKeys:
    def test_content_key_has_token(self) -> None:
        assert build_storage_key("u1", "cat.png", NOW, "abc") == f"u1/{NOW_MS}-abc.png"

    def test_avatar_key_is_timestamp_only(self) -> None:
        assert build_storage_key("u1", "me.jpeg", NOW) == f"u1/{NOW_MS}.jpeg"

    def test_file_extension(self) -> None:
        assert file_extension("archive.tar.gz") == "gz"
        assert file_extension("noext") == "noext"

    def test_random_token_shape(self) -> None:
        token = RandomToken().token()

        assert len(token) == 9
        assert token.isalnum()
        assert token == token.lower()

    def test_avatar_key_from_url(self) -> None:
        url = "https://cdn.test/avatars/u1/123.png"

        assert avatar_key_from_url(url) == "u1/123.png"
        assert avatar_key_from_url("https://cdn.test/other/u1/123.png") is None


# --- Upload ---


class TestUpload:
    @pytest.mark.asyncio
    async def test_upload_content_image(self, manager, store, user) -> None:
        result = await manager.upload(_file(), user)

        assert result.success
        assert result.image.id == f"user-1/{NOW_MS}-tok1.png"
        assert result.image.url == f"https://cdn.test/content-images/user-1/{NOW_MS}-tok1.png"
        assert result.image.display_name == "cat.png"
        assert result.image.size_bytes == 100
        assert ("content-images", result.image.id) in store.objects

    @pytest.mark.asyncio
    async def test_upload_requires_user(self, manager, store) -> None:
        result = await manager.upload(_file(), None)

        assert not result.success
        assert result.errors[0].code == "not_authenticated"
        assert store.objects == {}

    @pytest.mark.asyncio
    async def test_invalid_file_is_not_uploaded(self, manager, store, user) -> None:
        result = await manager.upload(_file(size=6 * MB), user, "avatar")

        assert result.errors[0].code == "file_too_large"
        assert store.objects == {}

    @pytest.mark.asyncio
    async def test_store_rejection_becomes_upload_failed(self, manager, store, user) -> None:
        store.fail_with = StorageError("quota exceeded")

        result = await manager.upload(_file(), user)

        assert result.errors[0].code == "upload_failed"
        assert result.errors[0].message == "Image upload failed: quota exceeded"

    @pytest.mark.asyncio
    async def test_avatar_same_millisecond_collides(self, manager, user) -> None:
        first = await manager.upload(_file("me.png"), user, "avatar")
        second = await manager.upload(_file("me.png"), user, "avatar")

        assert first.success
        assert not second.success
        assert second.errors[0].message.startswith("Avatar upload failed: ")
        assert "already exists" in second.errors[0].message


# --- Batch ---


class TestUploadBatch:
    @pytest.mark.asyncio
    async def test_all_succeed(self, manager, user) -> None:
        progress: list[float] = []

        result = await manager.upload_batch(
            [_file("a.png"), _file("b.png"), _file("c.png")], user, progress.append
        )

        assert result.success
        assert [image.display_name for image in result.images] == ["a.png", "b.png", "c.png"]
        assert progress == sorted(progress)
        assert progress[-1] == 100

    @pytest.mark.asyncio
    async def test_one_failure_fails_batch(self, manager, store, user) -> None:
        store.fail_names = {".gif"}

        result = await manager.upload_batch([_file("a.png"), _file("b.gif")], user)

        assert not result.success
        assert result.images == []
        assert len(result.errors) == 1
        assert result.errors[0].message == "Image upload failed: quota exceeded"

    @pytest.mark.asyncio
    async def test_failed_batch_leaves_draft_untouched(self, manager, store, user) -> None:
        store.fail_names = {".gif"}
        draft = FlatDraft(mode="thread")

        result = await manager.upload_into_draft(draft, [_file("a.png"), _file("b.gif")], user)

        assert not result.success
        assert draft.attachments == []
        assert draft.cover_image is None

    @pytest.mark.asyncio
    async def test_successful_batch_attaches_and_sets_cover(self, manager, user) -> None:
        draft = FlatDraft(mode="thread")

        result = await manager.upload_into_draft(draft, [_file("a.png"), _file("b.png")], user)

        assert result.success
        assert [a.display_name for a in draft.attachments] == ["a.png", "b.png"]
        assert draft.cover_image == draft.attachments[0].url

    @pytest.mark.asyncio
    async def test_empty_batch(self, manager, user) -> None:
        result = await manager.upload_batch([], user)

        assert result.success
        assert result.images == []


# --- Removal ---


class TestRemove:
    @pytest.mark.asyncio
    async def test_delete_failure_is_swallowed(self, manager, store) -> None:
        store.delete_error = KeyNotFoundError("u1/1.png")

        await manager.remove("u1/1.png")

        assert store.deleted == [("content-images", "u1/1.png")]

    @pytest.mark.asyncio
    async def test_remove_from_draft_drops_references(self, manager, store) -> None:
        store.delete_error = StorageError("offline")
        image = UploadedImage(id="u1/a.png", url="https://cdn.test/a.png", display_name="a.png", size_bytes=1)
        other = UploadedImage(id="u1/b.png", url="https://cdn.test/b.png", display_name="b.png", size_bytes=1)
        draft = FlatDraft(
            mode="thread",
            body="before\n![a.png](https://cdn.test/a.png)\nafter",
            attachments=[image, other],
            cover_image=image.url,
        )

        await manager.remove_from_draft(draft, image)

        assert draft.attachments == [other]
        assert "![a.png]" not in draft.body
        assert draft.cover_image == other.url

    @pytest.mark.asyncio
    async def test_delete_avatar_by_url(self, manager, store) -> None:
        await manager.delete_avatar("https://cdn.test/avatars/u1/1.png")

        assert store.deleted == [("avatars", "u1/1.png")]


class TestDraftAttachments:
    def test_attach_is_unique_by_id(self) -> None:
        image = UploadedImage(id="k", url="https://cdn.test/k", display_name="k", size_bytes=1)
        draft = FlatDraft(mode="reply")

        attach_images(draft, [image])
        attach_images(draft, [image])

        assert draft.attachments == [image]

    def test_detach_last_clears_cover(self) -> None:
        image = UploadedImage(id="k", url="https://cdn.test/k", display_name="k", size_bytes=1)
        draft = FlatDraft(mode="reply", attachments=[image], cover_image=image.url)

        detach_image(draft, image)

        assert draft.cover_image is None

    def test_choose_cover_must_be_attached(self, manager) -> None:
        draft = FlatDraft(mode="thread")

        result = manager.choose_cover(draft, "https://elsewhere/x.png")

        assert not result.success
        assert result.errors[0].code == "unknown_cover_image"

    def test_detach_strips_every_reference(self) -> None:
        image = UploadedImage(id="k", url="http://x/a.png", display_name="a.png", size_bytes=1)
        draft = FlatDraft(
            mode="thread",
            body="one ![a.png](http://x/a.png) two ![a.png](http://x/a.png)",
            attachments=[image],
        )

        detach_image(draft, image)

        assert draft.body == "one  two "
        assert process_content(draft.body).images == []


class TestRemoveWithLocalStore:
    @pytest.mark.asyncio
    async def test_unremovable_key_still_detaches(self, tmp_path: Path, user) -> None:
        store = LocalObjectStore(tmp_path, "http://testserver/media")
        manager = AttachmentManager(storage=store, clock=FixedClock())
        uploaded = await manager.upload(_file("a.png"), user)
        directory = UploadedImage(
            id="user-1/",
            url="http://testserver/media/content-images/user-1/",
            display_name="dir",
            size_bytes=0,
        )
        draft = FlatDraft(mode="thread", attachments=[uploaded.image, directory])

        await manager.remove_from_draft(draft, directory)

        assert draft.attachments == [uploaded.image]
