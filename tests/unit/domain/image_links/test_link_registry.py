"""
Unit tests for LinkRegistry

Covers record creation with duplicate-id regeneration, resolution,
authorization, and the blob-then-record delete ordering.
"""

from unittest.mock import Mock

import pytest

from qrshare.domain.errors import (
    DuplicateViolationError,
    ForbiddenError,
    ImageNotFoundError,
    StoreUnavailableError,
)
from qrshare.domain.image_links.services import LinkRegistry

from tests.fixtures.assertion_helpers import assert_repository_called
from tests.fixtures.domain_fixtures import create_image_record


class TestCreate:
    def test_returns_new_id(self, link_registry, record_repository):
        image_id = link_registry.create("u1", "u1/a.jpg")

        record = record_repository.get_all_records()[image_id]
        assert record.owner_id == "u1"
        assert record.storage_path == "u1/a.jpg"

    def test_ids_are_unique(self, link_registry):
        ids = {link_registry.create("u1", f"u1/{n}.jpg") for n in range(20)}

        assert len(ids) == 20

    def test_duplicate_id_is_regenerated_once(self, link_registry, record_repository):
        record_repository.insert_failures = [DuplicateViolationError("collision")]

        image_id = link_registry.create("u1", "u1/a.jpg")

        assert image_id in record_repository.get_all_records()
        assert_repository_called(record_repository, "insert", times=2)

    def test_second_duplicate_propagates(self, link_registry, record_repository):
        record_repository.insert_failures = [
            DuplicateViolationError("collision"),
            DuplicateViolationError("collision again"),
        ]

        with pytest.raises(DuplicateViolationError):
            link_registry.create("u1", "u1/a.jpg")

        assert_repository_called(record_repository, "insert", times=2)

    def test_store_unavailable_is_not_retried(self, link_registry, record_repository):
        record_repository.insert_failures = [StoreUnavailableError("down")]

        with pytest.raises(StoreUnavailableError):
            link_registry.create("u1", "u1/a.jpg")

        assert_repository_called(record_repository, "insert", times=1)


class TestResolve:
    def test_returns_storage_path(self, link_registry):
        image_id = link_registry.create("u1", "u1/a.jpg")

        assert link_registry.resolve(image_id) == "u1/a.jpg"

    def test_unknown_id(self, link_registry):
        with pytest.raises(ImageNotFoundError) as exc_info:
            link_registry.resolve("missing")

        assert exc_info.value.image_id == "missing"

    def test_empty_id_never_hits_the_store(self, link_registry, record_repository):
        with pytest.raises(ImageNotFoundError):
            link_registry.resolve("")

        assert record_repository.get_call_history() == []

    def test_has_no_ownership_check(self, link_registry):
        image_id = link_registry.create("u1", "u1/a.jpg")

        # Anyone holding the id resolves it
        assert link_registry.resolve(image_id) == "u1/a.jpg"


class TestListForOwner:
    def test_newest_first_and_scoped_to_owner(self, link_registry, fake_clock):
        first = link_registry.create("u1", "u1/a.jpg")
        fake_clock.advance(1)
        second = link_registry.create("u1", "u1/b.jpg")
        link_registry.create("u2", "u2/c.jpg")

        records = link_registry.list_for_owner("u1")

        assert [r.id for r in records] == [second, first]

    def test_empty_for_unknown_owner(self, link_registry):
        assert link_registry.list_for_owner("nobody") == []


class TestAuthorize:
    def test_owner_is_authorized(self, link_registry):
        image_id = link_registry.create("u1", "u1/a.jpg")

        assert link_registry.authorize(image_id, "u1").id == image_id

    def test_non_owner_is_forbidden(self, link_registry):
        image_id = link_registry.create("u1", "u1/a.jpg")

        with pytest.raises(ForbiddenError) as exc_info:
            link_registry.authorize(image_id, "u2")

        assert exc_info.value.requester_id == "u2"

    def test_unknown_id_is_not_found_before_ownership(self, link_registry):
        with pytest.raises(ImageNotFoundError):
            link_registry.authorize("missing", "u2")


class TestDelete:
    def test_removes_blob_and_record(self, link_registry, record_repository, storage_repository):
        storage_repository.put("u1/a.jpg", b"data")
        image_id = link_registry.create("u1", "u1/a.jpg")

        deleted = link_registry.delete(image_id, "u1")

        assert deleted.id == image_id
        assert not storage_repository.exists("u1/a.jpg")
        assert image_id not in record_repository.get_all_records()
        with pytest.raises(ImageNotFoundError):
            link_registry.resolve(image_id)

    def test_blob_is_removed_before_record(self):
        record = create_image_record(image_id="img1", owner_id="u1")
        calls = Mock()
        calls.records.select_by_id.return_value = record
        calls.records.delete_by_id.return_value = True
        registry = LinkRegistry(calls.records, calls.blobs)

        registry.delete("img1", "u1")

        method_names = [c[0] for c in calls.mock_calls]
        assert method_names.index("blobs.remove") < method_names.index("records.delete_by_id")

    def test_non_owner_delete_changes_nothing(self, link_registry, record_repository, storage_repository):
        storage_repository.put("u1/a.jpg", b"data")
        image_id = link_registry.create("u1", "u1/a.jpg")

        with pytest.raises(ForbiddenError):
            link_registry.delete(image_id, "u2")

        assert storage_repository.exists("u1/a.jpg")
        assert link_registry.resolve(image_id) == "u1/a.jpg"
        assert_repository_called(storage_repository, "remove", times=0)

    def test_failed_blob_removal_keeps_record(self, link_registry, storage_repository):
        storage_repository.put("u1/a.jpg", b"data")
        image_id = link_registry.create("u1", "u1/a.jpg")
        storage_repository.fail_remove = True

        with pytest.raises(StoreUnavailableError):
            link_registry.delete(image_id, "u1")

        assert link_registry.resolve(image_id) == "u1/a.jpg"

    def test_delete_is_retryable_after_blob_failure(self, link_registry, storage_repository):
        storage_repository.put("u1/a.jpg", b"data")
        image_id = link_registry.create("u1", "u1/a.jpg")
        storage_repository.fail_remove = True
        with pytest.raises(StoreUnavailableError):
            link_registry.delete(image_id, "u1")

        storage_repository.fail_remove = False
        link_registry.delete(image_id, "u1")

        with pytest.raises(ImageNotFoundError):
            link_registry.resolve(image_id)

    def test_record_vanishing_mid_delete_counts_as_success(self, link_registry, record_repository):
        image_id = link_registry.create("u1", "u1/a.jpg")
        record = record_repository.get_all_records()[image_id]
        record_repository.delete_by_id = Mock(return_value=False)

        assert link_registry.delete(image_id, "u1") == record

    def test_deleting_twice_is_not_found(self, link_registry):
        image_id = link_registry.create("u1", "u1/a.jpg")
        link_registry.delete(image_id, "u1")

        with pytest.raises(ImageNotFoundError):
            link_registry.delete(image_id, "u1")
