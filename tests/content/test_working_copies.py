"""Tests for working copies and referenced-by resolution."""

from __future__ import annotations

from uuid import uuid4

import pytest
from mockcms.config import MockCmsConfig, StoreSectionConfig
from mockcms.content.models import Reference
from mockcms.errors import ConflictError, InvalidIdError, InvalidRequestError, NotFoundError
from mockcms.repository import Repository


@pytest.fixture
def repo() -> Repository:
    repository = Repository()
    repository.register_type({"name": "article"})
    return repository


class TestWorkingCopies:
    def test_put_and_get(self, repo: Repository):
        entity_id = str(uuid4())
        repo.put_working_copy("article", entity_id, {"name": "Hello"})
        assert repo.get_working_copy("article", entity_id) == {"name": "Hello"}
        assert repo.peek_working_copy("article", entity_id) == {"name": "Hello"}

    def test_independent_of_sequence_number(self, repo: Repository):
        entity_id = str(uuid4())
        repo.put("article", entity_id, {"name": "published"})
        repo.put_working_copy("article", entity_id, {"name": "draft"})
        assert repo.get("article", entity_id).sequence_number == 1
        assert repo.get("article", entity_id).content == {"name": "published"}

    def test_add_working_copy_registers_type(self, repo: Repository):
        entity_id = str(uuid4())
        repo.add_working_copy("page", entity_id, {"name": "Hi"})
        assert repo.get_working_copy("page", entity_id) == {"name": "Hi"}

    def test_delete(self, repo: Repository):
        entity_id = str(uuid4())
        repo.put_working_copy("article", entity_id, {"name": "Hi"})
        repo.delete_working_copy("article", entity_id)
        assert repo.peek_working_copy("article", entity_id) is None
        with pytest.raises(NotFoundError):
            repo.delete_working_copy("article", entity_id)

    def test_missing(self, repo: Repository):
        with pytest.raises(NotFoundError):
            repo.get_working_copy("article", str(uuid4()))

    def test_validates_id(self, repo: Repository):
        with pytest.raises(InvalidIdError):
            repo.put_working_copy("article", "bad", {})

    def test_validates_payload(self, repo: Repository):
        entity_id = str(uuid4())
        with pytest.raises(InvalidRequestError):
            repo.put_working_copy("article", entity_id, {"when": object()})
        with pytest.raises(InvalidRequestError):
            repo.add_working_copy("article", entity_id, {"when": object()})
        assert repo.peek_working_copy("article", entity_id) is None

    def test_publish_keeps_working_copy_by_default(self, repo: Repository):
        entity_id = str(uuid4())
        repo.put_working_copy("article", entity_id, {"name": "draft"})
        repo.put("article", entity_id, {"name": "live"})
        assert repo.has_working_copy("article", entity_id)

    def test_publish_can_clear_working_copy(self, repo: Repository):
        entity_id = str(uuid4())
        repo.put_working_copy("article", entity_id, {"name": "draft"})
        repo.put("article", entity_id, {"name": "live"}, clear_working_copy=True)
        assert not repo.has_working_copy("article", entity_id)

    def test_failed_publish_keeps_working_copy(self, repo: Repository):
        entity_id = str(uuid4())
        repo.put("article", entity_id, {})
        repo.put_working_copy("article", entity_id, {"name": "draft"})
        with pytest.raises(ConflictError):
            repo.put("article", entity_id, {}, if_sequence_number=5, clear_working_copy=True)
        assert repo.has_working_copy("article", entity_id)

    def test_auto_clear_from_config(self):
        config = MockCmsConfig(store=StoreSectionConfig(auto_clear_working_copy=True))
        repository = Repository(config=config)
        repository.register_type({"name": "article"})
        entity_id = str(uuid4())
        repository.put_working_copy("article", entity_id, {"name": "draft"})
        repository.put("article", entity_id, {"name": "live"})
        assert repository.peek_working_copy("article", entity_id) is None


class TestReferencedBy:
    def test_finds_payloads_mentioning_the_id(self, repo: Repository):
        target = str(uuid4())
        referrer = str(uuid4())
        unrelated = str(uuid4())
        repo.put("article", target, {"attributes": {"name": "target"}})
        repo.put("article", referrer, {"links": [{"id": target}]})
        repo.put("article", unrelated, {"attributes": {"name": "other"}})

        refs = repo.referenced_by("article", target)
        assert refs == [Reference(id=referrer, type="article")]

    def test_explicit_edges_first_without_duplicates(self, repo: Repository):
        target = str(uuid4())
        referrer = str(uuid4())
        repo.put("article", target, {})
        repo.put("article", referrer, {"parent": target})
        repo.add_reference("article", target, {"id": referrer, "type": "article"})

        assert repo.referenced_by("article", target) == [Reference(id=referrer, type="article")]

    def test_pluggable_resolver(self):
        fixed = [Reference(id="x", type="teaser")]
        repository = Repository(reference_resolver=lambda target, corpus: list(fixed))
        repository.register_type({"name": "article"})
        entity_id = str(uuid4())
        repository.put("article", entity_id, {})
        assert repository.referenced_by("article", entity_id) == fixed

    def test_missing_content(self, repo: Repository):
        with pytest.raises(NotFoundError):
            repo.referenced_by("article", str(uuid4()))
