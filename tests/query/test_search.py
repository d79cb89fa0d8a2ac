"""Tests for search and autocomplete."""

from __future__ import annotations

from uuid import uuid4

import pytest
from mockcms.config import MockCmsConfig, StoreSectionConfig
from mockcms.errors import InvalidRequestError, UnknownTypeError
from mockcms.query.models import SearchBehavior
from mockcms.query.search import matches_query, tokenize
from mockcms.repository import Repository


def _uid() -> str:
    return str(uuid4())


@pytest.fixture
def repo() -> Repository:
    return Repository()


def _named(repo: Repository, type_name: str, name: str, **attrs: object) -> str:
    entity_id = _uid()
    repo.add_content(type_name, entity_id, {"attributes": {"name": name, **attrs}}, skip_events=True)
    return entity_id


class TestTokenize:
    def test_lowercases_and_splits(self):
        assert tokenize("  Bananas in\tPyjamas ") == ["bananas", "in", "pyjamas"]


class TestSearch:
    def test_empty_query_returns_everything(self, repo: Repository):
        banana = _named(repo, "article", "banana")
        _named(repo, "article", "orange")

        result = repo.search({})
        assert result.total == 2
        hit = next(h for h in result.hits if h.id == banana)
        assert hit.type == "article"
        assert hit.title == "banana"
        assert hit.content is None

    def test_any_term(self, repo: Repository):
        match = _named(repo, "article", "banana ")
        _named(repo, "article", "orange ")
        result = repo.search({"q": "banana"})
        assert [h.id for h in result.hits] == [match]

    def test_any_term_matches_either_token(self, repo: Repository):
        _named(repo, "article", "banana")
        _named(repo, "article", "orange")
        _named(repo, "article", "kiwi")
        assert repo.search({"q": "banana orange"}).total == 2

    def test_searches_text_fields(self, repo: Repository):
        entity_id = _uid()
        repo.add_content("article", entity_id, {"attributes": {"name": "x", "text": "Long body about Llamas"}})
        assert [h.id for h in repo.search({"q": "llama"}).hits] == [entity_id]

    def test_return_content(self, repo: Repository):
        _named(repo, "article", "banana")
        hit = repo.search({"returnContent": True}).hits[0]
        assert hit.content == {"attributes": {"name": "banana"}}

    def test_type_filter(self, repo: Repository):
        channel = _named(repo, "channel", "name")
        group = _named(repo, "publishing-group", "name")
        _named(repo, "article", "name")

        result = repo.search({"types": ["publishing-group", "channel"]})
        assert result.total == 2
        assert {h.id for h in result.hits} == {channel, group}

    def test_type_restricted_search(self, repo: Repository):
        _named(repo, "channel", "name")
        article = _named(repo, "article", "name")
        assert [h.id for h in repo.search({}, "article").hits] == [article]
        with pytest.raises(UnknownTypeError):
            repo.search({}, "missing")

    def test_sort_ascending(self, repo: Repository):
        _named(repo, "article", "banana")
        _named(repo, "article", "apple")
        result = repo.search({"sort": [{"by": "title", "order": "asc"}]})
        assert [h.title for h in result.hits] == ["apple", "banana"]

    def test_sort_descending(self, repo: Repository):
        _named(repo, "article", "apple")
        _named(repo, "article", "banana")
        result = repo.search({"sort": [{"by": "title", "order": "desc"}]})
        assert [h.title for h in result.hits] == ["banana", "apple"]

    def test_sort_by_attribute(self, repo: Repository):
        _named(repo, "article", "late", rank="b")
        _named(repo, "article", "early", rank="a")
        result = repo.search({"sort": [{"by": "rank"}]})
        assert [h.title for h in result.hits] == ["early", "late"]

    def test_size(self, repo: Repository):
        _named(repo, "article", "apple")
        _named(repo, "article", "banana")
        result = repo.search({"size": 1})
        assert [h.title for h in result.hits] == ["apple"]
        assert result.total == 2

    def test_from_and_size(self, repo: Repository):
        _named(repo, "article", "apple")
        _named(repo, "article", "banana")
        result = repo.search({"from": 1, "size": 1})
        assert [h.title for h in result.hits] == ["banana"]

    def test_default_size_from_config(self):
        repository = Repository(config=MockCmsConfig(store=StoreSectionConfig(default_search_size=2)))
        for name in ("a", "b", "c"):
            _named(repository, "article", name)
        result = repository.search({})
        assert len(result.hits) == 2
        assert result.total == 3

    def test_prefix_behavior(self, repo: Repository):
        _named(repo, "article", "apple")
        _named(repo, "article", "bananas in pyjamas")
        result = repo.search({"q": "pyjam", "behavior": "prefix"})
        assert [h.title for h in result.hits] == ["bananas in pyjamas"]

    def test_prefix_match_all_terms_flag(self, repo: Repository):
        _named(repo, "article", "apple")
        _named(repo, "article", "bananas in pyjamas")
        assert repo.search({"q": "pyjam", "prefixMatchAllTerms": True}).total == 1
        assert repo.search({"q": "pear", "prefixMatchAllTerms": True}).total == 0

    def test_prefix_requires_every_term(self, repo: Repository):
        _named(repo, "article", "bananas in pyjamas")
        assert repo.search({"q": "ban pyj", "behavior": "prefix"}).total == 1
        assert repo.search({"q": "ban pear", "behavior": "prefix"}).total == 0

    def test_prefix_is_not_substring(self, repo: Repository):
        _named(repo, "article", "bananas")
        assert repo.search({"q": "nana", "behavior": "prefix"}).total == 0
        assert repo.search({"q": "nana"}).total == 1

    def test_invalid_body(self, repo: Repository):
        with pytest.raises(InvalidRequestError):
            repo.search({"from": -1})


class TestMatchesQuery:
    def test_no_tokens_matches(self, repo: Repository):
        _named(repo, "article", "x")
        record = repo.content.records()[0]
        assert matches_query(record, [], SearchBehavior.PREFIX)


class TestAutocomplete:
    @pytest.fixture
    def tags(self, repo: Repository) -> Repository:
        repo.register_type({"name": "tag"})
        return repo

    def test_word_start_match(self, tags: Repository):
        hit = _named(tags, "tag", "Greta Thunberg")
        _named(tags, "tag", "Margareta")
        assert [h.id for h in tags.autocomplete("tag", {"keyword": "thun"})] == [hit]
        assert [h.id for h in tags.autocomplete("tag", {"keyword": "gre"})] == [hit]

    def test_keyword_too_short(self, tags: Repository):
        with pytest.raises(InvalidRequestError):
            tags.autocomplete("tag", {"keyword": "g"})
        with pytest.raises(InvalidRequestError):
            tags.autocomplete("tag", {})

    def test_unknown_type(self, tags: Repository):
        with pytest.raises(UnknownTypeError):
            tags.autocomplete("nope", {"keyword": "abc"})

    def test_publishing_group_filter(self, tags: Repository):
        mine = _named(tags, "tag", "football", publishingGroup="g1")
        _named(tags, "tag", "football", publishingGroup="g2")
        hits = tags.autocomplete("tag", {"keyword": "foot", "publishingGroup": "g1"})
        assert [h.id for h in hits] == [mine]

    def test_channel_filter_covers_both_shapes(self, tags: Repository):
        single = _named(tags, "tag", "football", channel="web")
        multi = _named(tags, "tag", "football", channels=["app", "web"])
        _named(tags, "tag", "football", channel="app")
        hits = tags.autocomplete("tag", {"keyword": "foot", "channel": "web"})
        assert [h.id for h in hits] == [single, multi]
