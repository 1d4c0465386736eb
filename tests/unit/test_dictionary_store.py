"""Tests for the dictionary store."""

from unittest.mock import patch

import pytest
import requests

from wordbook.exceptions import ApiError, AuthenticationError, StorageError
from wordbook.models import Category, DataSource, UploadFile
from wordbook.services import ApiService
from wordbook.services.cache_service import (
    BOOKMARKS_KEY,
    CATEGORIES_KEY,
    WORDS_KEY,
    WORDS_LAST_FETCH_KEY,
)
from wordbook.stores import DictionaryStore

EARLIER = "2024-05-09T08:00:00+00:00"


@pytest.fixture
def dictionary_store(api, cache, bundled):
    """DictionaryStore for a regular (non-admin) session."""
    return DictionaryStore(api, cache, bundled, is_privileged=lambda: False)


@pytest.fixture
def loaded_store(dictionary_store, online_backend):
    """DictionaryStore after a successful remote load of the sample data."""
    dictionary_store.load()
    return dictionary_store


# ---------------------------------------------------------------------------
# TestLoad
# ---------------------------------------------------------------------------


class TestLoad:
    """Tests for DictionaryStore.load."""

    def test_remote_load(self, dictionary_store, online_backend, cache):
        """Should populate the state and write through to the cache."""
        result = dictionary_store.load()

        state = dictionary_store.state
        assert result.source is DataSource.REMOTE
        assert [c.name for c in state.categories] == ["Animais", "Cores"]
        assert [w.word for w in state.words_by_category["1"]] == ["gato", "cão"]
        assert state.source is DataSource.REMOTE
        assert state.is_stale is False
        assert state.is_loading is False
        assert cache.read_json(CATEGORIES_KEY)[0]["name"] == "Animais"
        assert cache.read_json(WORDS_KEY)["2"][0]["category_id"] == 2
        assert cache.read_timestamp(WORDS_LAST_FETCH_KEY) == state.last_fetch

    def test_second_load_same_day_uses_cache(self, loaded_store, online_backend):
        """Should not call the server again on the same day."""
        result = loaded_store.load()

        assert result.source is DataSource.CACHE
        assert len(online_backend.calls_to("GET", "/word/all")) == 1
        assert loaded_store.state.is_stale is True

    def test_words_failure_falls_back_without_stamping(
        self, dictionary_store, fake_backend, cache, categories_payload
    ):
        """Should not write partial data or stamp when the words call fails."""
        cache.write_json(CATEGORIES_KEY, [{"id": 3, "name": "Cached"}])
        cache.write_json(WORDS_KEY, {"3": []})
        cache.write_timestamp(WORDS_LAST_FETCH_KEY, EARLIER)
        fake_backend.route("GET", "/category/all", payload={"categories": categories_payload})
        fake_backend.route("GET", "/word/all", status=500)

        result = dictionary_store.load()

        assert result.source is DataSource.CACHE
        assert dictionary_store.state.categories == [Category(id=3, name="Cached")]
        assert cache.read_json(CATEGORIES_KEY) == [{"id": 3, "name": "Cached"}]
        assert cache.read_timestamp(WORDS_LAST_FETCH_KEY) == EARLIER

    def test_offline_without_cache_uses_bundle(self, dictionary_store, fake_backend, cache):
        fake_backend.fail("GET", "/category/all", requests.exceptions.ConnectionError())

        result = dictionary_store.load()

        assert result.source is DataSource.BUNDLED
        assert dictionary_store.state.categories == [Category(id=9, name="Bundled")]
        assert dictionary_store.find_word(90).category_id == 9
        assert cache.read_timestamp(WORDS_LAST_FETCH_KEY) is None

    def test_loading_flag_notified(self, dictionary_store, online_backend, recording_listener):
        """Should announce the loading flag before and after the load."""
        dictionary_store.subscribe(recording_listener)

        dictionary_store.load()

        flags = [state.is_loading for state in recording_listener.states]
        assert flags[0] is True
        assert flags[-1] is False

    def test_focus_follows_reloaded_word(self, loaded_store, online_backend, words_payload):
        """Should replace the focused word with its reloaded version."""
        loaded_store.set_word_in_focus(loaded_store.find_word(10))
        words_payload["1"][0]["meaning"] = "small cat"
        online_backend.route("GET", "/word/all", payload={"data": words_payload})

        loaded_store.load(force_remote=True)

        assert loaded_store.state.word_in_focus.meaning == "small cat"

    def test_focus_dropped_when_word_gone(self, loaded_store, online_backend):
        loaded_store.set_word_in_focus(loaded_store.find_word(10))
        online_backend.route("GET", "/word/all", payload={"data": {"1": [], "2": []}})

        loaded_store.load(force_remote=True)

        assert loaded_store.state.word_in_focus is None


# ---------------------------------------------------------------------------
# TestRefreshCategories
# ---------------------------------------------------------------------------


class TestRefreshCategories:
    """Tests for DictionaryStore.refresh_categories."""

    def test_refresh_leaves_words_untouched(self, loaded_store, online_backend, cache):
        """Should only replace categories, in memory and on disk."""
        words_before = loaded_store.state.words_by_category
        stamp_before = cache.read_timestamp(WORDS_LAST_FETCH_KEY)
        cached_words_before = cache.read_json(WORDS_KEY)
        online_backend.route(
            "GET",
            "/category/all",
            payload={"categories": [{"id": 1, "name": "Bichos"}, {"id": 2, "name": "Cores"}]},
        )

        assert loaded_store.refresh_categories() is True

        assert loaded_store.state.categories[0].name == "Bichos"
        assert loaded_store.state.words_by_category == words_before
        assert cache.read_json(CATEGORIES_KEY)[0]["name"] == "Bichos"
        assert cache.read_json(WORDS_KEY) == cached_words_before
        assert cache.read_timestamp(WORDS_LAST_FETCH_KEY) == stamp_before

    def test_refresh_failure_keeps_state(self, loaded_store, online_backend):
        online_backend.route("GET", "/category/all", status=503)

        assert loaded_store.refresh_categories() is False
        assert len(loaded_store.state.categories) == 2

    def test_refresh_bad_payload_keeps_state(self, loaded_store, online_backend):
        online_backend.route("GET", "/category/all", payload={"unexpected": True})

        assert loaded_store.refresh_categories() is False
        assert len(loaded_store.state.categories) == 2


# ---------------------------------------------------------------------------
# TestQueries
# ---------------------------------------------------------------------------


class TestQueries:
    """Tests for lookups and search."""

    def test_find_word(self, loaded_store):
        assert loaded_store.find_word(20).word == "azul"
        assert loaded_store.find_word(999) is None

    def test_word_index_follows_delete(self, loaded_store, online_backend):
        """Should keep the id lookup in step with the category buckets."""
        online_backend.route("DELETE", "/word/11", status=204)

        loaded_store.delete_word(11)

        assert sorted(loaded_store.state.word_index) == [10, 20]
        assert loaded_store.find_word(10).word == "gato"

    def test_category_of(self, loaded_store):
        assert loaded_store.category_of(loaded_store.find_word(11)).name == "Animais"

    def test_filter_words_sorted(self, loaded_store):
        """Should sort by headword within a category."""
        assert [w.word for w in loaded_store.filter_words(1)] == ["cão", "gato"]

    def test_filter_words_query(self, loaded_store):
        assert [w.word for w in loaded_store.filter_words("1", "DOG")] == ["cão"]

    def test_filter_unknown_category(self, loaded_store):
        assert loaded_store.filter_words(42) == []

    def test_search_omits_empty_categories(self, loaded_store):
        results = loaded_store.search("blue")
        assert list(results) == [Category(id=2, name="Cores")]
        assert results[Category(id=2, name="Cores")][0].word == "azul"


# ---------------------------------------------------------------------------
# TestMutations
# ---------------------------------------------------------------------------


class TestMutations:
    """Tests for admin mutations."""

    def test_delete_word_removes_everywhere(self, loaded_store, online_backend, cache):
        """Should drop the word from state and cache without stamping."""
        online_backend.route("DELETE", "/word/10", status=204)
        stamp_before = cache.read_timestamp(WORDS_LAST_FETCH_KEY)

        loaded_store.delete_word(10)

        assert loaded_store.find_word(10) is None
        assert [w.id for w in loaded_store.state.words_by_category["1"]] == [11]
        assert [w["id"] for w in cache.read_json(WORDS_KEY)["1"]] == [11]
        assert cache.read_timestamp(WORDS_LAST_FETCH_KEY) == stamp_before

    def test_delete_focused_word_clears_focus(self, loaded_store, online_backend):
        online_backend.route("DELETE", "/word/10", status=204)
        loaded_store.set_word_in_focus(loaded_store.find_word(10))

        loaded_store.delete_word(10)

        assert loaded_store.state.word_in_focus is None

    def test_delete_other_word_keeps_focus(self, loaded_store, online_backend):
        """Should keep focus on a word that was not deleted."""
        online_backend.route("DELETE", "/word/10", status=204)
        focused = loaded_store.find_word(20)
        loaded_store.set_word_in_focus(focused)

        loaded_store.delete_word(10)

        assert loaded_store.state.word_in_focus == focused

    def test_failed_delete_changes_nothing(self, loaded_store, online_backend, cache):
        online_backend.route("DELETE", "/word/10", status=500)
        cached_before = cache.read_json(WORDS_KEY)

        with pytest.raises(ApiError):
            loaded_store.delete_word(10)

        assert loaded_store.find_word(10) is not None
        assert cache.read_json(WORDS_KEY) == cached_before

    def test_create_category_refreshes_categories(self, loaded_store, online_backend):
        online_backend.route("POST", "/category/new", status=201, payload={"id": 3})
        online_backend.route(
            "GET",
            "/category/all",
            payload={"categories": [{"id": 1, "name": "Animais"}, {"id": 3, "name": "Frutas"}]},
        )

        loaded_store.create_category("Frutas")

        assert [c.name for c in loaded_store.sorted_categories()] == ["Animais", "Frutas"]
        assert len(online_backend.calls_to("GET", "/word/all")) == 1

    def test_update_category_rejected(self, loaded_store, online_backend):
        online_backend.route("PUT", "/category/1", status=403)

        with pytest.raises(ApiError) as exc_info:
            loaded_store.update_category(1, "Bichos")

        assert exc_info.value.status_code == 403

    def test_create_word_forces_reload(self, loaded_store, online_backend, words_payload):
        """Should reload from the server even though it was fetched today."""
        online_backend.route("POST", "/word/new", status=201, payload={"id": 12})
        words_payload["1"].append({"id": 12, "word": "rato", "meaning": "mouse"})
        online_backend.route("GET", "/word/all", payload={"data": words_payload})

        result = loaded_store.create_word(
            "rato", "mouse", 1, attachments=[UploadFile("rato.jpg", b"jpg")]
        )

        assert result.source is DataSource.REMOTE
        assert loaded_store.find_word(12).category_id == 1

    def test_update_word_moves_category(self, loaded_store, online_backend, words_payload):
        """Should reflect a word moved to another category after reload."""
        online_backend.route("PUT", "/word/details/10", payload={})
        moved = words_payload["1"].pop(0)
        words_payload["2"].append(moved)
        online_backend.route("GET", "/word/all", payload={"data": words_payload})

        loaded_store.update_word(10, category_id=2)

        assert loaded_store.find_word(10).category_id == 2
        assert [w.id for w in loaded_store.state.words_by_category["1"]] == [11]

    def test_attachment_mutations_reload(self, loaded_store, online_backend):
        online_backend.route("POST", "/word/attachment/20", payload={})
        online_backend.route("PUT", "/word/attachment/5", payload={})
        online_backend.route("DELETE", "/word/attachment/5", status=204)

        loaded_store.add_attachments(20, [UploadFile("b.png", b"b", "image/png")])
        loaded_store.update_attachment(5, "céu")
        loaded_store.delete_attachment(5)

        assert len(online_backend.calls_to("GET", "/word/all")) == 4

    def test_mutation_without_session_raises(self, cache, bundled, test_config):
        """Should refuse mutations before login."""
        store = DictionaryStore(ApiService(test_config), cache, bundled, lambda: False)
        with pytest.raises(AuthenticationError):
            store.delete_word(1)

    def test_failed_words_write_keeps_cached_pair(self, loaded_store, online_backend, cache):
        """Should not leave new categories next to old words in the cache."""
        old_categories = cache.read_json(CATEGORIES_KEY)
        old_words = cache.read_json(WORDS_KEY)
        old_stamp = cache.read_timestamp(WORDS_LAST_FETCH_KEY)
        new_categories = {"categories": [{"id": 5, "name": "X"}]}
        online_backend.route("GET", "/category/all", payload=new_categories)
        online_backend.route("GET", "/word/all", payload={"data": {"5": []}})
        real_set_item = cache.storage.set_item

        def failing_set_item(key, value):
            if key == WORDS_KEY:
                raise StorageError("disk full")
            real_set_item(key, value)

        with patch.object(cache.storage, "set_item", side_effect=failing_set_item):
            result = loaded_store.load(force_remote=True)

        assert result.source is DataSource.REMOTE
        assert cache.read_json(CATEGORIES_KEY) == old_categories
        assert cache.read_json(WORDS_KEY) == old_words
        assert cache.read_timestamp(WORDS_LAST_FETCH_KEY) == old_stamp


# ---------------------------------------------------------------------------
# TestBookmarks
# ---------------------------------------------------------------------------


class TestBookmarks:
    """Tests for bookmarking words."""

    def test_bookmarks_sorted_by_word(self, loaded_store):
        loaded_store.bookmark_word(loaded_store.find_word(20))
        loaded_store.bookmark_word(loaded_store.find_word(10))
        loaded_store.bookmark_word(loaded_store.find_word(11))

        assert [w.word for w in loaded_store.state.bookmarks] == ["azul", "cão", "gato"]

    def test_duplicate_bookmark_skipped(self, loaded_store, recording_listener):
        """Should ignore a word that is already bookmarked."""
        word = loaded_store.find_word(10)
        assert loaded_store.bookmark_word(word) is True
        loaded_store.subscribe(recording_listener)

        assert loaded_store.bookmark_word(word) is False

        assert len(loaded_store.state.bookmarks) == 1
        assert recording_listener.states == []

    def test_remove_bookmark(self, loaded_store, cache):
        loaded_store.bookmark_word(loaded_store.find_word(10))

        assert loaded_store.remove_bookmark(10) is True
        assert loaded_store.remove_bookmark(10) is False

        assert loaded_store.state.bookmarks == []
        assert cache.read_json(BOOKMARKS_KEY) == []

    def test_bookmarks_survive_restart(self, loaded_store, api, cache, bundled):
        """Should restore saved bookmarks with their owning category."""
        loaded_store.bookmark_word(loaded_store.find_word(20))

        restarted = DictionaryStore(api, cache, bundled, is_privileged=lambda: False)
        bookmarks = restarted.load_bookmarks()

        assert [w.id for w in bookmarks] == [20]
        assert bookmarks[0].category_id == 2
        assert restarted.is_bookmarked(20) is True

    def test_corrupt_bookmarks_start_empty(self, dictionary_store, cache):
        cache.storage.set_item(BOOKMARKS_KEY, "{oops")
        assert dictionary_store.load_bookmarks() == []

    def test_deleting_word_removes_bookmark(self, loaded_store, online_backend, cache):
        online_backend.route("DELETE", "/word/10", status=204)
        loaded_store.bookmark_word(loaded_store.find_word(10))

        loaded_store.delete_word(10)

        assert loaded_store.state.bookmarks == []
        assert cache.read_json(BOOKMARKS_KEY) == []

    def test_reload_updates_bookmarked_word(self, loaded_store, online_backend, words_payload):
        """Should show the reloaded version of a bookmarked word."""
        loaded_store.bookmark_word(loaded_store.find_word(10))
        words_payload["1"][0]["meaning"] = "small cat"
        online_backend.route("GET", "/word/all", payload={"data": words_payload})

        loaded_store.load(force_remote=True)

        assert loaded_store.state.bookmarks[0].meaning == "small cat"

    def test_fresh_reload_drops_deleted_word(self, loaded_store, online_backend, cache):
        loaded_store.bookmark_word(loaded_store.find_word(10))
        online_backend.route("GET", "/word/all", payload={"data": {"1": [], "2": []}})

        loaded_store.load(force_remote=True)

        assert loaded_store.state.bookmarks == []
        assert cache.read_json(BOOKMARKS_KEY) == []

    def test_fallback_load_keeps_bookmarks(self, loaded_store, online_backend, api, cache, bundled):
        """Should keep bookmarks missing from older fallback data."""
        loaded_store.bookmark_word(loaded_store.find_word(10))
        online_backend.fail("GET", "/category/all", requests.exceptions.ConnectionError())
        cache.storage.remove_item(CATEGORIES_KEY)

        result = loaded_store.load(force_remote=True)

        assert result.source is DataSource.BUNDLED
        assert [w.id for w in loaded_store.state.bookmarks] == [10]
