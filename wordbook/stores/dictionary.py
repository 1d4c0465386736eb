"""State and admin operations for categories and words."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from wordbook.exceptions import PayloadError, StorageError
from wordbook.models import (
    Category,
    DataSource,
    DictionaryData,
    LoadResult,
    UploadFile,
    Word,
)
from wordbook.services.api_service import ApiService
from wordbook.services.bundled_data import BundledDataService
from wordbook.services.cache_service import (
    BOOKMARKS_KEY,
    CATEGORIES_KEY,
    WORDS_KEY,
    WORDS_LAST_FETCH_KEY,
    CacheService,
)
from wordbook.services.payloads import (
    dump_categories,
    dump_words,
    dump_words_by_category,
    parse_categories,
    parse_words,
    parse_words_by_category,
)
from wordbook.services.tiered_loader import TieredLoader
from wordbook.stores.base import Store, require_success
from wordbook.utils import utc_now_iso

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DictionaryState:
    """Snapshot of the dictionary as shown by the UI."""

    categories: list[Category] = field(default_factory=list)
    words_by_category: dict[str, list[Word]] = field(default_factory=dict)
    word_index: dict[int, Word] = field(default_factory=dict, repr=False)
    word_in_focus: Word | None = None
    bookmarks: list[Word] = field(default_factory=list)
    is_loading: bool = False
    last_fetch: str | None = None
    source: DataSource | None = None  # None until the first load

    @property
    def is_stale(self) -> bool:
        """True when the data shown did not come from the server on the last load."""
        return self.source is not None and self.source is not DataSource.REMOTE


class DictionaryStore(Store[DictionaryState]):
    """Categories and words, loaded through the tiered loader.

    Reads follow the remote -> cache -> bundled path. Admin mutations go to
    the API and then refresh the affected part of the state. Bookmarks are
    kept on the device only.
    """

    def __init__(
        self,
        api: ApiService,
        cache: CacheService,
        bundled: BundledDataService,
        is_privileged: Callable[[], bool],
        clock: Callable[[], str] = utc_now_iso,
    ):
        """Initialize the store.

        Args:
            api: API client
            cache: On-device payload cache
            bundled: Reader for the shipped dataset
            is_privileged: Whether the session bypasses the daily fetch gate
            clock: Returns the current time as ISO-8601
        """
        super().__init__(DictionaryState())
        self.api = api
        self.cache = cache
        self.loader: TieredLoader[DictionaryData] = TieredLoader(
            name="dictionary",
            cache=cache,
            timestamp_key=WORDS_LAST_FETCH_KEY,
            fetch_remote=self._fetch_remote,
            read_cache=self._read_cache,
            write_cache=self._write_cache,
            load_bundled=bundled.load_dictionary,
            empty=DictionaryData,
            is_privileged=is_privileged,
            clock=clock,
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def load(self, force_remote: bool = False) -> LoadResult:
        """Load categories and words from the first available tier.

        Never raises for network, decode or storage failures.

        Args:
            force_remote: Skip the once-per-day gate (used after mutations)
        """
        self._set_state(is_loading=True)
        try:
            result = self.loader.load(force_remote=force_remote)
        finally:
            self._set_state(is_loading=False)

        data: DictionaryData = result.payload
        words_by_category = {key: list(words) for key, words in data.words_by_category.items()}
        index = _index_words(words_by_category)
        bookmarks = self._rebase_bookmarks(index, drop_missing=result.is_fresh)
        bookmarks_changed = bookmarks != self.state.bookmarks

        focus = self.state.word_in_focus
        self._set_state(
            categories=list(data.categories),
            words_by_category=words_by_category,
            word_index=index,
            word_in_focus=None if focus is None else index.get(focus.id),
            bookmarks=bookmarks,
            last_fetch=result.last_fetch,
            source=result.source,
        )
        if bookmarks_changed:
            self._persist_bookmarks(bookmarks)
        logger.info(f"Dictionary ready from {result.source.value}: {data}")
        return result

    def refresh_categories(self) -> bool:
        """Fetch only the category list and replace it in memory and on disk.

        Words are left untouched so a partial refresh never clobbers them.
        The shared fetch timestamp is not stamped, since words were not
        refreshed.

        Returns:
            True if the categories were refreshed from the server
        """
        response = self.api.get_categories()
        if not response.success:
            logger.warning(f"Category refresh failed: {response.error}")
            return False

        try:
            categories = parse_categories(response.data)
        except PayloadError as e:
            logger.warning(f"Category refresh returned bad data: {e}")
            return False

        self._set_state(categories=categories)
        try:
            self.cache.write_json(CATEGORIES_KEY, dump_categories(categories))
        except StorageError as e:
            logger.warning(f"Could not persist refreshed categories: {e}")
        return True

    def set_word_in_focus(self, word: Word | None) -> None:
        self._set_state(word_in_focus=word)

    def find_word(self, word_id: int) -> Word | None:
        """Look up a word by id across all categories."""
        return self.state.word_index.get(word_id)

    def category_of(self, word: Word) -> Category | None:
        """Category owning a word."""
        for category in self.state.categories:
            if category.id == word.category_id:
                return category
        return None

    def sorted_categories(self) -> list[Category]:
        return sorted(self.state.categories, key=lambda c: c.name.casefold())

    def filter_words(self, category_id: int | str, query: str = "") -> list[Word]:
        """Words of one category matching a search query, sorted by headword.

        Args:
            category_id: Category to list
            query: Case-insensitive substring of the headword or meaning;
                empty matches everything
        """
        words = self.state.words_by_category.get(str(category_id), [])
        if query:
            words = [word for word in words if word.matches(query)]
        return sorted(words, key=lambda w: w.word.casefold())

    def search(self, query: str = "") -> dict[Category, list[Word]]:
        """Matching words per category, omitting categories with no match.

        Categories are ordered by name.
        """
        results: dict[Category, list[Word]] = {}
        for category in self.sorted_categories():
            words = self.filter_words(category.id, query)
            if words:
                results[category] = words
        return results

    # ------------------------------------------------------------------
    # Bookmarks
    # ------------------------------------------------------------------

    def load_bookmarks(self) -> list[Word]:
        """Read the bookmarks saved on the device.

        Absent or unreadable bookmarks start out empty.
        """
        try:
            raw = self.cache.read_json(BOOKMARKS_KEY)
            bookmarks = [] if raw is None else parse_words(raw)
        except (StorageError, PayloadError) as e:
            logger.warning(f"Could not load bookmarks: {e}")
            bookmarks = []

        bookmarks = _sort_bookmarks(bookmarks)
        self._set_state(bookmarks=bookmarks)
        return bookmarks

    def is_bookmarked(self, word_id: int) -> bool:
        return any(word.id == word_id for word in self.state.bookmarks)

    def bookmark_word(self, word: Word) -> bool:
        """Bookmark a word, keeping the list sorted by headword.

        The loaded version of the word is stored when the dictionary has
        one.

        Returns:
            False if the word was already bookmarked
        """
        if self.is_bookmarked(word.id):
            return False

        current = self.state.word_index.get(word.id, word)
        bookmarks = _sort_bookmarks([*self.state.bookmarks, current])
        self._set_state(bookmarks=bookmarks)
        self._persist_bookmarks(bookmarks)
        return True

    def remove_bookmark(self, word_id: int) -> bool:
        """Remove a bookmark.

        Returns:
            False if the word was not bookmarked
        """
        if not self.is_bookmarked(word_id):
            return False

        bookmarks = [word for word in self.state.bookmarks if word.id != word_id]
        self._set_state(bookmarks=bookmarks)
        self._persist_bookmarks(bookmarks)
        return True

    # ------------------------------------------------------------------
    # Admin mutations
    # ------------------------------------------------------------------

    def create_category(self, name: str) -> None:
        """Create a category, then refresh the category list.

        Raises:
            ApiError: If the server rejects the request
        """
        require_success(self.api.create_category(name), f"create category '{name}'")
        self.refresh_categories()

    def update_category(self, category_id: int, name: str) -> None:
        """Rename a category, then refresh the category list.

        Raises:
            ApiError: If the server rejects the request
        """
        require_success(
            self.api.update_category(category_id, name), f"update category {category_id}"
        )
        self.refresh_categories()

    def create_word(
        self,
        name: str,
        meaning: str,
        category_id: int,
        translation: str | None = None,
        attachments: list[UploadFile] | None = None,
    ) -> LoadResult:
        """Create a word and reload the dictionary from the server.

        Raises:
            ApiError: If the server rejects the request
        """
        require_success(
            self.api.create_word(name, meaning, category_id, translation, attachments),
            f"create word '{name}'",
        )
        return self.load(force_remote=True)

    def update_word(
        self,
        word_id: int,
        name: str | None = None,
        meaning: str | None = None,
        translation: str | None = None,
        category_id: int | None = None,
    ) -> LoadResult:
        """Edit a word (possibly moving it to another category) and reload.

        Raises:
            ApiError: If the server rejects the request
        """
        require_success(
            self.api.update_word(word_id, name, meaning, translation, category_id),
            f"update word {word_id}",
        )
        return self.load(force_remote=True)

    def delete_word(self, word_id: int) -> None:
        """Delete a word on the server and drop it from every category bucket.

        The focused word is cleared only if it was the deleted one, and its
        bookmark is removed. The cached words blob is rewritten; the fetch
        timestamp is not.

        Raises:
            ApiError: If the server rejects the request
        """
        require_success(self.api.delete_word(word_id), f"delete word {word_id}")

        state = self.state
        remaining = {
            key: [word for word in words if word.id != word_id]
            for key, words in state.words_by_category.items()
        }
        focus = state.word_in_focus
        if focus is not None and focus.id == word_id:
            focus = None

        self._set_state(
            words_by_category=remaining,
            word_index=_index_words(remaining),
            word_in_focus=focus,
        )
        try:
            self.cache.write_json(WORDS_KEY, dump_words_by_category(remaining))
        except StorageError as e:
            logger.warning(f"Could not persist words after deleting {word_id}: {e}")
        self.remove_bookmark(word_id)

    def add_attachments(self, word_id: int, attachments: list[UploadFile]) -> LoadResult:
        """Append media to a word and reload.

        Raises:
            ApiError: If the server rejects the request
        """
        require_success(
            self.api.add_word_attachments(word_id, attachments),
            f"add attachments to word {word_id}",
        )
        return self.load(force_remote=True)

    def update_attachment(self, attachment_id: int, source: str) -> LoadResult:
        """Change an attachment's caption and reload.

        Raises:
            ApiError: If the server rejects the request
        """
        require_success(
            self.api.update_word_attachment(attachment_id, source),
            f"update attachment {attachment_id}",
        )
        return self.load(force_remote=True)

    def delete_attachment(self, attachment_id: int) -> LoadResult:
        """Remove an attachment and reload.

        Raises:
            ApiError: If the server rejects the request
        """
        require_success(
            self.api.delete_word_attachment(attachment_id),
            f"delete attachment {attachment_id}",
        )
        return self.load(force_remote=True)

    # ------------------------------------------------------------------
    # Tier callbacks
    # ------------------------------------------------------------------

    def _fetch_remote(self) -> DictionaryData:
        categories = require_success(self.api.get_categories(), "fetch categories")
        words = require_success(self.api.get_words(), "fetch words")
        return DictionaryData(
            categories=parse_categories(categories.data),
            words_by_category=parse_words_by_category(words.data),
        )

    def _read_cache(self) -> DictionaryData | None:
        categories = self.cache.read_json(CATEGORIES_KEY)
        words = self.cache.read_json(WORDS_KEY)
        if categories is None or words is None:
            return None
        return DictionaryData(
            categories=parse_categories(categories),
            words_by_category=parse_words_by_category(words),
        )

    def _write_cache(self, data: DictionaryData) -> None:
        self.cache.write_json_group(
            {
                CATEGORIES_KEY: dump_categories(data.categories),
                WORDS_KEY: dump_words_by_category(data.words_by_category),
            }
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _rebase_bookmarks(self, index: dict[int, Word], drop_missing: bool) -> list[Word]:
        """Swap bookmarked words for their reloaded versions.

        Words missing from a fresh server payload were deleted and lose
        their bookmark; fallback data may simply be older, so its gaps are
        kept.
        """
        bookmarks = []
        for word in self.state.bookmarks:
            current = index.get(word.id)
            if current is not None:
                bookmarks.append(current)
            elif not drop_missing:
                bookmarks.append(word)
        return _sort_bookmarks(bookmarks)

    def _persist_bookmarks(self, bookmarks: list[Word]) -> None:
        try:
            self.cache.write_json(BOOKMARKS_KEY, dump_words(bookmarks))
        except StorageError as e:
            logger.warning(f"Could not persist bookmarks: {e}")


def _index_words(words_by_category: dict[str, list[Word]]) -> dict[int, Word]:
    return {word.id: word for words in words_by_category.values() for word in words}


def _sort_bookmarks(bookmarks: list[Word]) -> list[Word]:
    return sorted(bookmarks, key=lambda w: w.word.casefold())
