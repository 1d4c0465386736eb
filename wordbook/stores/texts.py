"""State and admin operations for long-form texts."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from wordbook.exceptions import StorageError
from wordbook.models import DataSource, LoadResult, Text, UploadFile
from wordbook.services.api_service import ApiService
from wordbook.services.bundled_data import BundledDataService
from wordbook.services.cache_service import TEXTS_KEY, TEXTS_LAST_FETCH_KEY, CacheService
from wordbook.services.payloads import dump_texts, parse_texts
from wordbook.services.tiered_loader import TieredLoader
from wordbook.stores.base import Store, require_success
from wordbook.utils import utc_now_iso

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextsState:
    texts: list[Text] = field(default_factory=list)
    text_in_focus: Text | None = None
    is_loading: bool = False
    last_fetch: str | None = None
    source: DataSource | None = None


class TextsStore(Store[TextsState]):
    """Reading texts, loaded through the tiered loader.

    An empty text list from the server is a valid result, like an empty
    category or word list.
    """

    def __init__(
        self,
        api: ApiService,
        cache: CacheService,
        bundled: BundledDataService,
        is_privileged: Callable[[], bool],
        clock: Callable[[], str] = utc_now_iso,
    ):
        super().__init__(TextsState())
        self.api = api
        self.cache = cache
        self.loader: TieredLoader[list[Text]] = TieredLoader(
            name="texts",
            cache=cache,
            timestamp_key=TEXTS_LAST_FETCH_KEY,
            fetch_remote=self._fetch_remote,
            read_cache=self._read_cache,
            write_cache=self._write_cache,
            load_bundled=bundled.load_texts,
            empty=list,
            is_privileged=is_privileged,
            clock=clock,
        )

    def load(self, force_remote: bool = False) -> LoadResult:
        """Load texts from the first available tier. Never raises for I/O failures."""
        self._set_state(is_loading=True)
        try:
            result = self.loader.load(force_remote=force_remote)
        finally:
            self._set_state(is_loading=False)

        texts = list(result.payload)
        focus = self.state.text_in_focus
        if focus is not None:
            focus = next((text for text in texts if text.id == focus.id), None)

        self._set_state(
            texts=texts,
            text_in_focus=focus,
            last_fetch=result.last_fetch,
            source=result.source,
        )
        logger.info(f"{len(texts)} texts ready from {result.source.value}")
        return result

    def set_text_in_focus(self, text: Text | None) -> None:
        self._set_state(text_in_focus=text)

    def find_text(self, text_id: int) -> Text | None:
        return next((text for text in self.state.texts if text.id == text_id), None)

    def create_text(
        self,
        title: str,
        subtitle: str,
        content: str,
        cover: UploadFile | None = None,
    ) -> LoadResult:
        """Create a text and reload from the server.

        Raises:
            ApiError: If the server rejects the request
        """
        require_success(
            self.api.create_text(title, subtitle, content, cover), f"create text '{title}'"
        )
        return self.load(force_remote=True)

    def update_text(
        self,
        text_id: int,
        title: str,
        subtitle: str,
        content: str,
        cover: UploadFile | None = None,
    ) -> LoadResult:
        """Replace a text's fields (and optionally its cover), then reload.

        Raises:
            ApiError: If the server rejects the request
        """
        require_success(
            self.api.update_text(text_id, title, subtitle, content, cover),
            f"update text {text_id}",
        )
        return self.load(force_remote=True)

    def delete_text(self, text_id: int) -> None:
        """Delete a text on the server and drop it locally.

        Raises:
            ApiError: If the server rejects the request
        """
        require_success(self.api.delete_text(text_id), f"delete text {text_id}")

        state = self.state
        remaining = [text for text in state.texts if text.id != text_id]
        focus = state.text_in_focus
        if focus is not None and focus.id == text_id:
            focus = None

        self._set_state(texts=remaining, text_in_focus=focus)
        try:
            self.cache.write_json(TEXTS_KEY, dump_texts(remaining))
        except StorageError as e:
            logger.warning(f"Could not persist texts after deleting {text_id}: {e}")

    def _fetch_remote(self) -> list[Text]:
        response = require_success(self.api.get_texts(), "fetch texts")
        return parse_texts(response.data)

    def _read_cache(self) -> list[Text] | None:
        raw = self.cache.read_json(TEXTS_KEY)
        return None if raw is None else parse_texts(raw)

    def _write_cache(self, texts: list[Text]) -> None:
        self.cache.write_json(TEXTS_KEY, dump_texts(texts))
