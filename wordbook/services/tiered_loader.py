"""Remote -> on-device cache -> bundled dataset read path."""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, wait
from typing import Generic, TypeVar

from wordbook.exceptions import ApiError, BundledDataError, PayloadError, StorageError
from wordbook.models import DataSource, FailureKind, LoadResult, TierResult
from wordbook.services.cache_service import CacheService
from wordbook.services.freshness import should_fetch_remote
from wordbook.utils import utc_now_iso

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TieredLoader(Generic[T]):
    """Load one entity type through three tiers, stopping at the first success.

    1. Remote: only when the freshness gate allows it (or a reload is
       forced). A success is written through to the cache and stamps the
       last-fetch timestamp.
    2. Cache: the payload saved by the last remote success.
    3. Bundled: the dataset shipped with the package.

    Network, decode and storage failures never escape ``load``; each one
    demotes the load to the next tier. Concurrent ``load`` calls share a
    single in-flight run.
    """

    def __init__(
        self,
        name: str,
        cache: CacheService,
        timestamp_key: str,
        fetch_remote: Callable[[], T],
        read_cache: Callable[[], T | None],
        write_cache: Callable[[T], None],
        load_bundled: Callable[[], T],
        empty: Callable[[], T],
        is_privileged: Callable[[], bool],
        clock: Callable[[], str] = utc_now_iso,
    ):
        """Initialize the loader.

        Args:
            name: Entity name used in log messages (e.g. "texts")
            cache: Cache holding the last-fetch timestamp
            timestamp_key: Storage key of the last-fetch timestamp
            fetch_remote: Fetches and decodes the remote payload; raises
                ApiError on transport/HTTP failure, PayloadError on bad shape
            read_cache: Reads the cached payload, None if nothing is stored;
                raises StorageError or PayloadError
            write_cache: Persists a payload; raises StorageError
            load_bundled: Reads the shipped dataset; raises BundledDataError
            empty: Builds an empty payload for the terminal failure case
            is_privileged: Whether the current session bypasses the daily gate
            clock: Returns the current time as ISO-8601
        """
        self.name = name
        self._cache = cache
        self._timestamp_key = timestamp_key
        self._fetch_remote = fetch_remote
        self._read_cache = read_cache
        self._write_cache = write_cache
        self._load_bundled = load_bundled
        self._empty = empty
        self._is_privileged = is_privileged
        self._clock = clock

        self._lock = threading.Lock()
        self._in_flight: Future | None = None
        self._in_flight_forced = False

    @property
    def last_fetch(self) -> str | None:
        """Timestamp of the last successful remote fetch, if readable."""
        try:
            return self._cache.read_timestamp(self._timestamp_key)
        except StorageError as e:
            logger.warning(f"Cannot read last {self.name} fetch time: {e}")
            return None

    def load(self, force_remote: bool = False) -> LoadResult:
        """Load the payload from the first tier that can provide it.

        If another thread is already loading, wait for and return its
        result instead of starting a second run. A forced load only joins
        another forced run; behind a plain run it waits for that run to
        finish and then starts its own, so data written to the server
        before the call is always fetched.

        Args:
            force_remote: Skip the freshness gate (used after mutations)

        Returns:
            LoadResult with the payload and the tier it came from
        """
        while True:
            with self._lock:
                future = self._in_flight
                if future is None:
                    future = Future()
                    self._in_flight = future
                    self._in_flight_forced = force_remote
                    break
                joinable = self._in_flight_forced or not force_remote

            if joinable:
                logger.debug(f"Joining in-flight {self.name} load")
                return future.result()

            logger.debug(f"Waiting for in-flight {self.name} load before forced reload")
            wait([future])

        try:
            result = self._run(force_remote)
            future.set_result(result)
            return result
        except BaseException as e:
            future.set_exception(e)
            raise
        finally:
            with self._lock:
                self._in_flight = None
                self._in_flight_forced = False

    def _run(self, force_remote: bool) -> LoadResult:
        last_fetch = self.last_fetch

        remote = self._remote_tier(last_fetch, force_remote)
        if remote.ok:
            return self._write_through(remote.payload)
        if remote.failure is not FailureKind.SKIPPED:
            logger.warning(
                f"Remote {self.name} unavailable ({remote.failure.value}): {remote.detail}"
            )

        cached = self._cache_tier()
        if cached.ok:
            logger.info(f"Loaded {self.name} from on-device cache")
            return LoadResult(cached.payload, DataSource.CACHE, last_fetch)
        if cached.failure is FailureKind.MISSING:
            logger.debug(f"No cached {self.name} yet")
        else:
            logger.warning(
                f"Cached {self.name} unavailable ({cached.failure.value}): {cached.detail}"
            )

        bundled = self._bundled_tier()
        if bundled.ok:
            logger.info(f"Loaded {self.name} from bundled dataset")
            return LoadResult(bundled.payload, DataSource.BUNDLED, last_fetch)

        logger.error(f"Bundled {self.name} dataset unavailable: {bundled.detail}")
        return LoadResult(self._empty(), DataSource.NONE, last_fetch)

    def _remote_tier(self, last_fetch: str | None, force_remote: bool) -> TierResult:
        if not force_remote and not should_fetch_remote(last_fetch, self._is_privileged()):
            return TierResult.failed(FailureKind.SKIPPED, "already fetched today")

        logger.info(f"Fetching {self.name} from API")
        try:
            return TierResult.success(self._fetch_remote())
        except ApiError as e:
            return TierResult.failed(FailureKind.NETWORK, str(e))
        except PayloadError as e:
            return TierResult.failed(FailureKind.DECODE, str(e))

    def _cache_tier(self) -> TierResult:
        try:
            payload = self._read_cache()
        except StorageError as e:
            return TierResult.failed(FailureKind.STORAGE, str(e))
        except PayloadError as e:
            return TierResult.failed(FailureKind.DECODE, str(e))

        if payload is None:
            return TierResult.failed(FailureKind.MISSING)
        return TierResult.success(payload)

    def _bundled_tier(self) -> TierResult:
        try:
            return TierResult.success(self._load_bundled())
        except BundledDataError as e:
            return TierResult.failed(FailureKind.MISSING, str(e))

    def _write_through(self, payload: T) -> LoadResult:
        """Persist a fresh remote payload, then stamp the fetch time."""
        now = self._clock()
        try:
            self._write_cache(payload)
            self._cache.write_timestamp(self._timestamp_key, now)
        except StorageError as e:
            # Data is still fresh; only the on-device copy is behind
            logger.warning(f"Could not persist fetched {self.name}: {e}")

        logger.info(f"Loaded {self.name} from API")
        return LoadResult(payload, DataSource.REMOTE, now)
