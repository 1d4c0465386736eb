"""Client for the dictionary REST API."""

import logging
from typing import Any

import requests

from wordbook.config import WordbookConfig
from wordbook.exceptions import AuthenticationError
from wordbook.models import ApiResponse, UploadFile

logger = logging.getLogger(__name__)


class ApiService:
    """Thin wrapper around the dictionary backend's REST endpoints.

    Every call returns an ApiResponse: transport errors, timeouts and
    non-2xx statuses are reported as ``success=False`` instead of raised.
    Mutation endpoints need a bearer token (see set_auth_token).
    """

    def __init__(self, config: WordbookConfig):
        """Initialize the API client.

        Args:
            config: Configuration providing the base URL and request timeout
        """
        self.config = config
        self._auth_token: str | None = None

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def set_auth_token(self, token: str | None) -> None:
        """Install (or clear, with None/empty) the bearer token for mutations."""
        self._auth_token = token or None

    @property
    def has_auth_token(self) -> bool:
        return self._auth_token is not None

    def login(self, email: str, password: str) -> ApiResponse:
        """POST /auth/login. On success ``data`` holds ``{"message", "token"}``."""
        return self._request("POST", "/auth/login", json={"email": email, "password": password})

    def register(self, name: str, email: str, password: str) -> ApiResponse:
        """POST /auth/register."""
        return self._request(
            "POST",
            "/auth/register",
            json={"name": name, "email": email, "password": password},
        )

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def get_categories(self) -> ApiResponse:
        return self._request("GET", "/category/all")

    def create_category(self, name: str) -> ApiResponse:
        return self._request("POST", "/category/new", json={"name": name}, auth=True)

    def update_category(self, category_id: int, name: str) -> ApiResponse:
        return self._request("PUT", f"/category/{category_id}", json={"name": name}, auth=True)

    # ------------------------------------------------------------------
    # Words
    # ------------------------------------------------------------------

    def get_words(self) -> ApiResponse:
        """GET /word/all. Words come back grouped by category id."""
        return self._request("GET", "/word/all")

    def create_word(
        self,
        name: str,
        meaning: str,
        category_id: int,
        translation: str | None = None,
        attachments: list[UploadFile] | None = None,
    ) -> ApiResponse:
        """POST /word/new as multipart form data.

        Args:
            name: Headword
            meaning: Definition text
            category_id: Owning category
            translation: Optional translation
            attachments: Optional media files sent with the word
        """
        form: dict[str, str] = {
            "name": name,
            "meaning": meaning,
            "category_id": str(category_id),
        }
        if translation:
            form["translation"] = translation

        files, sources = self._attachment_fields(attachments or [])
        form.update(sources)

        return self._request("POST", "/word/new", data=form, files=files or None, auth=True)

    def update_word(
        self,
        word_id: int,
        name: str | None = None,
        meaning: str | None = None,
        translation: str | None = None,
        category_id: int | None = None,
    ) -> ApiResponse:
        """PUT /word/details/{id} with only the fields that are given."""
        updates: dict[str, Any] = {}
        if name is not None:
            updates["name"] = name
        if meaning is not None:
            updates["meaning"] = meaning
        if translation is not None:
            updates["translation"] = translation
        if category_id is not None:
            updates["category_id"] = category_id

        return self._request("PUT", f"/word/details/{word_id}", json=updates, auth=True)

    def delete_word(self, word_id: int) -> ApiResponse:
        return self._request("DELETE", f"/word/{word_id}", auth=True)

    def add_word_attachments(self, word_id: int, attachments: list[UploadFile]) -> ApiResponse:
        """POST /word/attachment/{id}: append media to an existing word."""
        files, sources = self._attachment_fields(attachments)
        return self._request(
            "POST", f"/word/attachment/{word_id}", data=sources, files=files, auth=True
        )

    def update_word_attachment(self, attachment_id: int, source: str) -> ApiResponse:
        """PUT /word/attachment/{id}: change an attachment's caption."""
        return self._request(
            "PUT", f"/word/attachment/{attachment_id}", json={"source": source}, auth=True
        )

    def delete_word_attachment(self, attachment_id: int) -> ApiResponse:
        return self._request("DELETE", f"/word/attachment/{attachment_id}", auth=True)

    # ------------------------------------------------------------------
    # Texts
    # ------------------------------------------------------------------

    def get_texts(self) -> ApiResponse:
        return self._request("GET", "/text/all")

    def create_text(
        self,
        title: str,
        subtitle: str,
        content: str,
        cover: UploadFile | None = None,
    ) -> ApiResponse:
        """POST /text/new as multipart form data with an optional cover image."""
        form = {"title": title, "subtitle": subtitle, "content": content}
        files = {"cover": cover.as_multipart()} if cover else None
        return self._request("POST", "/text/new", data=form, files=files, auth=True)

    def update_text(
        self,
        text_id: int,
        title: str,
        subtitle: str,
        content: str,
        cover: UploadFile | None = None,
    ) -> ApiResponse:
        """PUT /text/{id} as multipart form data with an optional new cover."""
        form = {"title": title, "subtitle": subtitle, "content": content}
        files = {"cover": cover.as_multipart()} if cover else None
        return self._request("PUT", f"/text/{text_id}", data=form, files=files, auth=True)

    def delete_text(self, text_id: int) -> ApiResponse:
        return self._request("DELETE", f"/text/{text_id}", auth=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        data: dict[str, str] | None = None,
        files: dict[str, tuple[str, bytes, str]] | None = None,
        auth: bool = False,
    ) -> ApiResponse:
        """Send a request and wrap the outcome.

        Raises:
            AuthenticationError: If ``auth`` is set and no token is installed
        """
        headers = {"Accept": "application/json"}
        if auth:
            if not self._auth_token:
                raise AuthenticationError(f"{method} {path} requires an authenticated session")
            headers["Authorization"] = f"Bearer {self._auth_token}"

        url = f"{self.config.api_base_url}{path}"

        try:
            response = requests.request(
                method,
                url,
                headers=headers,
                json=json,
                data=data,
                files=files,
                timeout=self.config.request_timeout,
            )
        except requests.exceptions.Timeout:
            logger.warning(f"{method} {path} timed out after {self.config.request_timeout}s")
            return ApiResponse(success=False, error="Request timed out")
        except requests.RequestException as e:
            logger.warning(f"{method} {path} failed: {e}")
            return ApiResponse(success=False, error=f"Network error: {e}")

        return self._handle_response(method, path, response)

    @staticmethod
    def _handle_response(method: str, path: str, response: requests.Response) -> ApiResponse:
        status = response.status_code
        if not 200 <= status < 300:
            logger.warning(f"{method} {path} returned HTTP {status}")
            return ApiResponse(
                success=False,
                data=response.text,
                error=f"HTTP {status}: {response.reason}",
                status_code=status,
            )

        # Deletes may legitimately return an empty body
        if not response.content:
            return ApiResponse(success=True, data=None, status_code=status)

        try:
            payload = response.json()
        except ValueError as e:
            logger.warning(f"{method} {path} returned invalid JSON: {e}")
            return ApiResponse(
                success=False, error=f"Invalid JSON response: {e}", status_code=status
            )

        return ApiResponse(success=True, data=payload, status_code=status)

    @staticmethod
    def _attachment_fields(
        attachments: list[UploadFile],
    ) -> tuple[dict[str, tuple[str, bytes, str]], dict[str, str]]:
        """Build the ``attachment_<i>`` file fields and their empty source captions."""
        files: dict[str, tuple[str, bytes, str]] = {}
        sources: dict[str, str] = {}
        for index, attachment in enumerate(attachments):
            field_name = f"attachment_{index}"
            files[field_name] = attachment.as_multipart()
            # Server fills in the caption later
            sources[f"{field_name}_source"] = ""
        return files, sources
