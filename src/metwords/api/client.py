"""HTTP client for the vocabulary backend.

The client looks up words, tracks the user's vocabulary ("meets") and stores
scenes. Failures are reported as error codes on the returned results and never
raised to the caller. The meets mapping is cached until a mutating request
succeeds.
"""

from typing import Any, Dict, Mapping, Optional

import requests
from requests.utils import requote_uri

from metwords.shared import (
    NETWORK_ERROR_CODE,
    ClientConfig,
    FetchResult,
    QueryResult,
    get_logger,
)


class MetwordsClient:
    """Blocking client for the vocabulary backend, one request per user action."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        http: Optional[requests.Session] = None,
        session_id: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Endpoint configuration
            http: Optional ``requests.Session`` to send requests with
            session_id: Optional session identifier for logging
        """
        self.config = config or ClientConfig()
        self.http = http if http is not None else requests.Session()
        self.logger = get_logger(__name__, session_id, "client")
        self._meets: Dict[str, Any] = {}
        self._valid = False

    def __enter__(self) -> "MetwordsClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.http.close()

    @property
    def cache_valid(self) -> bool:
        return self._valid

    def invalidate(self) -> None:
        """Force the next ``get_meets`` call to refetch."""
        self._valid = False

    def fetch_data(
        self,
        url: str,
        method: str = "GET",
        json_body: Optional[Mapping[str, Any]] = None,
    ) -> FetchResult:
        """Send one request and unwrap the ``data`` member of the JSON reply.

        Returns:
            FetchResult whose ``error_code`` is False on success, the HTTP
            status on an error response, or 499 when no usable response
            arrived
        """
        try:
            response = self.http.request(
                method,
                requote_uri(url),
                json=json_body,
                timeout=self.config.timeout_seconds,
            )
            if not response.ok:
                self.logger.info(
                    "Backend returned an error status",
                    extra={"url": url, "method": method, "status": response.status_code},
                )
                return FetchResult(data=None, error_code=response.status_code)
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            self.logger.warning(
                "Backend request failed",
                extra={"url": url, "method": method, "error": str(e)},
            )
            return FetchResult(data=None, error_code=NETWORK_ERROR_CODE)

        data = payload.get("data") if isinstance(payload, dict) else None
        return FetchResult(data=None if data == "" else data)

    def query(self, word: str) -> QueryResult:
        """Look up the definitions of ``word``."""
        fetched = self.fetch_data(self.config.url(self.config.query_path, word))
        return QueryResult.from_fetch(word, fetched)

    def get_meets(self) -> Dict[str, Any]:
        """Get the user's vocabulary, served from cache while it is valid.

        A failed refresh returns the last mapping that was fetched.
        """
        if self._valid:
            return self._meets

        url = self.config.url(self.config.meets_path)
        try:
            response = self.http.get(requote_uri(url), timeout=self.config.timeout_seconds)
            if response.status_code != 200:
                self.logger.info(
                    "Could not refresh meets",
                    extra={"status": response.status_code},
                )
                return self._meets
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            self.logger.warning("Could not refresh meets", extra={"error": str(e)})
            return self._meets

        data = payload.get("data") if isinstance(payload, dict) else None
        if data is not None and not isinstance(data, dict):
            self.logger.warning(
                "Could not refresh meets",
                extra={"error": f"expected an object, got {type(data).__name__}"},
            )
            return self._meets
        self._meets = dict(data or {})
        self._valid = True
        return self._meets

    def _mutate(self, url: str, method: str,
                json_body: Optional[Mapping[str, Any]] = None) -> FetchResult:
        result = self.fetch_data(url, method, json_body)
        if result.ok:
            self.invalidate()
        return result

    def add_scene(self, scene: Mapping[str, Any]) -> FetchResult:
        """Store a scene (``id``, ``url``, ``text``) for a vocabulary entry."""
        body = {"id": scene.get("id"), "url": scene.get("url"), "text": scene.get("text")}
        return self._mutate(self.config.url(self.config.add_scene_path), "POST", body)

    def toggle_known(self, meet_id: int) -> FetchResult:
        """Flip the known/unknown state of a vocabulary entry."""
        return self._mutate(self.config.url(self.config.known_path, str(meet_id)), "POST")

    def forget_scene(self, scene_id: int) -> FetchResult:
        """Delete a stored scene."""
        return self._mutate(
            self.config.url(self.config.forget_scene_path, str(scene_id)), "DELETE"
        )

    def dispatch(self, message: Mapping[str, Any]) -> Optional[Any]:
        """Route an action message to the matching request.

        Messages look like ``{"action": "query", "word": "apple"}``. Unknown
        actions return None.
        """
        action = message.get("action")
        if action == "query":
            return self.query(message.get("word", "")).to_dict()
        if action == "getMeets":
            return self.get_meets()
        if action == "addScene":
            return self.add_scene(message.get("scene") or {}).to_dict()
        if action == "forgetScene":
            return self.forget_scene(message.get("id")).to_dict()
        if action == "toggleKnown":
            return self.toggle_known(message.get("id")).to_dict()

        self.logger.debug("Ignoring unknown action", extra={"action": action})
        return None
