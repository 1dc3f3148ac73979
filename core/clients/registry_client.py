"""
Remote registry client: the registry operation set over HTTP.
"""
from typing import Any, Dict, List, Optional, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as SchemaError

from core.clients.base_client import BaseHTTPClient
from core.errors import ERROR_KIND_HEADER, MalformedResponseError, ValidationError, error_from_wire
from core.logging import log
from core.models import (
    BotFilter,
    BotInsertArgs,
    BotPatch,
    BotView,
    ListenerFilter,
    ListenerInsertArgs,
    ListenerPatch,
    ListenerView,
)
from core.registry.facade import RegistryFacade
from core.registry.pagination import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT

ViewT = TypeVar("ViewT", bound=BaseModel)


def _segment(value: str, label: str) -> str:
    # An empty id cannot be addressed as a path segment
    if not value or not value.strip():
        raise ValidationError(f"{label} cannot be empty.")
    return quote(value, safe="")


class RemoteRegistryClient(BaseHTTPClient, RegistryFacade):
    """
    Remote facade talking to a running registry server.

    Responses use the ``{success, data, error}`` envelope. Error responses are
    turned back into the ``RegistryError`` subclass named by the
    ``X-Error-Kind`` header, so callers handle remote and local failures the
    same way.

    Example:
        >>> with RemoteRegistryClient("http://localhost:7762") as client:
        ...     client.list_bots(BotFilter(exchange="Binance"))
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ):
        if base_url is None or timeout is None:
            from core.settings.config import settings
            base_url = base_url or settings.api_url
            timeout = timeout or settings.request_timeout
        super().__init__({"base_url": base_url, "timeout": timeout}, client=client)

    # =========================================================================
    # Envelope handling
    # =========================================================================

    def _call(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        log.debug(f"{method} {path} params={params or {}}")
        response = self._request(method, path, json=json, params=params)

        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedResponseError(
                f"{method} {path} returned a non-JSON body (HTTP {response.status_code})"
            ) from exc

        if not isinstance(body, dict):
            raise MalformedResponseError(f"{method} {path} returned an unexpected body: {body!r}")

        if response.is_error or body.get("success") is False:
            message = body.get("error") or body.get("detail") or ""
            raise error_from_wire(response.status_code, str(message), response.headers.get(ERROR_KIND_HEADER))

        if "success" not in body or "data" not in body:
            raise MalformedResponseError(f"{method} {path} returned a body without a response envelope")
        return body["data"]

    @staticmethod
    def _parse(model: Type[ViewT], data: Any) -> ViewT:
        try:
            return model.model_validate(data)
        except SchemaError as exc:
            raise MalformedResponseError(f"Unexpected {model.__name__} payload: {exc}") from exc

    @staticmethod
    def _parse_list(model: Type[ViewT], data: Any) -> List[ViewT]:
        try:
            return TypeAdapter(List[model]).validate_python(data)
        except SchemaError as exc:
            raise MalformedResponseError(f"Unexpected {model.__name__} list payload: {exc}") from exc

    @staticmethod
    def _query(criteria: Dict[str, Any], page: Optional[int] = None, limit: Optional[int] = None) -> Dict[str, Any]:
        params = dict(criteria)
        if page is not None:
            params["page"] = page
        if limit is not None:
            params["limit"] = limit
        return params

    # =========================================================================
    # Bots
    # =========================================================================

    def create_bot(self, args: BotInsertArgs) -> BotView:
        data = self._call("POST", "/bots", json=args.model_dump(mode="json", exclude_none=True))
        return self._parse(BotView, data)

    def list_bots(
        self,
        filters: Optional[BotFilter] = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> List[BotView]:
        criteria = filters.criteria() if filters else {}
        data = self._call("GET", "/bots", params=self._query(criteria, page, limit))
        return self._parse_list(BotView, data)

    def get_bot(self, bot_id: str) -> BotView:
        data = self._call("GET", f"/bots/{_segment(bot_id, 'Bot ID')}")
        return self._parse(BotView, data)

    def update_bot(self, bot_id: str, patch: BotPatch) -> BotView:
        data = self._call("PUT", f"/bots/{_segment(bot_id, 'Bot ID')}", json=patch.changes())
        return self._parse(BotView, data)

    def delete_bot(self, bot_id: str) -> BotView:
        data = self._call("DELETE", f"/bots/{_segment(bot_id, 'Bot ID')}")
        return self._parse(BotView, data)

    # =========================================================================
    # Listeners
    # =========================================================================

    def add_listener(self, bot_id: str, args: ListenerInsertArgs) -> ListenerView:
        data = self._call(
            "POST",
            f"/bots/{_segment(bot_id, 'Bot ID')}/listeners",
            json=args.model_dump(mode="json", exclude_none=True),
        )
        return self._parse(ListenerView, data)

    def list_listeners(
        self,
        bot_id: str,
        filters: Optional[ListenerFilter] = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> List[ListenerView]:
        criteria = filters.criteria() if filters else {}
        data = self._call(
            "GET",
            f"/bots/{_segment(bot_id, 'Bot ID')}/listeners",
            params=self._query(criteria, page, limit),
        )
        return self._parse_list(ListenerView, data)

    def get_listener(self, bot_id: str, listener_id: str) -> ListenerView:
        path = f"/bots/{_segment(bot_id, 'Bot ID')}/listeners/{_segment(listener_id, 'Listener ID')}"
        return self._parse(ListenerView, self._call("GET", path))

    def update_listener(self, bot_id: str, listener_id: str, patch: ListenerPatch) -> ListenerView:
        path = f"/bots/{_segment(bot_id, 'Bot ID')}/listeners/{_segment(listener_id, 'Listener ID')}"
        return self._parse(ListenerView, self._call("PUT", path, json=patch.changes()))

    def delete_listener(self, bot_id: str, listener_id: str) -> ListenerView:
        path = f"/bots/{_segment(bot_id, 'Bot ID')}/listeners/{_segment(listener_id, 'Listener ID')}"
        return self._parse(ListenerView, self._call("DELETE", path))

    def delete_listeners(self, bot_id: str, filters: Optional[ListenerFilter] = None) -> List[ListenerView]:
        criteria = filters.criteria() if filters else {}
        data = self._call("DELETE", f"/bots/{_segment(bot_id, 'Bot ID')}/listeners", params=self._query(criteria))
        return self._parse_list(ListenerView, data)
