"""Async HTTP client for the Form Builder API."""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:4000"


class FormApiError(Exception):
    """The API answered with a non-success status."""

    def __init__(self, operation: str, status_code: int, message: Optional[str] = None):
        self.operation = operation
        self.status_code = status_code
        super().__init__(message or f"{operation} failed: {status_code}")


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("error") or body.get("message")
    return None


class FormApiClient:
    """
    Client for the form, rating and export endpoints.

    Pass ``http_client`` to share a connection pool or to inject a transport
    in tests (it must carry its own ``base_url``); otherwise one is created
    and closed by ``aclose()``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 60.0,
    ):
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "FormApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _raise_for_status(self, operation: str, response: httpx.Response) -> None:
        if response.is_success:
            return
        raise FormApiError(operation, response.status_code, _error_message(response))

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------

    async def list_forms(self, include_unpublished: bool = False) -> List[Dict[str, Any]]:
        """``[{id, name, status?}]``; empty when the API reports failure."""
        params = {"includeUnpublished": "true"} if include_unpublished else None
        response = await self._client.get("/api/form/list", params=params)
        try:
            body = response.json()
        except ValueError:
            return []
        if isinstance(body, dict) and body.get("ok"):
            return body.get("data") or []
        logger.warning(f"Form list request failed with status {response.status_code}")
        return []

    async def load_form(self, form_id: str) -> Optional[Dict[str, Any]]:
        response = await self._client.get(f"/api/form/load/{quote(form_id, safe='')}")
        if not response.is_success:
            return None
        body = response.json()
        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    async def form_exists(self, form_id: str) -> bool:
        response = await self._client.get(f"/api/form/exists/{quote(form_id, safe='')}")
        if not response.is_success:
            return False
        body = response.json()
        return bool(body.get("data")) if isinstance(body, dict) else False

    async def save_form(self, spec: Dict[str, Any]) -> None:
        """Persist ``spec``; the server derives the id from its name."""
        response = await self._client.post("/api/form/save/", json=spec)
        self._raise_for_status("save", response)

    async def delete_form(self, form_id: str) -> None:
        response = await self._client.delete(f"/api/form/delete/{quote(form_id, safe='')}")
        self._raise_for_status("delete", response)

    # ------------------------------------------------------------------
    # Rating
    # ------------------------------------------------------------------

    async def rate_simple_field(
        self,
        question: str,
        value: str,
        examples: Optional[List[str]] = None,
        prompt_config: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"question": question, "value": value}
        if examples is not None:
            payload["examples"] = examples
        if prompt_config:
            payload["promptConfig"] = prompt_config
        response = await self._client.post("/api/llm/rate-simple-field", json=payload)
        self._raise_for_status("rate-simple-field", response)
        return response.json().get("data") or {}

    async def rate_detailed_row(
        self,
        question: str,
        attribute_name: str,
        attribute_value: str,
        row_data: Optional[Dict[str, Any]] = None,
        examples: Optional[List[str]] = None,
        prompt_config: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "question": question,
            "attributeName": attribute_name,
            "attributeValue": attribute_value,
            "rowData": row_data or {},
        }
        if examples is not None:
            payload["examples"] = examples
        if prompt_config:
            payload["promptConfig"] = prompt_config
        response = await self._client.post("/api/llm/rate-detailed-row", json=payload)
        self._raise_for_status("rate-detailed-row", response)
        return response.json().get("data") or {}

    async def rate_form(self, spec: Any, value: Dict[str, Any]) -> Dict[str, Any]:
        """``{ratings: {path: {comment, rate?}}}``."""
        response = await self._client.post("/api/llm/rate", json={"spec": spec, "value": value})
        self._raise_for_status("rate", response)
        return response.json().get("data") or {"ratings": {}}

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    async def export_pdf(self, spec: Dict[str, Any], value: Dict[str, Any]) -> bytes:
        response = await self._client.post(
            "/api/form/export-pdf", json={"spec": spec, "value": value}
        )
        self._raise_for_status("export-pdf", response)
        return response.content
