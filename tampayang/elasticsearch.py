"""A thin JSON client for the search server's index and document endpoints."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import requests

from .errors import ElasticsearchError

INDEX_DELETED_MESSAGE = "Index deleted successfully"
DOCUMENT_NOT_FOUND_MESSAGE = "Document not found"


def _segment(value: str) -> str:
    return quote(str(value), safe="")


def _is_success(status_code: int) -> bool:
    return 200 <= status_code <= 299


def _error_reason(body: Any) -> Any:
    """Pull ``error.reason`` out of an error body, or return the body itself."""
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and "reason" in error:
            return error["reason"]
    return body


class ElasticsearchClient:
    """Creates and removes indices and stores, updates, fetches and deletes documents."""

    def __init__(
        self,
        scheme: str,
        host: str,
        port: int | str,
        username: str | None = None,
        password: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = f"{scheme}://{host}:{port}"
        self.session = session or requests.Session()
        self._auth = (username, password or "") if username else None

    def _request(self, method: str, path: str, body: Any = None) -> requests.Response:
        return self.session.request(
            method,
            f"{self.base_url}/{path}" if path else f"{self.base_url}/",
            json=body,
            auth=self._auth,
        )

    def ping(self) -> bool:
        """Return True if the server answers the root endpoint with status 200."""
        try:
            response = self._request("HEAD", "")
        except requests.RequestException:
            return False
        return response.status_code == 200

    def create_index(self, index: str, properties: dict[str, Any]) -> dict[str, Any]:
        """Create ``index`` with the given field mappings."""
        response = self._request(
            "PUT", _segment(index), {"mappings": {"properties": properties}}
        )
        body = response.json()
        if response.status_code != 200:
            raise ElasticsearchError(response.status_code, _error_reason(body))
        return {"status_code": response.status_code, "result": body}

    def delete_index(self, index: str) -> dict[str, Any]:
        """Delete ``index``."""
        response = self._request("DELETE", _segment(index))
        body = response.json()
        if response.status_code != 200:
            raise ElasticsearchError(response.status_code, _error_reason(body))
        return {"status_code": response.status_code, "result": INDEX_DELETED_MESSAGE}

    def insert_document(
        self, index: str, doc_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        """Store ``data`` under ``doc_id``, creating or replacing the document."""
        response = self._request(
            "PUT", f"{_segment(index)}/_doc/{_segment(doc_id)}", data
        )
        body = response.json()
        if not _is_success(response.status_code):
            raise ElasticsearchError(response.status_code, body)
        return {"status_code": response.status_code, "result": body}

    def update_document(
        self, index: str, doc_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        """Merge ``data`` into the existing document ``doc_id``."""
        response = self._request(
            "POST", f"{_segment(index)}/_update/{_segment(doc_id)}", {"doc": data}
        )
        body = response.json()
        if not _is_success(response.status_code):
            raise ElasticsearchError(response.status_code, body)
        return {"status_code": response.status_code, "result": body}

    def index_exists(self, index: str) -> bool:
        """Return True if ``index`` exists."""
        response = self._request("HEAD", _segment(index))
        return response.status_code < 300

    def document_exists(self, index: str, doc_id: str) -> bool:
        """Return True if a document with ``doc_id`` exists in ``index``."""
        response = self._request("GET", f"{_segment(index)}/_doc/{_segment(doc_id)}")
        return _is_success(response.status_code)

    def delete_document(self, index: str, doc_id: str) -> dict[str, Any]:
        """Delete the document ``doc_id`` from ``index``."""
        response = self._request(
            "DELETE", f"{_segment(index)}/_doc/{_segment(doc_id)}"
        )
        body = response.json()
        if not _is_success(response.status_code):
            raise ElasticsearchError(response.status_code, body)
        return {"status_code": response.status_code, "result": body}

    def get_document(self, index: str, doc_id: str) -> dict[str, Any]:
        """Fetch a document's source.

        A missing document is not an error: the result then carries the
        status code and a "Document not found" message instead of the source.
        """
        response = self._request("GET", f"{_segment(index)}/_doc/{_segment(doc_id)}")
        if not _is_success(response.status_code):
            return {
                "status_code": response.status_code,
                "result": {
                    "status_code": response.status_code,
                    "error": DOCUMENT_NOT_FOUND_MESSAGE,
                },
            }
        body = response.json()
        return {"status_code": response.status_code, "result": body.get("_source")}