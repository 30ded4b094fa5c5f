"""HTTP client for the hosted record backend.

The backend exposes a generic object API keyed by collection name
(``transaction_c``, ``budget_c`` ...).  Every call answers with an envelope::

    {"success": true, "data": [...]}                         # reads
    {"success": true, "results": [{"success": true,
                                   "data": {...},
                                   "message": ""}]}          # writes

The client never raises: each method returns ``Ok`` or ``Err`` so the
service layer decides whether to degrade (reads) or raise (writes).
"""
import logging
from typing import Any, Optional

import requests

from fintrack.config import Settings
from fintrack.functional import Err, Ok, RecordOutcome, Result

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "fetch": "/collections/{collection}/fetch",
    "get_by_id": "/collections/{collection}/records/{record_id}",
    "records": "/collections/{collection}/records",
}


def parse_read_envelope(payload: Any, action: str) -> Result:
    if not isinstance(payload, dict):
        return Err("backend", f"Failed to {action}: malformed response")
    if not payload.get("success"):
        return Err("backend", payload.get("message") or f"Failed to {action}")
    return Ok(payload.get("data"))


def parse_write_envelope(payload: Any, action: str) -> Result:
    """Turn a write envelope into ``Ok(list_of_data)`` or ``Err``.

    A top-level ``success: false`` wins; otherwise the first failed record
    decides the error message.
    """
    if not isinstance(payload, dict):
        return Err("backend", f"Failed to {action}: malformed response")
    if not payload.get("success"):
        return Err("backend", payload.get("message") or f"Failed to {action}")

    outcomes = tuple(
        RecordOutcome(
            success=bool(r.get("success")),
            data=r.get("data"),
            message=r.get("message") or "",
        )
        for r in payload.get("results") or []
    )
    failed = [o for o in outcomes if not o.success]
    if failed:
        return Err("backend", failed[0].message or f"Failed to {action}", outcomes=outcomes)
    return Ok([o.data for o in outcomes], outcomes)


class BackendClient:
    def __init__(
        self,
        base_url: str,
        project_id: str,
        public_key: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.project_id = project_id
        self.public_key = public_key
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "X-Project-Id": project_id,
            "X-Public-Key": public_key,
        })

    @classmethod
    def from_settings(cls, settings: Settings) -> "BackendClient":
        return cls(
            base_url=settings.backend_url,
            project_id=settings.project_id,
            public_key=settings.public_key,
            timeout=settings.request_timeout,
        )

    def _request(self, method: str, path: str, body: dict) -> Result:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=body, timeout=self.timeout)
            response.raise_for_status()
            return Ok(response.json())
        except ValueError as e:
            # requests' JSONDecodeError is also a RequestException
            logger.error(f"{method} {url} returned invalid JSON: {e}")
            return Err("network", "Invalid response from server")
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            return Err("network", str(e))

    def fetch_records(self, collection: str, params: dict) -> Result:
        path = ENDPOINTS["fetch"].format(collection=collection)
        return self._request("POST", path, params).bind(
            lambda payload: parse_read_envelope(payload, f"fetch {collection}")
        ).map(lambda data: list(data or []))

    def get_record_by_id(self, collection: str, record_id: int, params: dict) -> Result:
        path = ENDPOINTS["get_by_id"].format(collection=collection, record_id=record_id)
        return self._request("POST", path, params).bind(
            lambda payload: parse_read_envelope(payload, f"fetch {collection} {record_id}")
        )

    def create_record(self, collection: str, params: dict) -> Result:
        path = ENDPOINTS["records"].format(collection=collection)
        return self._request("POST", path, params).bind(
            lambda payload: parse_write_envelope(payload, f"create {collection}")
        )

    def update_record(self, collection: str, params: dict) -> Result:
        path = ENDPOINTS["records"].format(collection=collection)
        return self._request("PUT", path, params).bind(
            lambda payload: parse_write_envelope(payload, f"update {collection}")
        )

    def delete_record(self, collection: str, params: dict) -> Result:
        path = ENDPOINTS["records"].format(collection=collection)
        return self._request("DELETE", path, params).bind(
            lambda payload: parse_write_envelope(payload, f"delete {collection}")
        )
