"""HTTP client for the remote record service holding property listings."""

import os
from typing import Any, Dict, Iterator, List, Optional

import requests

from ..errors import DataSourceUnavailable
from ..models.search import SearchCriteria
from ..utils.logging import fields, get_logger
from .mappers import REMOTE_FIELD_NAMES

LOGGER = get_logger("db.record_service")

RS_URL = os.getenv("RECORD_SERVICE_URL")
RS_TOKEN = os.getenv("RECORD_SERVICE_TOKEN")
RS_TABLE = os.getenv("RECORD_SERVICE_TABLE", "property_c")
RS_TIMEOUT = float(os.getenv("RECORD_SERVICE_TIMEOUT", "30"))

DEFAULT_LIMIT = int(os.getenv("RECORD_SERVICE_PAGE_SIZE", "100"))

TEXT_SEARCH_FIELDS = ("title", "city", "state", "address")

SORT_ORDER = {
    "price-low": ("price", "ASC"),
    "price-high": ("price", "DESC"),
    "newest": ("listing_date", "DESC"),
    "square-feet": ("square_feet", "DESC"),
    "alphabetical": ("title", "ASC"),
}

QUERY_FIELDS = sorted(set(REMOTE_FIELD_NAMES.values()))


class RecordServiceClient:
    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None, table: Optional[str] = None):
        base = (base_url or RS_URL or "").strip()
        if not base:
            raise RuntimeError("Record service URL is not configured")
        if not base.startswith("http"):
            base = f"https://{base}"
        self.base = base.rstrip("/")
        self.table = table or RS_TABLE
        self.session = requests.Session()
        self.session.headers["Accept"] = "application/json"
        if token or RS_TOKEN:
            self.session.headers["Authorization"] = f"Bearer {token or RS_TOKEN}"

    def _request(self, method: str, path: str, payload: Optional[Dict] = None) -> Optional[Dict]:
        url = f"{self.base}{path}"
        try:
            r = self.session.request(method, url, json=payload, timeout=RS_TIMEOUT)
            if r.status_code == 404:
                return None
            r.raise_for_status()
            body = r.json()
        except (requests.RequestException, ValueError) as exc:
            LOGGER.error(fields("record_service_failed", method=method, url=url, error=exc))
            raise DataSourceUnavailable(f"Record service request failed: {exc}", source="remote") from exc
        if not isinstance(body, dict) or not body.get("success", False):
            message = body.get("message") if isinstance(body, dict) else "malformed response"
            LOGGER.error(fields("record_service_rejected", url=url, message=message))
            raise DataSourceUnavailable(f"Record service rejected request: {message}", source="remote")
        return body

    def get_record(self, record_id: int) -> Optional[Dict]:
        body = self._request("GET", f"/api/records/{self.table}/{record_id}")
        if body is None:
            return None
        data = body.get("data")
        return data if isinstance(data, dict) else None

    def fetch_records(self, params: Dict[str, Any], limit: int = DEFAULT_LIMIT) -> Iterator[Dict]:
        """
        Stream all records matching a query with offset pagination.
        """
        offset = 0
        path = f"/api/records/{self.table}/query"
        while True:
            payload = dict(params)
            payload["pagingInfo"] = {"limit": limit, "offset": offset}
            body = self._request("POST", path, payload) or {}
            batch = body.get("data") or []
            for row in batch:
                if isinstance(row, dict):
                    yield row
            offset += len(batch)
            total = body.get("total")
            if len(batch) < limit or (isinstance(total, int) and offset >= total):
                break


def build_query(criteria: Optional[SearchCriteria] = None) -> Dict[str, Any]:
    """Translate search criteria into the record service's filter payload."""
    criteria = criteria or SearchCriteria()
    where: List[Dict[str, Any]] = []

    def condition(field: str, operator: str, values: List[Any]) -> Dict[str, Any]:
        return {"FieldName": REMOTE_FIELD_NAMES[field], "Operator": operator, "Values": values}

    if criteria.price_min is not None:
        where.append(condition("price", "GreaterThanOrEqualTo", [criteria.price_min]))
    if criteria.price_max is not None:
        where.append(condition("price", "LessThanOrEqualTo", [criteria.price_max]))
    if criteria.bedrooms is not None:
        where.append(condition("bedrooms", "GreaterThanOrEqualTo", [criteria.bedrooms]))
    if criteria.bathrooms is not None:
        where.append(condition("bathrooms", "GreaterThanOrEqualTo", [criteria.bathrooms]))
    if criteria.property_type:
        where.append(condition("property_type", "ExactMatch", sorted(criteria.property_type)))
    if criteria.status:
        where.append(condition("status", "ExactMatch", sorted(criteria.status)))

    params: Dict[str, Any] = {"fields": QUERY_FIELDS, "where": where}
    if criteria.search_query:
        params["whereGroups"] = [
            {
                "operator": "OR",
                "subGroups": [
                    {
                        "conditions": [
                            {
                                "fieldName": REMOTE_FIELD_NAMES[field],
                                "operator": "Contains",
                                "values": [criteria.search_query],
                            }
                        ],
                        "operator": "OR",
                    }
                    for field in TEXT_SEARCH_FIELDS
                ],
            }
        ]
    field, direction = SORT_ORDER.get(criteria.sort_by, SORT_ORDER["newest"])
    params["orderBy"] = [{"fieldName": REMOTE_FIELD_NAMES[field], "sorttype": direction}]
    return params


class RemoteRepository:
    """Record store adapter over :class:`RecordServiceClient`."""

    name = "remote"

    def __init__(self, client: Optional[RecordServiceClient] = None) -> None:
        self.client = client or RecordServiceClient()

    def fetch_all(self) -> List[Dict]:
        return list(self.client.fetch_records(build_query()))

    def fetch_by_id(self, property_id: int) -> Optional[Dict]:
        return self.client.get_record(property_id)

    def query(self, criteria: SearchCriteria) -> List[Dict]:
        return list(self.client.fetch_records(build_query(criteria)))
