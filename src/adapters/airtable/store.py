"""
Airtable record store adapter - Implements RecordStore protocol.

This module provides the Airtable implementation of the domain's record
store port using the Airtable REST API over httpx.

Filter values are escaped by the domain filter renderer before they are
placed in ``filterByFormula``; this adapter never builds formulas itself.
"""

import logging
from datetime import datetime
from typing import Any
from urllib.parse import quote

import httpx

from src.domain.exceptions import StoreError
from src.domain.filters import Filter
from src.domain.ports import SellerRecord

logger = logging.getLogger(__name__)

# Airtable caps page size at 100
_PAGE_SIZE = 100


class AirtableRecordStore:
    """
    Implements RecordStore protocol via the Airtable REST API.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        base_id: str,
        table: str,
        api_url: str = "https://api.airtable.com/v0",
    ) -> None:
        """
        Initialize store with a shared HTTP client.

        Args:
            client: httpx AsyncClient owned by the caller
            api_key: Airtable personal access token
            base_id: Airtable base id (app...)
            table: Table name or id
            api_url: API root, overridable for tests
        """
        self._client = client
        self._headers = {"Authorization": f"Bearer {api_key}"}
        self._table_url = f"{api_url.rstrip('/')}/{base_id}/{quote(table, safe='')}"
        self._table = table

    async def find(self, where: Filter, max_records: int | None = None) -> list[SellerRecord]:
        """
        List records matching a filter, following pagination.

        Args:
            where: Filter rendered to filterByFormula
            max_records: Optional upper bound on returned records

        Returns:
            Records in Airtable order

        Raises:
            StoreError: On HTTP or decoding failure
        """
        params: dict[str, Any] = {
            "filterByFormula": where.to_formula(),
            "pageSize": min(max_records or _PAGE_SIZE, _PAGE_SIZE),
        }
        if max_records is not None:
            params["maxRecords"] = max_records

        records: list[SellerRecord] = []
        while True:
            body = await self._request("GET", self._table_url, params=params)
            records.extend(self._to_record(raw) for raw in body.get("records", []))
            offset = body.get("offset")
            if not offset or (max_records is not None and len(records) >= max_records):
                break
            params["offset"] = offset

        if max_records is not None:
            records = records[:max_records]
        return records

    async def create(self, fields: dict[str, Any]) -> SellerRecord:
        """
        Create one record.

        Uses typecast so select options such as Country are matched by name.

        Raises:
            StoreError: On HTTP failure or validation rejection
        """
        body = await self._request(
            "POST", self._table_url, json={"fields": fields, "typecast": True}
        )
        record = self._to_record(body)
        logger.info("Created Airtable record %s in %s", record.record_id, self._table)
        return record

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(method, url, headers=self._headers, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            detail = _error_detail(e.response)
            logger.error("Airtable %s %s failed: %s %s", method, self._table, e.response.status_code, detail)
            raise StoreError(f"Airtable returned {e.response.status_code}: {detail}") from e
        except httpx.HTTPError as e:
            logger.error("Airtable %s %s failed: %s", method, self._table, e)
            raise StoreError(f"Airtable request failed: {e}") from e
        except ValueError as e:
            raise StoreError("Airtable returned a non-JSON response") from e

    @staticmethod
    def _to_record(raw: dict[str, Any]) -> SellerRecord:
        created = raw.get("createdTime")
        return SellerRecord(
            record_id=raw["id"],
            fields=raw.get("fields", {}),
            created_time=datetime.fromisoformat(created.replace("Z", "+00:00")) if created else None,
        )


def _error_detail(response: httpx.Response) -> str:
    try:
        error = response.json().get("error")
    except ValueError:
        return response.text[:200]
    if isinstance(error, dict):
        return error.get("message") or error.get("type") or str(error)
    return str(error)
