from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import requests

from .config import Settings, settings, setup_logger
from .models import FinancialInput
from .records import input_to_record

logger = setup_logger(__name__)


class RecordStoreError(RuntimeError):
    pass


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check_limit(limit: int | None) -> None:
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")


class LocalRecordStore:
    """Records kept in a JSON file under the data directory."""

    def __init__(self, path: Path | None = None):
        self.path = Path(path) if path is not None else settings.records_file

    def _read(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Failed to read records file %s: %s", self.path, exc)
            raise RecordStoreError(f"Cannot read records file {self.path}") from exc
        if not isinstance(data, list):
            logger.error("Records file %s does not hold a list", self.path)
            raise RecordStoreError(f"Records file {self.path} does not hold a list of records")
        return data

    def save(self, data: FinancialInput) -> dict[str, Any]:
        records = self._read()
        record = input_to_record(data)
        record["id"] = max((int(r.get("id") or 0) for r in records), default=0) + 1
        record["created_at"] = _now_iso()
        records.append(record)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to write records file %s: %s", self.path, exc)
            raise RecordStoreError(f"Cannot write records file {self.path}") from exc

        logger.info("Saved record %s for %s (%s)", record["id"], data.company_name, data.period_year)
        return record

    def list_records(self, limit: int | None = None) -> list[dict[str, Any]]:
        _check_limit(limit)
        records = list(reversed(self._read()))
        return records[:limit] if limit is not None else records


class SupabaseRecordStore:
    """Records kept in a Supabase table, accessed through its PostgREST endpoint."""

    def __init__(
        self,
        url: str,
        key: str,
        table: str,
        timeout: float = 15.0,
        session: requests.Session | None = None,
    ):
        self.endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        self.key = key
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "apikey": self.key,
            "Authorization": f"Bearer {self.key}",
            "Content-Type": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    def _request(self, method: str, headers: dict[str, str] | None = None, **kwargs) -> requests.Response:
        try:
            resp = self.session.request(
                method,
                self.endpoint,
                headers=self._headers(headers),
                timeout=self.timeout,
                **kwargs,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Supabase %s %s failed: %s", method, self.endpoint, exc)
            raise RecordStoreError(f"Supabase request failed: {exc}") from exc
        return resp

    def _decode(self, resp: requests.Response) -> list[dict[str, Any]]:
        if not resp.content:
            return []
        try:
            payload = resp.json()
        except ValueError as exc:
            logger.error("Supabase returned a non-JSON body from %s: %s", self.endpoint, exc)
            raise RecordStoreError("Supabase returned a non-JSON response") from exc
        if isinstance(payload, dict):
            return [payload]
        if isinstance(payload, list):
            return payload
        raise RecordStoreError(f"Unexpected Supabase payload type: {type(payload).__name__}")

    def save(self, data: FinancialInput) -> dict[str, Any]:
        record = input_to_record(data)
        resp = self._request("POST", headers={"Prefer": "return=representation"}, json=record)
        rows = self._decode(resp)
        logger.info("Saved %s (%s) to Supabase", data.company_name, data.period_year)
        return rows[0] if rows else record

    def list_records(self, limit: int | None = None) -> list[dict[str, Any]]:
        _check_limit(limit)
        params: dict[str, Any] = {"select": "*", "order": "created_at.desc"}
        if limit is not None:
            params["limit"] = int(limit)
        resp = self._request("GET", params=params)
        return self._decode(resp)


def get_record_store(cfg: Settings | None = None) -> LocalRecordStore | SupabaseRecordStore:
    cfg = cfg or settings
    if cfg.supabase_enabled:
        return SupabaseRecordStore(
            url=cfg.SUPABASE_URL,
            key=cfg.SUPABASE_KEY,
            table=cfg.SUPABASE_TABLE,
            timeout=cfg.REQUEST_TIMEOUT,
        )
    logger.warning("Supabase is not configured, using local records file %s", cfg.records_file)
    return LocalRecordStore(cfg.records_file)
