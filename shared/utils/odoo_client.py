import logging
from typing import Any, Dict, List, Optional

import requests

from shared.core.config import OdooConfig

logger = logging.getLogger(__name__)


class OdooRpcError(Exception):
    """Transport, envelope or business error reported while talking to Odoo."""


class OdooAuthError(OdooRpcError):
    pass


class OdooClient:
    """Synchronous Odoo JSON-RPC client. Authenticates once per instance."""

    def __init__(self, config: OdooConfig, session: Optional[requests.Session] = None):
        # settings are checked on first use, so building a client never fails
        self.config = config
        self.session = session or requests.Session()
        self._uid: Optional[int] = None

    @property
    def endpoint(self) -> str:
        return f"{self.config.url}/jsonrpc"

    def _post(self, params: Dict[str, Any]) -> Any:
        payload = {"jsonrpc": "2.0", "method": "call", "params": params}
        try:
            res = self.session.post(
                self.endpoint,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise OdooRpcError(f"Odoo RPC transport failure: {e}") from e

        if res.status_code >= 400:
            raise OdooRpcError(f"Odoo RPC HTTP {res.status_code}: {res.text}")

        try:
            data = res.json()
        except ValueError as e:
            raise OdooRpcError("Odoo RPC: response is not valid JSON") from e

        if not isinstance(data, dict):
            raise OdooRpcError("Odoo RPC: malformed envelope")

        error = data.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            debug = ""
            if isinstance(error, dict) and isinstance(error.get("data"), dict):
                debug = error["data"].get("debug") or ""
            if debug:
                logger.debug("Odoo traceback:\n%s", debug)
            raise OdooRpcError(f"Odoo RPC error: {message}")

        if "result" not in data:
            raise OdooRpcError("Odoo RPC: result undefined")
        return data["result"]

    def authenticate(self) -> int:
        if self._uid is not None:
            return self._uid
        if not self.config.is_complete():
            raise OdooAuthError(
                "Missing Odoo settings (ODOO_URL/ODOO_DB/ODOO_USER/ODOO_API)")

        uid = self._post({
            "service": "common",
            "method": "authenticate",
            "args": [self.config.db, self.config.user, self.config.api_key, {}],
        })
        # Odoo answers False on bad credentials
        if isinstance(uid, bool) or not isinstance(uid, int):
            raise OdooAuthError("Odoo authentication failed (invalid uid)")

        logger.info("Authenticated against %s as uid %s", self.config.url, uid)
        self._uid = uid
        return uid

    def execute_kw(
        self,
        model: str,
        method: str,
        args: List[Any],
        kwargs: Optional[Dict[str, Any]] = None
    ) -> Any:
        uid = self.authenticate()
        return self._post({
            "service": "object",
            "method": "execute_kw",
            "args": [
                self.config.db, uid, self.config.api_key,
                model, method, args, kwargs or {}
            ],
        })

    def search_read(
        self,
        model: str,
        domain: List[Any],
        fields: List[str],
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Dict[str, Any]]:
        limit = limit or self.config.fetch_limit
        records = self.execute_kw(model, "search_read", [domain], {
            "fields": fields,
            "limit": limit,
            "offset": offset,
        })
        if not isinstance(records, list):
            raise OdooRpcError(f"Odoo RPC: unexpected search_read result for {model}")

        if len(records) >= limit:
            logger.warning(
                "%s: fetch hit the %s row limit, result may be truncated", model, limit)
        return records

    def fields_get(self, model: str, attributes: Optional[List[str]] = None) -> Dict[str, Any]:
        """Field definitions of a model, keyed by field name."""
        return self.execute_kw(model, "fields_get", [], {"attributes": attributes or []})

    def available_fields(self, model: str, wanted: List[str]) -> List[str]:
        defined = self.fields_get(model, ["type"])
        return [f for f in wanted if f in defined]
