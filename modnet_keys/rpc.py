"""JSON-RPC client for a node's keystore (``author_insertKey``)."""

import json
import logging
from typing import Any, Optional

import requests

from .config import DEFAULT_NODE_URL
from .errors import InvalidKeyType, TransportError
from .hexutil import encode_hex

logger = logging.getLogger(__name__)

KEY_TYPE_LENGTH = 4


def validate_key_type(key_type: str) -> str:
    """Reject anything but a 4-character key type such as ``gran`` or ``aura``."""
    if len(key_type) != KEY_TYPE_LENGTH or len(key_type.encode("utf-8")) != KEY_TYPE_LENGTH:
        raise InvalidKeyType(key_type)
    return key_type


class KeystoreClient:
    """Minimal JSON-RPC 2.0 client for the keystore methods of a node.

    Transport failures and JSON-RPC error objects both surface as
    :class:`TransportError`.
    """

    def __init__(self, node_url: Optional[str] = None, session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None):
        self.node_url = node_url or DEFAULT_NODE_URL
        self.session = session or requests.Session()
        self.timeout = timeout
        self._request_id = 0

    def call(self, method: str, params: list) -> Any:
        """Issue one JSON-RPC request and return its ``result``."""
        self._request_id += 1
        payload = {
            "id": self._request_id,
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
        }
        try:
            resp = self.session.post(
                self.node_url,
                headers={"Content-Type": "application/json"},
                data=json.dumps(payload),
                timeout=self.timeout,
            )
            resp.raise_for_status()
            body = resp.json()
        except requests.RequestException as e:
            raise TransportError(f"{method} request to {self.node_url} failed: {e}") from e
        except ValueError as e:
            raise TransportError(f"{method} returned invalid JSON: {e}") from e
        if not isinstance(body, dict):
            raise TransportError(f"{method} returned an unexpected response")
        if body.get("error"):
            error = body["error"]
            if isinstance(error, dict):
                raise TransportError(str(error.get("message", error)), code=error.get("code"))
            raise TransportError(str(error))
        return body.get("result")

    def insert_key(self, key_type: str, suri: str, public: bytes) -> Any:
        """Call ``author_insertKey``; the URI is sent to the node, never logged."""
        validate_key_type(key_type)
        logger.info("Inserting %s key 0x%s into %s", key_type, bytes(public).hex(), self.node_url)
        return self.call("author_insertKey", [key_type, suri, encode_hex(public)])

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "KeystoreClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
