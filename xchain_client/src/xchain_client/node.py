"""
JSON-RPC node broadcaster (sendrawtransaction), used by Litecoin and
Bitcoin Cash.
"""

from __future__ import annotations

import httpx
from loguru import logger

from xchain_client.config import NodeAuth
from xchain_client.errors import BroadcastError, CollaboratorError
from xchain_client.explorer import DEFAULT_TIMEOUT, Broadcaster, HttpCollaborator


class NodeBroadcaster(HttpCollaborator, Broadcaster):
    def __init__(
        self,
        node_url: str,
        auth: NodeAuth | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            node_url,
            timeout=timeout,
            auth=(auth.username, auth.password) if auth else None,
            transport=transport,
        )
        self._request_id = 0

    async def broadcast(self, tx_hex: str) -> str:
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": "sendrawtransaction",
            "params": [tx_hex],
        }

        try:
            data = await self.post_json(self.base_url, payload)
        except CollaboratorError as e:
            # Nodes answer rejected transactions with HTTP 500 and an error body
            cause = e.__cause__
            if isinstance(cause, httpx.HTTPStatusError):
                message = _rpc_error_message(cause.response)
                if message:
                    logger.error(f"Node rejected transaction: {message}")
                    raise BroadcastError(f"Node rejected transaction: {message}") from e
            raise

        if not isinstance(data, dict):
            raise CollaboratorError("Malformed JSON-RPC response")

        if data.get("error"):
            error_info = data["error"]
            error_code = error_info.get("code", "unknown") if isinstance(error_info, dict) else "unknown"
            error_msg = error_info.get("message", str(error_info)) if isinstance(error_info, dict) else str(error_info)
            logger.error(f"Node rejected transaction: RPC error {error_code}: {error_msg}")
            raise BroadcastError(f"RPC error {error_code}: {error_msg}")

        txid = data.get("result")
        if not isinstance(txid, str) or not txid:
            raise CollaboratorError("sendrawtransaction returned no txid")

        logger.info(f"Broadcast transaction {txid}")
        return txid


def _rpc_error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return f"RPC error {error.get('code', 'unknown')}: {error.get('message', '')}"
    return None
