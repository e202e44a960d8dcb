"""
Blockstream Esplora broadcaster.

https://github.com/Blockstream/esplora/blob/master/API.md#post-tx
"""

from __future__ import annotations

import httpx
from loguru import logger

from xchain_client.errors import BroadcastError, CollaboratorError
from xchain_client.explorer import DEFAULT_TIMEOUT, Broadcaster, HttpCollaborator


class BlockstreamBroadcaster(HttpCollaborator, Broadcaster):
    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url, timeout=timeout, transport=transport)

    async def broadcast(self, tx_hex: str) -> str:
        """POST the raw hex to /api/tx; the response body is the txid."""
        try:
            body = await self.post_text(f"{self.base_url}/api/tx", tx_hex)
        except CollaboratorError as e:
            # Esplora answers rejected transactions with HTTP 400 and the node's reason
            cause = e.__cause__
            if isinstance(cause, httpx.HTTPStatusError) and cause.response.status_code == 400:
                reason = cause.response.text.strip()
                logger.error(f"Transaction rejected: {reason}")
                raise BroadcastError(f"Transaction rejected: {reason}") from e
            raise

        txid = body.strip()
        if len(txid) != 64:
            raise CollaboratorError(f"Unexpected broadcast response: {txid[:100]!r}")

        logger.info(f"Broadcast transaction {txid}")
        return txid
