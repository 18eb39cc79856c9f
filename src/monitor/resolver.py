"""Transaction resolver: signature → confirmed transaction record."""

from typing import Any

from loguru import logger

from src.chain.rpc_client import RpcError, SolanaRpcClient


class TransactionResolver:
    """Single getTransaction lookup; errors are logged and counted, never raised.

    Retry and timeout budgets live in the RPC client.
    """

    def __init__(self, rpc: SolanaRpcClient) -> None:
        self._rpc = rpc
        self.error_count = 0
        self.last_error: str | None = None

    async def resolve(self, signature: str) -> dict[str, Any] | None:
        try:
            tx = await self._rpc.get_transaction(signature)
        except RpcError as e:
            self.error_count += 1
            self.last_error = str(e)
            logger.warning(f"[PIPE] Error fetching transaction {signature[:16]}: {e}")
            return None
        except Exception as e:
            self.error_count += 1
            self.last_error = str(e)
            logger.error(f"[PIPE] Unexpected error fetching {signature[:16]}: {e}")
            return None

        if not tx:
            logger.debug(f"[PIPE] Transaction {signature[:16]} not found")
            return None
        return tx
