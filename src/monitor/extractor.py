"""Token info extractor: find the mint touched by a launch transaction.

No instruction decoding: the mint is recognised by account shape alone.
Scan the transaction's static account keys in order and take the first
account that is owned by the SPL Token program and is exactly 82 bytes
(the classic mint layout). The fee payer (first static key) is reported as
creator. Pool address is not resolved.

Known blind spots:
- Token2022 mints (different owner, longer data) are never matched
- Mints loaded through address lookup tables are not scanned
"""

from typing import Any

from loguru import logger

from src.chain.constants import SPL_MINT_SIZE, TOKEN_PROGRAM_ID
from src.chain.rpc_client import AccountInfo, SolanaRpcClient
from src.monitor.models import TokenInfo


def static_account_keys(tx: dict[str, Any]) -> list[str]:
    """Account keys carried in the message itself, in order.

    jsonParsed encoding returns ``{"pubkey", "signer", "writable", "source"}``
    objects (lookup-table keys have ``source == "lookupTable"``); plain json
    encoding returns bare strings.
    """
    message = ((tx or {}).get("transaction") or {}).get("message") or {}
    keys: list[str] = []
    for entry in message.get("accountKeys") or []:
        if isinstance(entry, str):
            keys.append(entry)
        elif isinstance(entry, dict):
            if entry.get("source", "transaction") != "transaction":
                continue
            pubkey = entry.get("pubkey")
            if pubkey:
                keys.append(pubkey)
    return keys


def is_mint_account(account: AccountInfo | None) -> bool:
    return (
        account is not None
        and account.owner == TOKEN_PROGRAM_ID
        and len(account.data) == SPL_MINT_SIZE
    )


class TokenInfoExtractor:
    def __init__(self, rpc: SolanaRpcClient) -> None:
        self._rpc = rpc

    async def extract(self, tx: dict[str, Any]) -> TokenInfo | None:
        try:
            keys = static_account_keys(tx)
        except (AttributeError, TypeError) as e:
            logger.warning(f"[PIPE] Malformed transaction record: {e}")
            return None

        if not keys:
            return None

        creator = keys[0]
        mint = await self._find_mint(keys)
        if mint is None:
            return None
        return TokenInfo(mint=mint, pool=None, creator=creator)

    async def _find_mint(self, keys: list[str]) -> str | None:
        for address in keys:
            try:
                account = await self._rpc.get_account_info(address)
            except Exception as e:
                logger.debug(f"[PIPE] Skipping account {address[:12]}: {e}")
                continue
            if is_mint_account(account):
                return address
        return None
