"""Builders and fakes shared by the test suite."""

from typing import Any

from src.chain.constants import SPL_MINT_SIZE, TOKEN_PROGRAM_ID
from src.chain.rpc_client import AccountInfo

# Valid base58 public keys (PDA derivation needs real keys)
MINT = "So11111111111111111111111111111111111111112"
CREATOR = "5Q544fKrFoe6tsEbD7S8EmxGTJYAKtTVhAW5Q5pge4j1"
POOL = "58oQChx4yWmvKdwLLZzBi4ChoCc2fqCUWBkwMihLYQo2"
AUTHORITY = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"
OTHER_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


def mint_account(address: str = MINT) -> AccountInfo:
    return AccountInfo(
        address=address, owner=TOKEN_PROGRAM_ID, lamports=1_461_600, data=b"\x00" * SPL_MINT_SIZE
    )


def parsed_mint(
    *,
    mint_authority: str | None = None,
    freeze_authority: str | None = None,
    supply: str = "1000000000",
) -> dict[str, Any]:
    return {
        "owner": TOKEN_PROGRAM_ID,
        "data": {
            "program": "spl-token",
            "parsed": {
                "type": "mint",
                "info": {
                    "mintAuthority": mint_authority,
                    "freezeAuthority": freeze_authority,
                    "supply": supply,
                    "decimals": 6,
                    "isInitialized": True,
                },
            },
        },
    }


def launch_tx(keys: list[str]) -> dict[str, Any]:
    return {
        "slot": 1,
        "transaction": {
            "message": {
                "accountKeys": [
                    {"pubkey": k, "signer": i == 0, "writable": True, "source": "transaction"}
                    for i, k in enumerate(keys)
                ],
            },
        },
    }


class FakeRpc:
    """In-memory stand-in for SolanaRpcClient.

    Values that are Exception instances are raised instead of returned.
    """

    def __init__(self) -> None:
        self.transactions: dict[str, Any] = {}
        self.accounts: dict[str, Any] = {}
        self.parsed_accounts: dict[str, Any] = {}
        self.largest_accounts: dict[str, Any] = {}
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    @staticmethod
    def _value(value: Any) -> Any:
        if isinstance(value, Exception):
            raise value
        return value

    async def get_transaction(self, signature: str) -> Any:
        self.calls.append(("getTransaction", signature))
        return self._value(self.transactions.get(signature))

    async def get_account_info(self, address: str) -> Any:
        self.calls.append(("getAccountInfo", address))
        return self._value(self.accounts.get(address))

    async def get_parsed_account_info(self, address: str) -> Any:
        self.calls.append(("getParsedAccountInfo", address))
        return self._value(self.parsed_accounts.get(address))

    async def get_token_largest_accounts(self, mint: str) -> Any:
        self.calls.append(("getTokenLargestAccounts", mint))
        return self._value(self.largest_accounts.get(mint, []))

    async def close(self) -> None:
        self.closed = True


