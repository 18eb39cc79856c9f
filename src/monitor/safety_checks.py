"""Safety check engine: five concurrent heuristics per new token.

Checks:
- mint_authority: can the creator mint more supply?
- freeze_authority: can the creator freeze holder accounts?
- metadata: does the Metaplex metadata PDA exist?
- liquidity: placeholder until pool addresses are resolved (always UNKNOWN)
- top_holders: share of supply held by the largest token account

All five run under one asyncio.gather and each writes its own slot of the
shared SafetyReport. A check that raises is recorded as ERROR in its slot;
it never cancels or blocks the other four.
"""

import asyncio
from collections.abc import Awaitable
from typing import Any

from loguru import logger

from src.chain.pda import derive_metadata_address
from src.chain.rpc_client import SolanaRpcClient
from src.monitor.models import CheckResult, CheckStatus, SafetyReport, TokenInfo

DEFAULT_MAX_TOP_HOLDER_PCT = 50.0

_CHECK_LABELS: dict[str, str] = {
    "mint_authority": "mint authority",
    "freeze_authority": "freeze authority",
    "metadata": "metadata",
    "liquidity": "liquidity",
    "top_holders": "top holders",
}


class MintDataError(Exception):
    """Mint account missing or not returned in jsonParsed form."""


class _SharedMintState:
    """Fetches the parsed mint account once per report, for every check that needs it."""

    def __init__(self, rpc: SolanaRpcClient, mint: str) -> None:
        self._rpc = rpc
        self._mint = mint
        self._lock = asyncio.Lock()
        self._info: dict[str, Any] | None = None
        self._error: Exception | None = None
        self._fetched = False

    async def get(self) -> dict[str, Any]:
        async with self._lock:
            if not self._fetched:
                try:
                    self._info = await self._fetch()
                except Exception as e:
                    self._error = e
                self._fetched = True
        if self._error is not None:
            raise self._error
        if self._info is None:
            raise MintDataError("Mint account has no parsed data")
        return self._info

    async def _fetch(self) -> dict[str, Any]:
        value = await self._rpc.get_parsed_account_info(self._mint)
        if not value:
            raise MintDataError("Mint account not found")
        data = value.get("data")
        parsed = data.get("parsed") if isinstance(data, dict) else None
        info = parsed.get("info") if isinstance(parsed, dict) else None
        if not isinstance(info, dict):
            raise MintDataError("Mint account has no parsed data")
        return info


class SafetyCheckEngine:
    def __init__(
        self,
        rpc: SolanaRpcClient,
        *,
        max_top_holder_pct: float = DEFAULT_MAX_TOP_HOLDER_PCT,
    ) -> None:
        self._rpc = rpc
        self._max_top_holder_pct = max_top_holder_pct

    async def run(self, token_info: TokenInfo) -> SafetyReport:
        """Run all checks and return the report with every slot filled.

        Score and recommendation are left at defaults; the scorer fills them.
        """
        report = SafetyReport()
        mint_state = _SharedMintState(self._rpc, token_info.mint)

        await asyncio.gather(
            self._guarded(report, "mint_authority", self.check_mint_authority(mint_state)),
            self._guarded(report, "freeze_authority", self.check_freeze_authority(mint_state)),
            self._guarded(report, "metadata", self.check_metadata(token_info)),
            self._guarded(report, "liquidity", self.check_liquidity(token_info)),
            self._guarded(report, "top_holders", self.check_top_holders(token_info, mint_state)),
        )
        return report

    async def _guarded(
        self, report: SafetyReport, slot: str, check: Awaitable[CheckResult]
    ) -> None:
        try:
            result = await check
        except Exception as e:
            label = _CHECK_LABELS[slot]
            logger.debug(f"[SAFETY] {label} check failed: {e}")
            result = CheckResult(
                status=CheckStatus.ERROR,
                message=f"Error checking {label}: {e}",
            )
        setattr(report, slot, result)

    async def check_mint_authority(self, mint_state: _SharedMintState) -> CheckResult:
        info = await mint_state.get()
        authority = info.get("mintAuthority")
        if authority is None:
            return CheckResult(CheckStatus.PASS, "Mint authority revoked (good)")
        return CheckResult(
            CheckStatus.FAIL,
            "Mint authority NOT revoked (can mint infinite tokens)",
            detail=authority,
        )

    async def check_freeze_authority(self, mint_state: _SharedMintState) -> CheckResult:
        info = await mint_state.get()
        authority = info.get("freezeAuthority")
        if authority is None:
            return CheckResult(CheckStatus.PASS, "Freeze authority revoked (good)")
        return CheckResult(
            CheckStatus.FAIL,
            "Freeze authority NOT revoked (can freeze your tokens)",
            detail=authority,
        )

    async def check_metadata(self, token_info: TokenInfo) -> CheckResult:
        metadata_address = derive_metadata_address(token_info.mint)
        account = await self._rpc.get_account_info(metadata_address)
        if account is not None:
            return CheckResult(CheckStatus.PASS, "Metadata found", detail=metadata_address)
        return CheckResult(
            CheckStatus.WARNING, "No metadata found (unusual)", detail=metadata_address
        )

    async def check_liquidity(self, token_info: TokenInfo) -> CheckResult:
        # Needs a resolved pool address; the extractor doesn't provide one yet
        return CheckResult(
            CheckStatus.UNKNOWN,
            "Liquidity check requires pool address (not yet implemented)",
        )

    async def check_top_holders(
        self, token_info: TokenInfo, mint_state: _SharedMintState
    ) -> CheckResult:
        largest = await self._rpc.get_token_largest_accounts(token_info.mint)
        if not largest:
            return CheckResult(CheckStatus.UNKNOWN, "No holder accounts found")

        info = await mint_state.get()
        supply = int(info.get("supply") or 0)
        if supply <= 0:
            return CheckResult(CheckStatus.UNKNOWN, "Mint supply is zero")

        top_amount = int(largest[0].get("amount") or 0)
        top_pct = top_amount / supply * 100

        if top_pct > self._max_top_holder_pct:
            return CheckResult(
                CheckStatus.FAIL,
                f"Top holder has {top_pct:.2f}% (risky concentration)",
                detail=top_pct,
            )
        return CheckResult(
            CheckStatus.PASS,
            f"Top holder has {top_pct:.2f}% (acceptable)",
            detail=top_pct,
        )
