from pydantic_settings import BaseSettings, SettingsConfigDict

from src.chain.constants import RAYDIUM_AMM_PROGRAM_ID, RAYDIUM_LAUNCHPAD_PROGRAM_ID


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Solana RPC + WebSocket
    solana_rpc_url: str = "https://api.mainnet-beta.solana.com"
    solana_ws_url: str = "wss://api.mainnet-beta.solana.com"

    # Programs to watch: platform label → program id (JSON in .env)
    monitored_programs: dict[str, str] = {
        "Raydium": RAYDIUM_AMM_PROGRAM_ID,
        "Raydium LaunchPad": RAYDIUM_LAUNCHPAD_PROGRAM_ID,
    }

    # Substrings that mark a log notification as a pool launch
    launch_keywords: list[str] = ["initialize", "init", "create"]

    # Safety thresholds (only max_top_holder_pct is enforced today)
    min_liquidity_sol: float = 1.0
    max_top_holder_pct: float = 50.0
    min_holders: int = 10

    # RPC client
    rpc_timeout_sec: float = 15.0
    rpc_max_retries: int = 2
    rpc_retry_delays: list[float] = [1.0, 3.0]
    rpc_max_rps: float = 10.0

    # Pipeline worker pool
    pipeline_workers: int = 5
    pipeline_queue_size: int = 1000
    pipeline_timeout_sec: float = 60.0

    # Token registry (0 = unbounded)
    registry_max_tokens: int = 10_000

    # Periodic stats report
    stats_interval_sec: int = 300
    stats_max_entries: int = 20

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False


settings = Settings()
