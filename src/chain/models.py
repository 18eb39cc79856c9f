"""Pydantic v2 models for Solana WebSocket log notifications."""

from pydantic import BaseModel


class LogNotification(BaseModel):
    """One logsNotification routed back to the program it was subscribed for."""

    platform: str
    program_id: str
    signature: str
    slot: int = 0
    logs: list[str] = []

    model_config = {"extra": "ignore", "frozen": True}
