"""Notification — short-lived feedback triggered by a player action."""

from pydantic import BaseModel


class Notification(BaseModel):
    id: int
    text: str
    expires_at: float                       # time.monotonic() deadline
