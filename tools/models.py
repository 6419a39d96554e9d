"""Records passed between fetcher, formatter, publisher and the invocation handler.

All of them are frozen: one invocation builds its own and nothing is shared
between requests except the Configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Configuration:
    """Process settings resolved from the environment once at startup."""

    api_key: str
    list_id: str
    webhook_url: str
    production: bool = False
    port: int = 3000
    fetch_timeout: float = 10
    publish_timeout: float = 10


@dataclass(frozen=True)
class ListStats:
    """Audience-level counters reported by the Mailchimp list resource."""

    member_count: Optional[int] = None
    member_count_since_send: Optional[int] = None
    unsubscribe_count_since_send: Optional[int] = None
    avg_sub_rate: Optional[float] = None
    avg_unsub_rate: Optional[float] = None
    # Average click rate per campaign, already a percentage (0-100).
    click_rate: Optional[float] = None


@dataclass(frozen=True)
class CampaignStats:
    """Metrics of the most recently sent campaign. Rates are fractions in [0, 1]."""

    campaign_id: str
    subject_line: str
    send_time: datetime
    recipient_count: int
    open_rate: float
    click_rate: float
    unique_opens: int = 0
    subscriber_clicks: int = 0
    list_stats: Optional[ListStats] = None


@dataclass(frozen=True)
class ChatMessage:
    content: str
    webhook_url: str


@dataclass(frozen=True)
class PublishResult:
    delivered: bool
    status: Optional[int] = None


@dataclass(frozen=True)
class InvocationResult:
    operation: str
    success: bool
    error: Optional[str] = None
    kind: Optional[str] = None

    @classmethod
    def failed(cls, operation: str, exc) -> "InvocationResult":
        return cls(operation=operation, success=False, error=exc.cause(), kind=exc.kind)

    def to_json(self) -> dict:
        return {"success": self.success, "error": self.error}
