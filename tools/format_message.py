"""
Render CampaignStats as a Basecamp chatbot line (rich text: strong/ul/li).
Pure; no I/O. Numbers use format specs only, so output never depends on locale.
"""

import html
from datetime import timezone

from tools.models import CampaignStats, ChatMessage

TITLE = "Mailchimp Stats"


def percent(rate: float) -> str:
    """0.4321 -> '43.21%'."""
    return f"{rate * 100:.2f}%"


def _item(label: str, value: str) -> str:
    return f"<li><strong>{label}:</strong> {value}</li>"


def _list_items(list_stats) -> list:
    if list_stats is None:
        return []
    items = []
    if list_stats.member_count is not None:
        items.append(_item("Active subscribers", f"{list_stats.member_count:d}"))
    if list_stats.member_count_since_send is not None:
        items.append(_item("Subscribes since last send", f"{list_stats.member_count_since_send:d}"))
    if list_stats.unsubscribe_count_since_send is not None:
        items.append(_item("Unsubscribes since last send", f"{list_stats.unsubscribe_count_since_send:d}"))
    if list_stats.avg_sub_rate is not None:
        items.append(_item("Subscribe rate", f"{list_stats.avg_sub_rate:.0f}/m"))
    if list_stats.avg_unsub_rate is not None:
        items.append(_item("Unsubscribe rate", f"{list_stats.avg_unsub_rate:.0f}/m"))
    if list_stats.click_rate is not None:
        items.append(_item("Average click rate", f"{list_stats.click_rate:.2f}%"))
    return items


def format_message(stats: CampaignStats, webhook_url: str) -> ChatMessage:
    sent = stats.send_time
    if sent.tzinfo is not None:
        sent = sent.astimezone(timezone.utc)
    items = [
        _item("Latest campaign", html.escape(stats.subject_line or "(no subject)")),
        _item("Sent", sent.strftime("%Y-%m-%d %H:%M UTC")),
        _item("Recipients", f"{stats.recipient_count:d}"),
        _item("Open rate", f"{percent(stats.open_rate)} ({stats.unique_opens:d} unique opens)"),
        _item("Click rate", f"{percent(stats.click_rate)} ({stats.subscriber_clicks:d} subscriber clicks)"),
    ]
    items.extend(_list_items(stats.list_stats))
    content = f"<strong>{TITLE}</strong><ul>" + "".join(items) + "</ul>"
    return ChatMessage(content=content, webhook_url=webhook_url)
