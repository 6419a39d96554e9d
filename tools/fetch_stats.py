"""
Fetch the latest sent campaign report (and audience stats) for one Mailchimp list.
Single attempt per request; every failure is classified into a FetchError kind.
"""

import base64
import json
import logging
import math
import re
from datetime import datetime
from http.client import HTTPException
from urllib.error import HTTPError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from tools.errors import AUTH, NOT_FOUND, PROTOCOL, TRANSIENT, FetchError
from tools.models import CampaignStats, ListStats

logger = logging.getLogger(__name__)

USER_AGENT = "Campaign-Stats-Relay/1.0"
API_HOST = "https://{dc}.api.mailchimp.com/3.0"
DEFAULT_TIMEOUT_SEC = 10
DATACENTER = re.compile(r"[a-z]+\d+")


def api_base(api_key: str) -> str:
    """Mailchimp keys end in '-<datacenter>' (e.g. 'us6'), which picks the API host."""
    _, sep, dc = (api_key or "").rpartition("-")
    if not sep or not dc:
        raise FetchError(AUTH, "API key has no datacenter suffix")
    # The suffix becomes part of the host name the credential is sent to.
    if not DATACENTER.fullmatch(dc):
        raise FetchError(AUTH, "API key has an invalid datacenter suffix")
    return API_HOST.format(dc=dc)


def _auth_header(api_key: str) -> str:
    token = base64.b64encode(f"anystring:{api_key}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def _classify_status(code: int) -> str:
    if code in (401, 403):
        return AUTH
    if code == 404:
        return NOT_FOUND
    if code == 429 or code >= 500:
        return TRANSIENT
    return PROTOCOL


def _get_json(url: str, api_key: str, timeout: float) -> dict:
    req = Request(
        url,
        headers={
            "Authorization": _auth_header(api_key),
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        },
    )
    try:
        with urlopen(req, timeout=timeout) as resp:
            body = resp.read()
    except HTTPError as e:
        raise FetchError(_classify_status(e.code), f"HTTP {e.code} {e.reason}") from e
    except (OSError, HTTPException) as e:
        # URLError, socket timeouts and dropped connections all land here.
        raise FetchError(TRANSIENT, str(e) or e.__class__.__name__) from e
    try:
        data = json.loads(body.decode("utf-8"))
    except (ValueError, RecursionError) as e:
        raise FetchError(PROTOCOL, "response is not JSON") from e
    if not isinstance(data, dict):
        raise FetchError(PROTOCOL, "response is not a JSON object")
    return data


def _number(value, name: str, cast):
    """Strict numeric field: bools, strings and non-finite values are malformed."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FetchError(PROTOCOL, f"{name} is not a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise FetchError(PROTOCOL, f"{name} is not finite")
    try:
        return cast(value)
    except (OverflowError, ValueError) as e:
        raise FetchError(PROTOCOL, f"{name} is out of range") from e


def _optional_number(raw: dict, key: str, cast):
    value = raw.get(key)
    if value is None:
        return None
    return _number(value, f"stats.{key}", cast)


def parse_list_stats(data: dict) -> ListStats:
    raw = data.get("stats")
    if not isinstance(raw, dict):
        raise FetchError(PROTOCOL, "list response has no stats")
    return ListStats(
        member_count=_optional_number(raw, "member_count", int),
        member_count_since_send=_optional_number(raw, "member_count_since_send", int),
        unsubscribe_count_since_send=_optional_number(raw, "unsubscribe_count_since_send", int),
        avg_sub_rate=_optional_number(raw, "avg_sub_rate", float),
        avg_unsub_rate=_optional_number(raw, "avg_unsub_rate", float),
        click_rate=_optional_number(raw, "click_rate", float),
    )


def parse_campaign(data: dict, list_stats=None) -> CampaignStats:
    campaigns = data.get("campaigns")
    if not isinstance(campaigns, list):
        raise FetchError(PROTOCOL, "response has no campaigns array")
    if not campaigns:
        raise FetchError(NOT_FOUND, "no sent campaigns for list")
    campaign = campaigns[0]
    try:
        report = campaign["report_summary"]
        send_time = datetime.fromisoformat(campaign["send_time"].replace("Z", "+00:00"))
        return CampaignStats(
            campaign_id=str(campaign["id"]),
            subject_line=str((campaign.get("settings") or {}).get("subject_line") or ""),
            send_time=send_time,
            recipient_count=_number(campaign["emails_sent"], "emails_sent", int),
            open_rate=_number(report["open_rate"], "report_summary.open_rate", float),
            click_rate=_number(report["click_rate"], "report_summary.click_rate", float),
            unique_opens=_number(report.get("unique_opens") or 0, "report_summary.unique_opens", int),
            subscriber_clicks=_number(report.get("subscriber_clicks") or 0, "report_summary.subscriber_clicks", int),
            list_stats=list_stats,
        )
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
        raise FetchError(PROTOCOL, f"malformed campaign: {e!r}") from e


def fetch(api_key: str, list_id: str, timeout: float = DEFAULT_TIMEOUT_SEC) -> CampaignStats:
    base = api_base(api_key)
    list_url = f"{base}/lists/{quote(list_id, safe='')}?" + urlencode({"fields": "stats"})
    list_stats = parse_list_stats(_get_json(list_url, api_key, timeout))

    query = urlencode({
        "list_id": list_id,
        "status": "sent",
        "sort_field": "send_time",
        "sort_dir": "DESC",
        "count": 1,
    })
    stats = parse_campaign(_get_json(f"{base}/campaigns?{query}", api_key, timeout), list_stats)
    logger.info("Raw stats: %r", stats)
    return stats


def ping(api_key: str, timeout: float = DEFAULT_TIMEOUT_SEC) -> str:
    """Check key and connectivity. Returns Mailchimp's health_status string."""
    data = _get_json(f"{api_base(api_key)}/ping", api_key, timeout)
    return str(data.get("health_status", ""))
