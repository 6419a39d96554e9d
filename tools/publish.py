"""
Deliver a ChatMessage to the Basecamp chatbot webhook.
One POST per call, JSON body {"content": ...}; any 2xx counts as delivered.
"""

import json
import logging
from http.client import HTTPException
from urllib.error import HTTPError
from urllib.request import HTTPRedirectHandler, Request, build_opener

from tools.errors import REJECTED, TRANSIENT, PublishError
from tools.models import ChatMessage, PublishResult

logger = logging.getLogger(__name__)

USER_AGENT = "Campaign-Stats-Relay/1.0"
DEFAULT_TIMEOUT_SEC = 10


class _NoRedirect(HTTPRedirectHandler):
    """Let 3xx surface as HTTPError; following it would re-send the POST as a bodiless GET."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        return None


_opener = build_opener(_NoRedirect)


def urlopen(req, timeout):
    return _opener.open(req, timeout=timeout)


def publish(message: ChatMessage, timeout: float = DEFAULT_TIMEOUT_SEC) -> PublishResult:
    body = json.dumps({"content": message.content}).encode("utf-8")
    req = Request(
        message.webhook_url,
        data=body,
        headers={"Content-Type": "application/json", "User-Agent": USER_AGENT},
        method="POST",
    )
    logger.info("Sending to webhook: %s", message.content)
    try:
        with urlopen(req, timeout=timeout) as resp:
            status = resp.status
    except HTTPError as e:
        raise PublishError(REJECTED, f"HTTP {e.code}", status=e.code) from e
    except (OSError, HTTPException) as e:
        raise PublishError(TRANSIENT, str(e) or e.__class__.__name__) from e
    if not 200 <= status < 300:
        raise PublishError(REJECTED, f"HTTP {status}", status=status)
    return PublishResult(delivered=True, status=status)
