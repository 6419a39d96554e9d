"""
Invocation handler: validates the requested operation and runs
fetch -> format -> publish. A failure at any stage aborts the rest of the run.
Never raises for per-invocation failures; the result carries the cause instead.
"""

import logging

from tools import fetch_stats, format_message, publish
from tools.errors import FetchError, PublishError, UnknownOperation
from tools.models import InvocationResult

logger = logging.getLogger(__name__)

POST_MAILCHIMP_STATS = "post_mailchimp_stats"
SUPPORTED_OPERATIONS = {POST_MAILCHIMP_STATS}


def _post_mailchimp_stats(config) -> None:
    stats = fetch_stats.fetch(config.api_key, config.list_id, timeout=config.fetch_timeout)
    message = format_message.format_message(stats, config.webhook_url)
    if not config.production:
        # Only post to Basecamp when actually in production.
        logger.info("Would have posted to webhook: %s", message.content)
        return
    publish.publish(message, timeout=config.publish_timeout)
    logger.info("All ok")


def invoke(operation: str, config) -> InvocationResult:
    """Run one invocation of `operation` against `config`."""
    operation = (operation or "").strip().lower()
    if operation not in SUPPORTED_OPERATIONS:
        logger.warning("Unknown operation requested: %r", operation)
        return InvocationResult.failed(operation, UnknownOperation(operation))
    try:
        _post_mailchimp_stats(config)
    except (FetchError, PublishError) as e:
        logger.error("Invocation %s failed: %s", operation, e.cause())
        return InvocationResult.failed(operation, e)
    return InvocationResult(operation=operation, success=True)
