#!/usr/bin/env python3
"""
Connection verification.
Run after setting .env. Exits 0 only if config loads and Mailchimp answers /ping; fail fast otherwise.
"""
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from tools import fetch_stats
from tools.config import load_config
from tools.errors import RelayError


def verify() -> int:
    try:
        config = load_config()
        status = fetch_stats.ping(config.api_key, timeout=config.fetch_timeout)
    except RelayError as e:
        print(e.cause(), file=sys.stderr)
        return 1
    print(f"Mailchimp: {status or 'ok'}")
    return 0


if __name__ == "__main__":
    sys.exit(verify())
