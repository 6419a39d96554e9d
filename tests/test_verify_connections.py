"""
Connection verification CLI exit codes.
Run with: python -m pytest tests/test_verify_connections.py -v
"""
import os
import sys
import unittest
from unittest import mock

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, ROOT)

import verify_connections
from tools.errors import AUTH, FetchError

ENV = {
    "ENV_FILE": os.path.join(ROOT, "tests", "no-such.env"),
    "MAILCHIMP_API_KEY": "0123456789abcdef-us6",
    "MAILCHIMP_LIST_ID": "list1",
    "BASECAMP_BOT_URL": "https://example.test/hook",
}


class TestVerify(unittest.TestCase):
    def test_ok_when_ping_answers(self):
        with mock.patch.dict(os.environ, ENV, clear=True), \
                mock.patch("tools.fetch_stats.ping", return_value="Everything's Chimpy!") as ping:
            self.assertEqual(verify_connections.verify(), 0)
        ping.assert_called_once_with("0123456789abcdef-us6", timeout=10)

    def test_fails_on_missing_config(self):
        with mock.patch.dict(os.environ, {"ENV_FILE": ENV["ENV_FILE"]}, clear=True), \
                mock.patch("tools.fetch_stats.ping") as ping:
            self.assertEqual(verify_connections.verify(), 1)
        ping.assert_not_called()

    def test_fails_on_rejected_key(self):
        with mock.patch.dict(os.environ, ENV, clear=True), \
                mock.patch("tools.fetch_stats.ping", side_effect=FetchError(AUTH, "HTTP 401 Unauthorized")):
            self.assertEqual(verify_connections.verify(), 1)


if __name__ == "__main__":
    unittest.main()
