"""
Message formatter: fixed template, fixed-precision percentages, no locale dependence.
Run with: python -m pytest tests/test_format_message.py -v
"""
import locale
import os
import sys
import unittest
from datetime import datetime, timedelta, timezone

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, ROOT)

from tools.format_message import format_message, percent
from tools.models import CampaignStats, ListStats

HOOK = "https://example.test/hook"


def _stats(**overrides):
    fields = dict(
        campaign_id="c0ffee",
        subject_line="Console #42",
        send_time=datetime(2021, 3, 4, 14, 0, tzinfo=timezone.utc),
        recipient_count=1500,
        open_rate=0.4321,
        click_rate=0.05,
        unique_opens=648,
        subscriber_clicks=75,
    )
    fields.update(overrides)
    return CampaignStats(**fields)


class TestPercent(unittest.TestCase):
    def test_two_decimal_places(self):
        self.assertEqual(percent(0.4321), "43.21%")
        self.assertEqual(percent(0.05), "5.00%")
        self.assertEqual(percent(0), "0.00%")
        self.assertEqual(percent(1), "100.00%")


class TestFormatMessage(unittest.TestCase):
    def test_template(self):
        message = format_message(_stats(), HOOK)
        self.assertEqual(message.webhook_url, HOOK)
        self.assertEqual(
            message.content,
            "<strong>Mailchimp Stats</strong><ul>"
            "<li><strong>Latest campaign:</strong> Console #42</li>"
            "<li><strong>Sent:</strong> 2021-03-04 14:00 UTC</li>"
            "<li><strong>Recipients:</strong> 1500</li>"
            "<li><strong>Open rate:</strong> 43.21% (648 unique opens)</li>"
            "<li><strong>Click rate:</strong> 5.00% (75 subscriber clicks)</li>"
            "</ul>",
        )

    def test_deterministic(self):
        stats = _stats()
        self.assertEqual(format_message(stats, HOOK), format_message(stats, HOOK))

    def test_subject_is_escaped(self):
        message = format_message(_stats(subject_line="<b>Sale</b> & more"), HOOK)
        self.assertIn("&lt;b&gt;Sale&lt;/b&gt; &amp; more", message.content)

    def test_empty_subject(self):
        message = format_message(_stats(subject_line=""), HOOK)
        self.assertIn("(no subject)", message.content)

    def test_send_time_converted_to_utc(self):
        cet = timezone(timedelta(hours=1))
        message = format_message(_stats(send_time=datetime(2021, 3, 4, 15, 0, tzinfo=cet)), HOOK)
        self.assertIn("2021-03-04 14:00 UTC", message.content)

    def test_list_stats_lines(self):
        list_stats = ListStats(
            member_count=1520,
            member_count_since_send=12,
            unsubscribe_count_since_send=3,
            avg_sub_rate=41.4,
            avg_unsub_rate=None,
        )
        content = format_message(_stats(list_stats=list_stats), HOOK).content
        self.assertIn("<li><strong>Active subscribers:</strong> 1520</li>", content)
        self.assertIn("<li><strong>Subscribes since last send:</strong> 12</li>", content)
        self.assertIn("<li><strong>Unsubscribes since last send:</strong> 3</li>", content)
        self.assertIn("<li><strong>Subscribe rate:</strong> 41/m</li>", content)
        self.assertNotIn("Unsubscribe rate", content)
        self.assertNotIn("Average click rate", content)
        self.assertTrue(content.endswith("</ul>"))

    def test_list_click_rate_is_already_a_percentage(self):
        content = format_message(_stats(list_stats=ListStats(click_rate=4.2)), HOOK).content
        self.assertIn("<li><strong>Average click rate:</strong> 4.20%</li>", content)

    def test_locale_independent(self):
        before = format_message(_stats(), HOOK).content
        previous = locale.setlocale(locale.LC_ALL)
        try:
            for name in ("de_DE.UTF-8", "fr_FR.UTF-8"):
                try:
                    locale.setlocale(locale.LC_ALL, name)
                except locale.Error:
                    continue
                self.assertEqual(format_message(_stats(), HOOK).content, before)
        finally:
            locale.setlocale(locale.LC_ALL, previous)


if __name__ == "__main__":
    unittest.main()
