from __future__ import annotations

import unittest

from expiry_alerts.models import BucketCounts
from expiry_alerts.services.notification_composer import compose_expiry_summary


class NotificationComposerTests(unittest.TestCase):
    def test_body_template(self) -> None:
        payload = compose_expiry_summary(BucketCounts(within_1_day=1, within_3_days=1, within_7_days=1))

        self.assertEqual(payload.title, "Expiry Summary")
        self.assertEqual(payload.body, "≤1d=1 • 2–3d=1 • 4–7d=1 (total 3)")
        self.assertIsNone(payload.link)

    def test_total_is_sum_of_counts(self) -> None:
        payload = compose_expiry_summary(BucketCounts(within_1_day=4, within_3_days=0, within_7_days=12))
        self.assertEqual(payload.body, "≤1d=4 • 2–3d=0 • 4–7d=12 (total 16)")

    def test_custom_title_and_link(self) -> None:
        payload = compose_expiry_summary(
            BucketCounts(within_1_day=2),
            title="Pantry check",
            link=" https://example.com/expiring ",
        )
        self.assertEqual(payload.title, "Pantry check")
        self.assertEqual(payload.link, "https://example.com/expiring")

    def test_blank_title_falls_back_to_default(self) -> None:
        payload = compose_expiry_summary(BucketCounts(within_7_days=1), title="  ")
        self.assertEqual(payload.title, "Expiry Summary")

    def test_zero_total_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            compose_expiry_summary(BucketCounts())

    def test_negative_counts_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            compose_expiry_summary(BucketCounts(within_1_day=-1, within_3_days=2))


if __name__ == "__main__":
    unittest.main()
