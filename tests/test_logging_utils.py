from __future__ import annotations

import json
import logging
import unittest

from expiry_alerts.logging_utils import JsonFormatter, RunIdFilter


class JsonLoggingTests(unittest.TestCase):
    def test_extra_fields_and_run_id_are_serialized(self) -> None:
        record = logging.makeLogRecord(
            {
                "name": "expiry_alerts.job",
                "levelname": "INFO",
                "msg": "expiry_alerts_sent",
                "body": "≤1d=1 • 2–3d=0 • 4–7d=0 (total 1)",
                "success_count": 3,
            }
        )
        RunIdFilter("run-42").filter(record)

        payload = json.loads(JsonFormatter().format(record))

        self.assertEqual(payload["message"], "expiry_alerts_sent")
        self.assertEqual(payload["logger"], "expiry_alerts.job")
        self.assertEqual(payload["run_id"], "run-42")
        self.assertEqual(payload["success_count"], 3)
        self.assertEqual(payload["body"], "≤1d=1 • 2–3d=0 • 4–7d=0 (total 1)")
        self.assertNotIn("levelno", payload)
        self.assertNotIn("args", payload)


if __name__ == "__main__":
    unittest.main()
