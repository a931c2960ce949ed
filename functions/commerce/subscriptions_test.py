# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================


import unittest
from datetime import datetime, timedelta, timezone

from commerce import subscriptions

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class SubscriptionsTest(unittest.TestCase):

    def test_activate_monthly(self):
        subscription = subscriptions.activate_subscription("monthly", NOW)
        self.assertEqual(subscription["plan"], "monthly")
        self.assertEqual(subscription["status"], "active")
        self.assertEqual(subscription["start_date"], NOW)
        self.assertEqual(subscription["end_date"], NOW + timedelta(days=30))
        self.assertEqual(subscription["price"], "$12/month")

    def test_activate_yearly(self):
        subscription = subscriptions.activate_subscription("yearly", NOW)
        self.assertEqual(subscription["end_date"], NOW + timedelta(days=365))
        self.assertEqual(subscription["price"], "$99/year")

    def test_unknown_plan(self):
        with self.assertRaises(ValueError):
            subscriptions.activate_subscription("weekly", NOW)

    def test_is_premium(self):
        subscription = subscriptions.activate_subscription("monthly", NOW)
        self.assertTrue(subscriptions.is_premium(subscription, NOW))
        self.assertFalse(
            subscriptions.is_premium(subscription, NOW + timedelta(days=30))
        )
        self.assertFalse(subscriptions.is_premium(None, NOW))

    def test_is_premium_accepts_iso_strings(self):
        subscription = {"status": "active", "end_date": "2026-03-02T00:00:00Z"}
        self.assertTrue(subscriptions.is_premium(subscription, NOW))
        subscription["end_date"] = "not a date"
        self.assertFalse(subscriptions.is_premium(subscription, NOW))

    def test_cancelled_subscription_is_not_premium(self):
        subscription = subscriptions.cancel_subscription(
            subscriptions.activate_subscription("yearly", NOW)
        )
        self.assertEqual(subscription["status"], "inactive")
        self.assertFalse(subscriptions.is_premium(subscription, NOW))


if __name__ == "__main__":
    unittest.main()
