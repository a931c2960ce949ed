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

"""Premium subscription plans and the premium check."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from shared.types import SubscriptionPlanId, SubscriptionStatus

DEMO_MODE_MESSAGE = "Payment processing is not implemented in this demo."


@dataclass(frozen=True)
class SubscriptionPlan:
    id: str
    name: str
    price: str
    interval: str
    period: timedelta
    display_price: str


PLANS: Dict[str, SubscriptionPlan] = {
    SubscriptionPlanId.MONTHLY: SubscriptionPlan(
        id=SubscriptionPlanId.MONTHLY,
        name="Premium Monthly",
        price="$12.00",
        interval="month",
        period=timedelta(days=30),
        display_price="$12/month",
    ),
    SubscriptionPlanId.YEARLY: SubscriptionPlan(
        id=SubscriptionPlanId.YEARLY,
        name="Premium Yearly",
        price="$99.00",
        interval="year",
        period=timedelta(days=365),
        display_price="$99/year",
    ),
}


def get_plan(plan_id: str) -> SubscriptionPlan:
    plan = PLANS.get(plan_id)
    if plan is None:
        raise ValueError(f"Unknown subscription plan: {plan_id}")
    return plan


def activate_subscription(plan_id: str, now: Optional[datetime] = None) -> dict:
    """Returns the subscription block to store on the user document."""
    plan = get_plan(plan_id)
    now = now or datetime.now(timezone.utc)
    return {
        "plan": str(plan.id),
        "status": SubscriptionStatus.ACTIVE.value,
        "start_date": now,
        "end_date": now + plan.period,
        "price": plan.display_price,
    }


def cancel_subscription(subscription: dict) -> dict:
    return {**subscription, "status": SubscriptionStatus.INACTIVE.value}


def _to_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_premium(subscription: Optional[dict], now: Optional[datetime] = None) -> bool:
    """A subscription is premium while active and not yet past its end date."""
    if not subscription or subscription.get("status") != SubscriptionStatus.ACTIVE:
        return False
    end_date = _to_datetime(subscription.get("end_date"))
    if end_date is None:
        return False
    return end_date > (now or datetime.now(timezone.utc))


def to_iso(value: Any) -> Any:
    parsed = _to_datetime(value)
    return parsed.isoformat() if parsed else value
