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


from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Optional


class SubscriptionStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class SubscriptionPlanId(StrEnum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


class TrackerLogType(StrEnum):
    STRENGTH = "strength"
    ENDURANCE = "endurance"
    MEASUREMENTS = "measurements"
    PHOTOS = "photos"
    JOURNAL = "journal"


@dataclass
class AuthenticatedUser:
    """Claims taken from a verified Firebase ID token."""

    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    email_verified: bool = False


@dataclass
class CommunityMessage:
    id: str
    text: str
    uid: str
    display_name: str
    photo_url: Optional[str]
    timestamp: Optional[datetime]
