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


from dataclasses import dataclass, field
from typing import List, Literal, Optional


@dataclass
class SupplementAdvisorInput:
    """The user's profile as collected by the advisor form."""

    fitness_goals: str
    gender: str
    age: int
    weight: float  # kilograms
    activity_level: str
    diet: str
    sleep_quality: str
    race: str
    health_concerns: Optional[List[str]] = None
    other_criteria: Optional[str] = None
    budget: Optional[str] = None


@dataclass
class SupplementSuggestion:
    """A single supplement in a recommended stack."""

    supplement_name: str
    brand: str
    price: str
    user_reviews_summary: str
    scientific_data_summary: str
    where_to_order: str = ""
    image_url: Optional[str] = None
    asin: Optional[str] = None
    dosage: Optional[str] = None
    timing: Optional[str] = None
    description: Optional[str] = None


@dataclass
class SupplementAdvisorOutput:
    """A supplement stack, as returned by the advisor flow."""

    suggestions: List[SupplementSuggestion]
    daily_schedule: str
    additional_notes: Optional[str] = None


@dataclass
class ChatMessage:
    role: Literal["user", "assistant"]
    content: str


@dataclass
class RecommendationContext:
    """A previously generated recommendation the chat should be grounded in."""

    input: SupplementAdvisorInput
    output: SupplementAdvisorOutput


@dataclass
class AIChatbotInterfaceInput:
    user_id: str
    message: str
    chat_history: List[ChatMessage] = field(default_factory=list)
    recommendation_context: Optional[RecommendationContext] = None


@dataclass
class AIChatbotInterfaceOutput:
    response: str
    recommendation: Optional[SupplementAdvisorOutput] = None
    recommendation_input: Optional[SupplementAdvisorInput] = None


@dataclass
class ScheduleSupplement:
    name: str
    dosage: str
    timing: str
    duration: str
    notes: Optional[str] = None


@dataclass
class GenerateSupplementScheduleInput:
    supplements: List[ScheduleSupplement]
    user_lifestyle: str


@dataclass
class GenerateSupplementScheduleOutput:
    schedule: str
