"""
Pydantic schemas for the NutriWise FastAPI backend.
"""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from shared.api import (
    AIChatbotInterfaceInput,
    ChatMessage,
    GenerateSupplementScheduleInput,
    RecommendationContext,
    ScheduleSupplement,
    SupplementAdvisorInput,
    SupplementAdvisorOutput,
    SupplementSuggestion,
)
from shared.constants import (
    MAX_AGE,
    MAX_CHAT_HISTORY_ITEMS,
    MAX_CHAT_MESSAGE_LENGTH,
    MAX_WEIGHT,
)
from shared.types import TrackerLogType


# Advisor


class AdvisorInputPayload(BaseModel):
    fitness_goals: str = Field(..., min_length=1)
    gender: str = Field(..., min_length=1)
    age: int = Field(..., gt=0, lt=MAX_AGE)
    weight: float = Field(..., gt=0, lt=MAX_WEIGHT)
    activity_level: str = Field(..., min_length=1)
    diet: str = Field(..., min_length=1)
    sleep_quality: str = Field(..., min_length=1)
    race: str = Field(..., min_length=1)
    health_concerns: Optional[List[str]] = None
    other_criteria: Optional[str] = None
    budget: Optional[str] = None

    def to_dataclass(self) -> SupplementAdvisorInput:
        return SupplementAdvisorInput(**self.model_dump())


class SuggestionPayload(BaseModel):
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


class AdvisorOutputPayload(BaseModel):
    suggestions: List[SuggestionPayload] = Field(..., min_length=1)
    daily_schedule: str
    additional_notes: Optional[str] = None

    def to_dataclass(self) -> SupplementAdvisorOutput:
        return SupplementAdvisorOutput(
            suggestions=[SupplementSuggestion(**s.model_dump()) for s in self.suggestions],
            daily_schedule=self.daily_schedule,
            additional_notes=self.additional_notes,
        )


class ChatMessagePayload(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class RecommendationContextPayload(BaseModel):
    input: AdvisorInputPayload
    output: AdvisorOutputPayload


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=MAX_CHAT_MESSAGE_LENGTH)
    chat_history: List[ChatMessagePayload] = Field(
        default_factory=list, max_length=MAX_CHAT_HISTORY_ITEMS
    )
    recommendation_context: Optional[RecommendationContextPayload] = None

    def to_dataclass(self, user_id: str) -> AIChatbotInterfaceInput:
        context = None
        if self.recommendation_context:
            context = RecommendationContext(
                input=self.recommendation_context.input.to_dataclass(),
                output=self.recommendation_context.output.to_dataclass(),
            )
        return AIChatbotInterfaceInput(
            user_id=user_id,
            message=self.message,
            chat_history=[ChatMessage(**m.model_dump()) for m in self.chat_history],
            recommendation_context=context,
        )


class ChatResponse(BaseModel):
    response: str
    recommendation: Optional[AdvisorOutputPayload] = None
    recommendation_input: Optional[AdvisorInputPayload] = None


class ScheduleSupplementPayload(BaseModel):
    name: str = Field(..., min_length=1)
    dosage: str
    timing: str
    duration: str
    notes: Optional[str] = None


class ScheduleRequest(BaseModel):
    supplements: List[ScheduleSupplementPayload] = Field(..., min_length=1)
    user_lifestyle: str = ""

    def to_dataclass(self) -> GenerateSupplementScheduleInput:
        return GenerateSupplementScheduleInput(
            supplements=[ScheduleSupplement(**s.model_dump()) for s in self.supplements],
            user_lifestyle=self.user_lifestyle,
        )


class ScheduleResponse(BaseModel):
    schedule: str


# Account & plans


class SubscriptionPayload(BaseModel):
    plan: str
    status: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    price: Optional[str] = None


class ProfileResponse(BaseModel):
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    created_at: Optional[str] = None
    is_admin: bool = False
    is_premium: bool = False
    subscription: Optional[SubscriptionPayload] = None


class SavePlanRequest(BaseModel):
    input: AdvisorInputPayload
    output: AdvisorOutputPayload


class PlanResponse(BaseModel):
    id: str
    input: dict
    output: dict
    created_at: Optional[str] = None


class ListPlansResponse(BaseModel):
    plans: List[PlanResponse]


# Tracker


class StrengthLogPayload(BaseModel):
    type: Literal[TrackerLogType.STRENGTH]
    exercise: str = Field(..., min_length=1)
    weight: float = Field(..., ge=0)
    reps: int = Field(..., ge=0)
    sets: int = Field(..., ge=0)


class EnduranceLogPayload(BaseModel):
    type: Literal[TrackerLogType.ENDURANCE]
    activity: str = Field(..., min_length=1)
    duration: float = Field(..., ge=0)
    distance: float = Field(default=0, ge=0)


class MeasurementLogPayload(BaseModel):
    type: Literal[TrackerLogType.MEASUREMENTS]
    part: str = Field(..., min_length=1)
    measurement: float
    unit: str = Field(..., min_length=1)


class PhotoLogPayload(BaseModel):
    type: Literal[TrackerLogType.PHOTOS]
    photo_url: str = Field(..., min_length=1)
    notes: str = ""


class JournalLogPayload(BaseModel):
    type: Literal[TrackerLogType.JOURNAL]
    entry: str = Field(..., min_length=1)


TrackerLogPayload = Annotated[
    Union[
        StrengthLogPayload,
        EnduranceLogPayload,
        MeasurementLogPayload,
        PhotoLogPayload,
        JournalLogPayload,
    ],
    Field(discriminator="type"),
]


class TrackerLogResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    uid: str
    type: str
    created_at: Optional[str] = None


class ListTrackerLogsResponse(BaseModel):
    logs: List[TrackerLogResponse]


# Community chat


class PostCommunityMessageRequest(BaseModel):
    text: str


class CommunityMessageResponse(BaseModel):
    id: str
    text: str
    uid: str
    display_name: str
    photo_url: Optional[str] = None
    timestamp: Optional[str] = None


class ListCommunityMessagesResponse(BaseModel):
    messages: List[CommunityMessageResponse]


# Cart & subscriptions


class CartLinePayload(BaseModel):
    supplement_name: str = Field(..., min_length=1)
    brand: str = ""
    price: str = ""
    asin: Optional[str] = None
    image_url: Optional[str] = None
    quantity: int = Field(default=1, ge=1)


class CartCheckoutRequest(BaseModel):
    items: List[CartLinePayload] = Field(..., min_length=1)


class CartCheckoutResponse(BaseModel):
    items: List[CartLinePayload]
    item_count: int
    subtotal: float
    checkout_url: str


class SubscriptionPlanResponse(BaseModel):
    id: str
    name: str
    price: str
    interval: str
    display_price: str


class ListSubscriptionPlansResponse(BaseModel):
    plans: List[SubscriptionPlanResponse]


class SubscriptionCheckoutRequest(BaseModel):
    plan_id: str


class SubscriptionCheckoutResponse(BaseModel):
    plan: SubscriptionPlanResponse
    email: Optional[str] = None
    status: Literal["demo"] = "demo"
    message: str


class CancelSubscriptionResponse(BaseModel):
    subscription: Optional[SubscriptionPayload] = None
    is_premium: bool


# Admin


class UpgradeUserRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)


class UpgradeUserResponse(BaseModel):
    uid: str
    email: str
    subscription: SubscriptionPayload
    message: str


class AdminUserSummary(BaseModel):
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    created_at: Optional[str] = None
    is_admin: bool = False
    is_premium: bool = False
    subscription: Optional[SubscriptionPayload] = None


class ListUsersResponse(BaseModel):
    users: List[AdminUserSummary]


class RevenueDashboardResponse(BaseModel):
    revenue: dict
    affiliate: dict
    engagement: dict
    recommendations: dict
