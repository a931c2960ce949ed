"""
HTTP routes for the NutriWise API.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from fastapi.exceptions import RequestValidationError
from google.api_core import exceptions
from google.genai import errors as genai_errors
from pydantic import TypeAdapter, ValidationError

from advisor import chatbot, supplement_advisor, supplement_schedule
from backend import image_proxy
from backend.auth import (
    get_current_profile,
    get_current_user,
    get_or_create_profile,
    require_admin,
    require_premium,
)
from backend.config import Settings, get_settings
from backend.db import DbClient
from backend.dependencies import get_db_client, get_image_store
from backend.schemas import (
    AdminUserSummary,
    AdvisorInputPayload,
    AdvisorOutputPayload,
    CancelSubscriptionResponse,
    CartCheckoutRequest,
    CartCheckoutResponse,
    ChatRequest,
    ChatResponse,
    CommunityMessageResponse,
    ListCommunityMessagesResponse,
    ListPlansResponse,
    ListSubscriptionPlansResponse,
    ListTrackerLogsResponse,
    ListUsersResponse,
    PlanResponse,
    PostCommunityMessageRequest,
    ProfileResponse,
    RevenueDashboardResponse,
    SavePlanRequest,
    ScheduleRequest,
    ScheduleResponse,
    SubscriptionCheckoutRequest,
    SubscriptionCheckoutResponse,
    SubscriptionPlanResponse,
    TrackerLogPayload,
    TrackerLogResponse,
    UpgradeUserRequest,
    UpgradeUserResponse,
)
from backend.storage import ImageStore
from commerce import cart, revenue, subscriptions
from models.gemini import GeminiInvalidResponseException, is_quota_error
from shared.constants import MAX_COMMUNITY_MESSAGE_LENGTH, PLACEHOLDER_IMAGE_URL
from shared.firebase_constants import GENERATED_IMAGES_PREFIX
from shared.types import AuthenticatedUser, CommunityMessage, SubscriptionPlanId

logger = logging.getLogger(__name__)

router = APIRouter()

PLAN_IDS = {str(plan_id) for plan_id in SubscriptionPlanId}
TRACKER_LOG_ADAPTER = TypeAdapter(TrackerLogPayload)


def _call_model(fn, *args, **kwargs):
    """Runs a model-backed flow, mapping its failures onto HTTP errors."""
    try:
        return fn(*args, **kwargs)
    except (exceptions.TooManyRequests, genai_errors.APIError) as e:
        if is_quota_error(e):
            logger.warning("Gemini quota exceeded: %s", e)
            raise HTTPException(status_code=429, detail=f"Gemini quota exceeded: {e}")
        logger.error("Gemini API error: %s", e)
        raise HTTPException(status_code=502, detail=f"Gemini API error: {e}")
    except (
        supplement_advisor.AdvisorError,
        chatbot.ChatbotError,
        GeminiInvalidResponseException,
    ) as e:
        logger.error("Model call failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _subscription_payload(subscription: Optional[dict]) -> Optional[dict]:
    if not subscription:
        return None
    return {
        "plan": subscription.get("plan", ""),
        "status": subscription.get("status", ""),
        "start_date": subscriptions.to_iso(subscription.get("start_date")),
        "end_date": subscriptions.to_iso(subscription.get("end_date")),
        "price": subscription.get("price"),
    }


def _profile_payload(uid: str, profile: dict) -> dict:
    subscription = profile.get("subscription")
    return {
        "uid": uid,
        "email": profile.get("email"),
        "display_name": profile.get("display_name"),
        "photo_url": profile.get("photo_url"),
        "created_at": subscriptions.to_iso(profile.get("created_at")),
        "is_admin": bool(profile.get("is_admin", False)),
        "is_premium": subscriptions.is_premium(subscription),
        "subscription": _subscription_payload(subscription),
    }


def _plan_payload(plan: subscriptions.SubscriptionPlan) -> SubscriptionPlanResponse:
    return SubscriptionPlanResponse(
        id=str(plan.id),
        name=plan.name,
        price=plan.price,
        interval=plan.interval,
        display_price=plan.display_price,
    )


def _stored_image_url(data_uri: str, image_store: ImageStore | None) -> str:
    if image_store is None:
        return PLACEHOLDER_IMAGE_URL
    try:
        return image_store.upload_data_uri(
            f"{GENERATED_IMAGES_PREFIX}/{uuid.uuid4().hex}", data_uri
        )
    except Exception as e:
        logger.warning("Could not store plan image, using placeholder: %s", e)
        return PLACEHOLDER_IMAGE_URL


def _persistable_output(output: dict, image_store: ImageStore | None) -> dict:
    """
    Replaces inline data-URI images so a saved plan stays well under the
    Firestore document size limit.
    """
    suggestions = []
    for suggestion in output.get("suggestions", []):
        image_url = suggestion.get("image_url") or ""
        if image_url.startswith("data:"):
            suggestion = {
                **suggestion,
                "image_url": _stored_image_url(image_url, image_store),
            }
        suggestions.append(suggestion)
    return {**output, "suggestions": suggestions}


def _message_payload(message: CommunityMessage) -> CommunityMessageResponse:
    return CommunityMessageResponse(
        id=message.id,
        text=message.text,
        uid=message.uid,
        display_name=message.display_name,
        photo_url=message.photo_url,
        timestamp=subscriptions.to_iso(message.timestamp),
    )


# Advisor flows


@router.post("/advisor/suggest", response_model=AdvisorOutputPayload)
def suggest_supplements(
    payload: AdvisorInputPayload,
    image_store: ImageStore | None = Depends(get_image_store),
    settings: Settings = Depends(get_settings),
):
    output = _call_model(
        supplement_advisor.suggest_supplements,
        payload.to_dataclass(),
        api_key=settings.gemini_api_key,
        image_store=image_store,
        affiliate_tag=settings.affiliate_tag,
    )
    return asdict(output)


@router.post("/advisor/chat", response_model=ChatResponse)
def chatbot_response(
    payload: ChatRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    image_store: ImageStore | None = Depends(get_image_store),
    settings: Settings = Depends(get_settings),
):
    """
    Answers a chat message; the user id is always taken from the verified token.
    """
    output = _call_model(
        chatbot.ai_chatbot_interface,
        payload.to_dataclass(user.uid),
        api_key=settings.gemini_api_key,
        image_store=image_store,
    )
    return asdict(output)


@router.post("/advisor/schedule", response_model=ScheduleResponse)
def generate_supplement_schedule(
    payload: ScheduleRequest, settings: Settings = Depends(get_settings)
):
    output = _call_model(
        supplement_schedule.generate_supplement_schedule,
        payload.to_dataclass(),
        api_key=settings.gemini_api_key,
    )
    return asdict(output)


# Account


@router.get("/account/profile", response_model=ProfileResponse)
def get_profile(
    plan: Optional[str] = Query(None, description="Plan to activate on first sign-in"),
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    if plan is not None and plan not in PLAN_IDS:
        raise HTTPException(status_code=400, detail=f"Unknown subscription plan: {plan}")
    profile = get_or_create_profile(db, user, initial_plan=plan)
    return _profile_payload(user.uid, profile)


@router.post("/account/subscription/cancel", response_model=CancelSubscriptionResponse)
def cancel_subscription(
    profile: dict = Depends(get_current_profile),
    db: DbClient = Depends(get_db_client),
):
    subscription = profile.get("subscription")
    if not subscription:
        raise HTTPException(status_code=400, detail="No subscription to cancel")
    cancelled = subscriptions.cancel_subscription(subscription)
    db.update_user(profile["uid"], {"subscription": cancelled})
    logger.info("Cancelled subscription for %s", profile["uid"])
    return CancelSubscriptionResponse(
        subscription=_subscription_payload(cancelled), is_premium=False
    )


# Saved plans


@router.get("/plans", response_model=ListPlansResponse)
def list_plans(
    profile: dict = Depends(require_premium),
    db: DbClient = Depends(get_db_client),
):
    plans = db.list_plans(profile["uid"])
    return ListPlansResponse(plans=[PlanResponse(**p.as_dict()) for p in plans])


@router.post("/plans", response_model=PlanResponse, status_code=201)
def save_plan(
    payload: SavePlanRequest,
    profile: dict = Depends(get_current_profile),
    db: DbClient = Depends(get_db_client),
    image_store: ImageStore | None = Depends(get_image_store),
):
    output = _persistable_output(payload.output.model_dump(), image_store)
    record = db.add_plan(profile["uid"], payload.input.model_dump(), output)
    return PlanResponse(**record.as_dict())


# Progress tracker


@router.get("/tracker/logs", response_model=ListTrackerLogsResponse)
def list_tracker_logs(
    profile: dict = Depends(require_premium),
    db: DbClient = Depends(get_db_client),
):
    logs = db.list_tracker_logs(profile["uid"])
    return ListTrackerLogsResponse(
        logs=[TrackerLogResponse(**log.as_dict()) for log in logs]
    )


@router.post("/tracker/logs", response_model=TrackerLogResponse, status_code=201)
def add_tracker_log(
    body: dict = Body(...),
    profile: dict = Depends(require_premium),
    db: DbClient = Depends(get_db_client),
):
    try:
        payload = TRACKER_LOG_ADAPTER.validate_python(body)
    except ValidationError as e:
        raise RequestValidationError(e.errors())
    data = payload.model_dump(exclude={"type"})
    record = db.add_tracker_log(profile["uid"], str(payload.type), data)
    return TrackerLogResponse(**record.as_dict())


@router.delete("/tracker/logs/{log_id}", status_code=204)
def delete_tracker_log(
    log_id: str,
    profile: dict = Depends(require_premium),
    db: DbClient = Depends(get_db_client),
):
    if not db.delete_tracker_log(profile["uid"], log_id):
        raise HTTPException(status_code=404, detail="Log not found")
    return Response(status_code=204)


# Community chat


@router.get("/community/messages", response_model=ListCommunityMessagesResponse)
def list_community_messages(
    _: dict = Depends(get_current_profile),
    db: DbClient = Depends(get_db_client),
):
    messages = db.list_community_messages()
    return ListCommunityMessagesResponse(
        messages=[_message_payload(m) for m in messages]
    )


@router.post(
    "/community/messages", response_model=CommunityMessageResponse, status_code=201
)
def post_community_message(
    payload: PostCommunityMessageRequest,
    profile: dict = Depends(get_current_profile),
    db: DbClient = Depends(get_db_client),
):
    text = payload.text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Message cannot be empty")
    if len(text) > MAX_COMMUNITY_MESSAGE_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Message exceeds {MAX_COMMUNITY_MESSAGE_LENGTH} characters",
        )
    message = db.add_community_message(
        profile["uid"],
        profile.get("display_name") or "Anonymous",
        profile.get("photo_url"),
        text,
    )
    return _message_payload(message)


# Cart & subscriptions


@router.post("/cart/checkout", response_model=CartCheckoutResponse)
def cart_checkout(
    payload: CartCheckoutRequest, settings: Settings = Depends(get_settings)
):
    state = cart.cart_from_items(
        cart.CartItem(**line.model_dump()) for line in payload.items
    )
    try:
        url = cart.checkout_url(state, tag=settings.affiliate_tag)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CartCheckoutResponse(
        items=cart.as_list(state),
        item_count=cart.item_count(state),
        subtotal=cart.cart_subtotal(state),
        checkout_url=url,
    )


@router.get("/subscribe/plans", response_model=ListSubscriptionPlansResponse)
def list_subscription_plans():
    return ListSubscriptionPlansResponse(
        plans=[_plan_payload(plan) for plan in subscriptions.PLANS.values()]
    )


@router.post("/subscribe/checkout", response_model=SubscriptionCheckoutResponse)
def subscription_checkout(
    payload: SubscriptionCheckoutRequest,
    user: AuthenticatedUser = Depends(get_current_user),
):
    """
    Quotes the selected plan. No payment is taken and no subscription is
    activated.
    """
    try:
        plan = subscriptions.get_plan(payload.plan_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info("Checkout requested for plan %s by %s", plan.id, user.uid)
    return SubscriptionCheckoutResponse(
        plan=_plan_payload(plan),
        email=user.email,
        message=subscriptions.DEMO_MODE_MESSAGE,
    )


# Admin


@router.post("/admin/upgrade-user", response_model=UpgradeUserResponse)
def upgrade_user(
    payload: UpgradeUserRequest,
    _: dict = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
):
    email = payload.email.strip()
    found = db.find_user_by_email(email)
    if not found:
        raise HTTPException(status_code=404, detail=f"No user found with email: {email}")
    uid, _user = found

    now = datetime.now(timezone.utc)
    subscription = subscriptions.activate_subscription(SubscriptionPlanId.YEARLY, now)
    db.update_user(uid, {"subscription": subscription, "upgrade_date": now})
    logger.info("Upgraded %s to premium", uid)

    return UpgradeUserResponse(
        uid=uid,
        email=email,
        subscription=_subscription_payload(subscription),
        message=(
            f"User {email} has been upgraded to premium (valid until "
            f"{subscription['end_date'].date().isoformat()})"
        ),
    )


@router.get("/admin/users", response_model=ListUsersResponse)
def list_users(
    _: dict = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
):
    return ListUsersResponse(
        users=[
            AdminUserSummary(**_profile_payload(uid, user))
            for uid, user in db.list_users()
        ]
    )


@router.get("/admin/revenue", response_model=RevenueDashboardResponse)
def revenue_dashboard(_: dict = Depends(require_admin)):
    return revenue.get_dashboard()


# Image proxies


def _image_response(fetch, url: Optional[str], settings: Settings) -> Response:
    try:
        image = fetch(url, timeout=settings.image_proxy_timeout_seconds)
    except image_proxy.ImageProxyError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(
        content=image.content, media_type=image.content_type, headers=image.headers
    )


@router.get("/proxy-image")
def proxy_image(
    url: Optional[str] = Query(None), settings: Settings = Depends(get_settings)
):
    return _image_response(image_proxy.proxy_amazon_image, url, settings)


@router.get("/image")
def image(url: Optional[str] = Query(None), settings: Settings = Depends(get_settings)):
    return _image_response(image_proxy.proxy_allowed_image, url, settings)
