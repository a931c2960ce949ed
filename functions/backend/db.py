"""
Database abstraction for Firestore and an in-memory test implementation.

The client API speaks snake_case dicts; Firestore documents keep the camelCase
field names the web client reads.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol

from firebase_admin import firestore
from google.cloud.firestore_v1 import SERVER_TIMESTAMP
from google.cloud.firestore_v1.base_query import FieldFilter

from shared.constants import COMMUNITY_CHAT_PAGE_SIZE
from shared.firebase_constants import (
    COMMUNITY_CHAT_COLLECTION,
    PLANS_COLLECTION,
    TRACKER_LOGS_COLLECTION,
    USERS_COLLECTION,
)
from shared.json_utils import convert_keys
from shared.types import CommunityMessage


def _now() -> datetime:
    return datetime.now(timezone.utc)


class DbClient(Protocol):
    """Interface for database access."""

    def get_user(self, uid: str) -> Optional[dict]:
        ...

    def create_user(self, uid: str, data: dict) -> None:
        ...

    def update_user(self, uid: str, data: dict) -> None:
        ...

    def find_user_by_email(self, email: str) -> Optional[tuple[str, dict]]:
        ...

    def list_users(self, limit: int = 500) -> list[tuple[str, dict]]:
        ...

    def add_plan(self, uid: str, plan_input: dict, plan_output: dict) -> "PlanRecord":
        ...

    def list_plans(self, uid: str) -> list["PlanRecord"]:
        ...

    def add_tracker_log(
        self, uid: str, log_type: str, data: dict
    ) -> "TrackerLogRecord":
        ...

    def list_tracker_logs(self, uid: str) -> list["TrackerLogRecord"]:
        ...

    def delete_tracker_log(self, uid: str, log_id: str) -> bool:
        ...

    def add_community_message(
        self, uid: str, display_name: str, photo_url: Optional[str], text: str
    ) -> CommunityMessage:
        ...

    def list_community_messages(
        self, limit: int = COMMUNITY_CHAT_PAGE_SIZE
    ) -> list[CommunityMessage]:
        ...


@dataclass
class PlanRecord:
    id: str
    input: dict
    output: dict
    created_at: Optional[datetime] = None

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "input": self.input,
            "output": self.output,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass
class TrackerLogRecord:
    id: str
    uid: str
    type: str
    data: dict = field(default_factory=dict)
    created_at: Optional[datetime] = None

    def as_dict(self) -> dict:
        return {
            **self.data,
            "id": self.id,
            "uid": self.uid,
            "type": self.type,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.users: Dict[str, dict] = {}
        self.plans: Dict[str, List[PlanRecord]] = {}
        self.tracker_logs: Dict[str, List[TrackerLogRecord]] = {}
        self.community_messages: List[CommunityMessage] = []

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.users.clear()
        self.plans.clear()
        self.tracker_logs.clear()
        self.community_messages.clear()

    def get_user(self, uid: str) -> Optional[dict]:
        user = self.users.get(uid)
        return dict(user) if user is not None else None

    def create_user(self, uid: str, data: dict) -> None:
        self.users[uid] = {"created_at": _now(), **data}

    def update_user(self, uid: str, data: dict) -> None:
        user = self.users.setdefault(uid, {})
        user.update(data)
        user["updated_at"] = _now()

    def find_user_by_email(self, email: str) -> Optional[tuple[str, dict]]:
        for uid, user in self.users.items():
            if user.get("email") == email:
                return uid, dict(user)
        return None

    def list_users(self, limit: int = 500) -> list[tuple[str, dict]]:
        newest_first = sorted(
            reversed(list(self.users.items())),
            key=lambda item: item[1].get("created_at") or datetime.min.replace(
                tzinfo=timezone.utc
            ),
            reverse=True,
        )
        return [(uid, dict(user)) for uid, user in newest_first[:limit]]

    def add_plan(self, uid: str, plan_input: dict, plan_output: dict) -> PlanRecord:
        record = PlanRecord(
            id=uuid.uuid4().hex, input=plan_input, output=plan_output, created_at=_now()
        )
        self.plans.setdefault(uid, []).append(record)
        return record

    def list_plans(self, uid: str) -> list[PlanRecord]:
        return list(reversed(self.plans.get(uid, [])))

    def add_tracker_log(self, uid: str, log_type: str, data: dict) -> TrackerLogRecord:
        record = TrackerLogRecord(
            id=uuid.uuid4().hex, uid=uid, type=log_type, data=data, created_at=_now()
        )
        self.tracker_logs.setdefault(uid, []).append(record)
        return record

    def list_tracker_logs(self, uid: str) -> list[TrackerLogRecord]:
        return list(reversed(self.tracker_logs.get(uid, [])))

    def delete_tracker_log(self, uid: str, log_id: str) -> bool:
        logs = self.tracker_logs.get(uid, [])
        for i, log in enumerate(logs):
            if log.id == log_id:
                del logs[i]
                return True
        return False

    def add_community_message(
        self, uid: str, display_name: str, photo_url: Optional[str], text: str
    ) -> CommunityMessage:
        message = CommunityMessage(
            id=uuid.uuid4().hex,
            text=text,
            uid=uid,
            display_name=display_name,
            photo_url=photo_url,
            timestamp=_now(),
        )
        self.community_messages.append(message)
        return message

    def list_community_messages(
        self, limit: int = COMMUNITY_CHAT_PAGE_SIZE
    ) -> list[CommunityMessage]:
        return self.community_messages[-limit:] if limit > 0 else []


class FirestoreDbClient:
    """
    Firestore-backed implementation using the firebase_admin client.
    """

    def __init__(self, client=None):
        self.client = client or firestore.client()

    def _users(self):
        return self.client.collection(USERS_COLLECTION)

    def _user_subcollection(self, uid: str, name: str):
        return self._users().document(uid).collection(name)

    def get_user(self, uid: str) -> Optional[dict]:
        snapshot = self._users().document(uid).get()
        if not snapshot.exists:
            return None
        return convert_keys(snapshot.to_dict(), "camel_to_snake")

    def create_user(self, uid: str, data: dict) -> None:
        doc = convert_keys({**data, "created_at": SERVER_TIMESTAMP}, "snake_to_camel")
        self._users().document(uid).set(doc)

    def update_user(self, uid: str, data: dict) -> None:
        doc = convert_keys({**data, "updated_at": SERVER_TIMESTAMP}, "snake_to_camel")
        self._users().document(uid).set(doc, merge=True)

    def find_user_by_email(self, email: str) -> Optional[tuple[str, dict]]:
        query = self._users().where(filter=FieldFilter("email", "==", email)).limit(1)
        for snapshot in query.stream():
            return snapshot.id, convert_keys(snapshot.to_dict(), "camel_to_snake")
        return None

    def list_users(self, limit: int = 500) -> list[tuple[str, dict]]:
        query = (
            self._users()
            .order_by("createdAt", direction=firestore.Query.DESCENDING)
            .limit(limit)
        )
        return [
            (snapshot.id, convert_keys(snapshot.to_dict(), "camel_to_snake"))
            for snapshot in query.stream()
        ]

    def add_plan(self, uid: str, plan_input: dict, plan_output: dict) -> PlanRecord:
        doc = {
            "input": convert_keys(plan_input, "snake_to_camel"),
            "output": convert_keys(plan_output, "snake_to_camel"),
            "createdAt": SERVER_TIMESTAMP,
        }
        _, doc_ref = self._user_subcollection(uid, PLANS_COLLECTION).add(doc)
        return PlanRecord(
            id=doc_ref.id, input=plan_input, output=plan_output, created_at=_now()
        )

    def list_plans(self, uid: str) -> list[PlanRecord]:
        query = self._user_subcollection(uid, PLANS_COLLECTION).order_by(
            "createdAt", direction=firestore.Query.DESCENDING
        )
        plans = []
        for snapshot in query.stream():
            data = snapshot.to_dict()
            plans.append(
                PlanRecord(
                    id=snapshot.id,
                    input=convert_keys(data.get("input", {}), "camel_to_snake"),
                    output=convert_keys(data.get("output", {}), "camel_to_snake"),
                    created_at=data.get("createdAt"),
                )
            )
        return plans

    def add_tracker_log(self, uid: str, log_type: str, data: dict) -> TrackerLogRecord:
        doc = convert_keys(
            {**data, "type": log_type, "uid": uid, "created_at": SERVER_TIMESTAMP},
            "snake_to_camel",
        )
        _, doc_ref = self._user_subcollection(uid, TRACKER_LOGS_COLLECTION).add(doc)
        return TrackerLogRecord(
            id=doc_ref.id, uid=uid, type=log_type, data=data, created_at=_now()
        )

    def list_tracker_logs(self, uid: str) -> list[TrackerLogRecord]:
        query = self._user_subcollection(uid, TRACKER_LOGS_COLLECTION).order_by(
            "createdAt", direction=firestore.Query.DESCENDING
        )
        logs = []
        for snapshot in query.stream():
            data = convert_keys(snapshot.to_dict(), "camel_to_snake")
            created_at = data.pop("created_at", None)
            log_type = data.pop("type", "")
            data.pop("uid", None)
            logs.append(
                TrackerLogRecord(
                    id=snapshot.id,
                    uid=uid,
                    type=log_type,
                    data=data,
                    created_at=created_at,
                )
            )
        return logs

    def delete_tracker_log(self, uid: str, log_id: str) -> bool:
        doc_ref = self._user_subcollection(uid, TRACKER_LOGS_COLLECTION).document(log_id)
        if not doc_ref.get().exists:
            return False
        doc_ref.delete()
        return True

    def add_community_message(
        self, uid: str, display_name: str, photo_url: Optional[str], text: str
    ) -> CommunityMessage:
        doc = {
            "text": text,
            "uid": uid,
            "displayName": display_name,
            "photoURL": photo_url,
            "timestamp": SERVER_TIMESTAMP,
        }
        _, doc_ref = self.client.collection(COMMUNITY_CHAT_COLLECTION).add(doc)
        return CommunityMessage(
            id=doc_ref.id,
            text=text,
            uid=uid,
            display_name=display_name,
            photo_url=photo_url,
            timestamp=_now(),
        )

    def list_community_messages(
        self, limit: int = COMMUNITY_CHAT_PAGE_SIZE
    ) -> list[CommunityMessage]:
        # Newest `limit` messages, handed back oldest first for display.
        query = (
            self.client.collection(COMMUNITY_CHAT_COLLECTION)
            .order_by("timestamp", direction=firestore.Query.DESCENDING)
            .limit(limit)
        )
        messages = []
        for snapshot in query.stream():
            data = snapshot.to_dict()
            messages.append(
                CommunityMessage(
                    id=snapshot.id,
                    text=data.get("text", ""),
                    uid=data.get("uid", ""),
                    display_name=data.get("displayName") or "Anonymous",
                    photo_url=data.get("photoURL"),
                    timestamp=data.get("timestamp"),
                )
            )
        messages.reverse()
        return messages
