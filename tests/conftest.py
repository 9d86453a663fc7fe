"""Shared fixtures: an in-memory notification store and a captured console."""

from __future__ import annotations

import io
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

import pytest

from notification_doctor.diagnostics.console import Console
from notification_doctor.infra.firestore_client import Subscription
from notification_doctor.models.notification import (
    Notification,
    NotificationChange,
    SnapshotEvent,
)
from notification_doctor.security.session import Session

BASE_TIME = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_doc(doc_id: str, user_id: str = "user-1", read: bool = False, minutes: int = 0, **extra) -> dict:
    data = {
        "id": doc_id,
        "userId": user_id,
        "type": "WARNING",
        "title": f"Title {doc_id}",
        "message": f"Message body for {doc_id}",
        "read": read,
        "timestamp": BASE_TIME + timedelta(minutes=minutes),
    }
    data.update(extra)
    return data


class FakeStore:
    """Same surface as NotificationStore, backed by a dict."""

    def __init__(self, docs: Optional[List[dict]] = None, collection: str = "notifications") -> None:
        self.collection = collection
        self.docs: Dict[str, dict] = {d["id"]: dict(d) for d in docs or []}
        self.errors: Dict[str, Exception] = {}
        self.updates: List[str] = []
        self.subscriptions: List[Subscription] = []
        self.unsubscribe_calls = 0
        self.unsubscribe_threads: List[int] = []
        # lo que devolvería Watch.is_active
        self.watch_active = True

    def _maybe_fail(self, op: str) -> None:
        if op in self.errors:
            raise self.errors[op]

    def _owned(self, user_id: str) -> List[Notification]:
        return [
            Notification.from_document(doc_id, data)
            for doc_id, data in self.docs.items()
            if data["userId"] == user_id
        ]

    def list_for_user(self, user_id: str) -> List[Notification]:
        self._maybe_fail("list_for_user")
        return self._owned(user_id)

    def list_unread(self, user_id: str) -> List[Notification]:
        self._maybe_fail("list_unread")
        return [n for n in self._owned(user_id) if not n.read]

    def first_unread(self, user_id: str) -> Optional[Notification]:
        self._maybe_fail("first_unread")
        unread = self.list_unread(user_id)
        return unread[0] if unread else None

    def mark_as_read(self, notification_id: str) -> None:
        self._maybe_fail("mark_as_read")
        self.docs[notification_id]["read"] = True
        self.updates.append(notification_id)

    def watch_unread(
        self,
        user_id: str,
        on_event: Callable[[SnapshotEvent], None],
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> Subscription:
        self._maybe_fail("watch_unread")

        def _unsubscribe() -> None:
            self.unsubscribe_calls += 1
            self.unsubscribe_threads.append(threading.get_ident())

        subscription = Subscription(on_event, on_error)
        subscription.attach(_unsubscribe, lambda: self.watch_active)
        self.subscriptions.append(subscription)

        # como Firestore: el primer snapshot trae todo como "added"
        unread = sorted(self.list_unread(user_id), key=lambda n: n.timestamp, reverse=True)
        subscription.dispatch(self.event("added", unread, total=len(unread)))
        return subscription

    @staticmethod
    def event(kind: str, notifications: List[Notification], total: int) -> SnapshotEvent:
        return SnapshotEvent(
            total=total,
            changes=[
                NotificationChange(kind=kind, notification=n, data=n.model_dump())
                for n in notifications
            ],
        )


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(output: io.StringIO) -> Console:
    return Console(output)


@pytest.fixture
def session() -> Session:
    return Session(uid="user-1", email="user1@example.com")
