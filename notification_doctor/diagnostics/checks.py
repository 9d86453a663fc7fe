# notification_doctor/diagnostics/checks.py
"""
Los cinco checks del diagnóstico de notificaciones.
Cada uno se puede correr suelto; la sesión se pasa siempre explícita.
"""
import asyncio
from typing import Optional

from notification_doctor.diagnostics.console import Console
from notification_doctor.diagnostics.remediation import (
    classify_error,
    error_code,
    error_message,
    index_spec,
    read_rule,
    update_rule,
)
from notification_doctor.infra.firestore_client import Subscription
from notification_doctor.models.check_result import CheckResult, CheckStatus, ErrorKind
from notification_doctor.models.notification import SnapshotEvent
from notification_doctor.security.session import Session

MESSAGE_PREVIEW = 50


def _no_user(console: Console, name: str) -> CheckResult:
    console.failed("No user ID")
    return CheckResult(name=name, status=CheckStatus.FAIL, passed=False, error=ErrorKind.MISSING_IDENTITY)


def _report_error(console: Console, what: str, error: Exception) -> ErrorKind:
    console.failed(f"Error {what}")
    console.detail(f"Error code: {error_code(error)}")
    console.detail(f"Error message: {error_message(error)}")
    return classify_error(error)


# =============================
# TEST 1: identidad
# =============================
def check_identity(session: Optional[Session], console: Console) -> CheckResult:
    console.header("TEST 1: User Authentication")

    if session is None:
        console.failed("No authenticated user")
        console.hint("Make sure the user is signed in before testing")
        return CheckResult(
            name="identity", status=CheckStatus.FAIL, passed=False, error=ErrorKind.MISSING_IDENTITY
        )

    console.passed("User is authenticated")
    console.detail(f"User ID: {session.uid}")
    console.detail(f"Email: {session.email}")
    return CheckResult(name="identity", status=CheckStatus.PASS, passed=True)


# =============================
# TEST 2: existen notificaciones
# =============================
async def check_existence(store, session: Optional[Session], console: Console) -> CheckResult:
    console.header("TEST 2: Notifications Exist")
    if session is None:
        return _no_user(console, "existence")

    try:
        # todas, leídas y no leídas
        notis = await asyncio.to_thread(store.list_for_user, session.uid)
    except Exception as e:
        kind = _report_error(console, "fetching notifications", e)
        if kind is ErrorKind.ACCESS_DENIED:
            console.fix("Update Firestore security rules", ["Add this rule:", *read_rule(store.collection)])
        return CheckResult(name="existence", status=CheckStatus.FAIL, passed=False, error=kind)

    if not notis:
        console.warn("No notifications found for this user")
        console.hint("Send a test notification from the admin panel")
        console.hint("Check Firebase Console to verify the notification was created")
        console.hint(f"Verify userId in the notification matches: {session.uid}")
        return CheckResult(name="existence", status=CheckStatus.WARN, passed=False, count=0)

    console.passed(f"Found {len(notis)} notification(s)")
    for index, n in enumerate(notis, start=1):
        console.line(f"\n   Notification {index}:")
        console.detail(f"- ID: {n.id}")
        console.detail(f"- Type: {n.type}")
        console.detail(f"- Title: {n.title}")
        console.detail(f"- Read: {n.read}")
        console.detail(f"- Timestamp: {n.timestamp}")

    return CheckResult(name="existence", status=CheckStatus.PASS, passed=True, count=len(notis))


# =============================
# TEST 3: no leídas
# =============================
async def check_unread(store, session: Optional[Session], console: Console) -> CheckResult:
    console.header("TEST 3: Unread Notifications")
    if session is None:
        return _no_user(console, "unread")

    try:
        notis = await asyncio.to_thread(store.list_unread, session.uid)
    except Exception as e:
        kind = _report_error(console, "fetching unread notifications", e)
        if kind is ErrorKind.MISSING_INDEX:
            console.fix("Create Firestore index", index_spec(store.collection))
        return CheckResult(name="unread", status=CheckStatus.FAIL, passed=False, error=kind)

    if not notis:
        # no es un fallo: puede que todo esté leído
        console.info("No unread notifications")
        console.hint("All notifications have been read, or none exist")
        console.hint("Send a new notification from the admin panel to test")
        return CheckResult(name="unread", status=CheckStatus.INFO, passed=True, count=0)

    console.passed(f"Found {len(notis)} unread notification(s)")
    for index, n in enumerate(notis, start=1):
        console.line(f"\n   Unread Notification {index}:")
        console.detail(f"- Type: {n.type}")
        console.detail(f"- Title: {n.title}")
        console.detail(f"- Message: {(n.message or '')[:MESSAGE_PREVIEW]}...")

    return CheckResult(name="unread", status=CheckStatus.PASS, passed=True, count=len(notis))


# =============================
# TEST 4: listener en vivo
# =============================
def log_snapshot(console: Console, event: SnapshotEvent) -> None:
    console.line("\n📬 SNAPSHOT RECEIVED")
    console.detail(f"Total documents: {event.total}")
    console.detail(f"Changes: {len(event.changes)}")

    for change in event.changes:
        console.line(f"\n   {change.kind.upper()}:")
        console.detail(f"- Doc ID: {change.notification.id}")
        console.detail(f"- Data: {change.data}")
        if change.kind == "added":
            console.detail("🔔 NEW NOTIFICATION DETECTED!")
            console.hint("This should trigger an alert in your app")


def _listener_fix(console: Console, kind: ErrorKind, collection: str) -> None:
    if kind is ErrorKind.MISSING_INDEX:
        console.fix("Create Firestore index", index_spec(collection))
    elif kind is ErrorKind.ACCESS_DENIED:
        console.fix("Update Firestore security rules", ["Add this rule:", *read_rule(collection)])


def report_listener_error(console: Console, error: Exception, collection: str) -> None:
    """Lo que llega por el hilo del watch después de armado el listener."""
    console.line()
    console.failed("Listener error")
    console.detail(f"Error code: {error_code(error)}")
    console.detail(f"Error message: {error_message(error)}")
    _listener_fix(console, classify_error(error), collection)


def verify_listener(subscription: Subscription, console: Console, collection: str) -> bool:
    """
    on_snapshot vuelve antes de que el backend conteste, así que un índice
    faltante o unas rules que no dejan solo se notan porque el watch se cae.
    """
    if subscription.alive:
        return True
    if subscription.error is not None:
        # ya se avisó desde el hilo del watch
        return False

    console.line()
    console.failed("Listener error")
    console.detail("The listener stopped before the observation window ended")
    console.hint("The live query needs a composite index and read access")
    console.fix("Create Firestore index", index_spec(collection))
    return False


def check_subscription(store, session: Optional[Session], console: Console) -> Optional[Subscription]:
    """
    Deja un listener abierto sobre las no leídas del usuario.
    Devuelve el handle para cancelarlo, o None si no se pudo armar.
    Que se arme sin error es todo lo que se puede verificar acá.
    """
    console.header("TEST 4: Real-time Listener")
    if session is None:
        console.failed("No user ID")
        return None

    console.progress("Setting up real-time listener...")
    console.detail(f"Listening for userId: {session.uid}")

    try:
        subscription = store.watch_unread(
            session.uid,
            lambda event: log_snapshot(console, event),
            on_error=lambda error: report_listener_error(console, error, store.collection),
        )
    except Exception as e:
        _listener_fix(console, _report_error(console, "setting up listener", e), store.collection)
        return None

    console.passed("Listener setup complete")
    console.hint("Listener will log when new notifications arrive")
    console.hint("To stop: cancel the returned subscription")
    return subscription


# =============================
# TEST 5: marcar como leída
# =============================
async def check_mutation(store, session: Optional[Session], console: Console) -> CheckResult:
    console.header("TEST 5: Mark as Read")
    if session is None:
        return _no_user(console, "mutation")

    try:
        first = await asyncio.to_thread(store.first_unread, session.uid)
        if first is None:
            console.info("No unread notifications to mark", label="SKIP")
            return CheckResult(name="mutation", status=CheckStatus.SKIP, passed=True)

        console.progress("Attempting to mark notification as read...")
        console.detail(f"Notification ID: {first.id}")
        await asyncio.to_thread(store.mark_as_read, first.id)
    except Exception as e:
        kind = _report_error(console, "marking as read", e)
        if kind is ErrorKind.ACCESS_DENIED:
            console.fix("Update Firestore security rules", ["Add this rule:", *update_rule(store.collection)])
        return CheckResult(name="mutation", status=CheckStatus.FAIL, passed=False, error=kind)

    console.passed("Successfully marked as read")
    console.hint("Your app can update notifications")
    return CheckResult(name="mutation", status=CheckStatus.PASS, passed=True, notification_id=first.id)
