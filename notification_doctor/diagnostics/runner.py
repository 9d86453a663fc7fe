# notification_doctor/diagnostics/runner.py
import asyncio
from typing import Optional

from notification_doctor import config
from notification_doctor.diagnostics.checks import (
    check_existence,
    check_identity,
    check_mutation,
    check_subscription,
    check_unread,
    verify_listener,
)
from notification_doctor.diagnostics.console import Console
from notification_doctor.models.check_result import CheckResult, CheckStatus, RunReport
from notification_doctor.security.session import Session

# etiqueta cuando el check no pasó; existencia y no leídas son solo avisos
SUMMARY_ROWS = [
    ("identity", "User Auth", "❗ FAIL"),
    ("existence", "Notifications Exist", "⚠️  WARN"),
    ("unread", "Unread Notifications", "ℹ️  INFO"),
    ("subscription", "Real-time Listener", "❗ FAIL"),
    ("mutation", "Mark as Read", "❗ FAIL"),
]


async def run_all(
    store,
    session: Optional[Session],
    console: Optional[Console] = None,
    window: Optional[float] = None,
) -> RunReport:
    """
    Corre los cinco checks en orden fijo.
    Sin usuario se corta después del TEST 1; si no, corren todos
    aunque alguno falle. El listener queda vivo `window` segundos
    y se cancela siempre antes del TEST 5.
    """
    console = console or Console()
    window = config.LISTEN_WINDOW_SECONDS if window is None else window
    report = RunReport()

    console.banner("🧪 NOTIFICATION SYSTEM DIAGNOSTIC TESTS")

    report.record(check_identity(session, console))
    if not report.passed("identity"):
        console.line("\n⛔ STOP: Cannot continue without authentication")
        report.aborted = True
        return report

    report.record(await check_existence(store, session, console))
    report.record(await check_unread(store, session, console))

    subscription = check_subscription(store, session, console)
    report.record(
        CheckResult(
            name="subscription",
            status=CheckStatus.PASS if subscription is not None else CheckStatus.FAIL,
            passed=subscription is not None,
        )
    )

    if subscription is not None:
        with subscription:
            console.progress(f"Keeping listener active for {window:g} seconds...")
            console.detail("Send a notification NOW from the admin panel to test real-time!")
            await asyncio.sleep(window)
            verify_listener(subscription, console, store.collection)
            console.line("\n🔴 Stopping listener...")
            # unsubscribe espera al hilo del watch; __exit__ queda como respaldo
            await asyncio.to_thread(subscription.cancel)

    report.record(await check_mutation(store, session, console))

    print_summary(report, console)
    return report


def print_summary(report: RunReport, console: Console) -> None:
    console.banner("TEST RESULTS")
    for index, (name, label, soft) in enumerate(SUMMARY_ROWS, start=1):
        status = "✅ PASS" if report.passed(name) else soft
        console.detail(f"{index}. {label + ':':<22} {status}")

    if report.overall:
        console.line("\n🎉 ALL CRITICAL TESTS PASSED!")
        console.detail("Your notification system should be working.")
        console.detail("If you still don't see alerts, check your alert/notification display code.")
    else:
        console.line("\n⚠️  SOME TESTS FAILED")
        console.detail("Review the error messages above for solutions.")
