# notification_doctor/main.py
import asyncio
import sys

from dotenv import load_dotenv

# 1) cargar variables de entorno del .env (antes de leer config)
load_dotenv()

from notification_doctor import config
from notification_doctor.diagnostics.console import Console
from notification_doctor.diagnostics.runner import run_all
from notification_doctor.infra.firestore_client import NotificationStore, get_firestore_client
from notification_doctor.security.session import SessionError, current_session


def main() -> int:
    console = Console()

    # 2) sesión del usuario logueado (viene de afuera como ID token)
    try:
        session = current_session(
            config.FIREBASE_ID_TOKEN,
            project_id=config.FIREBASE_PROJECT_ID,
            verify=config.VERIFY_ID_TOKEN,
        )
    except SessionError as e:
        console.line(f"⚠️  Ignoring FIREBASE_ID_TOKEN: {e}")
        session = None

    # 3) el store solo hace falta si hay usuario
    store = None
    if session is not None:
        client = get_firestore_client(config.FIREBASE_PROJECT_ID, config.FIREBASE_ID_TOKEN)
        store = NotificationStore(client, collection=config.NOTIFICATIONS_COLLECTION)

    report = asyncio.run(run_all(store, session, console, window=config.LISTEN_WINDOW_SECONDS))
    return 0 if report.overall else 1


if __name__ == "__main__":
    sys.exit(main())
