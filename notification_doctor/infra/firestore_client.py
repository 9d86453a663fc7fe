# notification_doctor/infra/firestore_client.py
import threading
from typing import Callable, List, Optional

import google.oauth2.credentials
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from notification_doctor import config
from notification_doctor.models.notification import (
    Notification,
    NotificationChange,
    SnapshotEvent,
)


def get_firestore_client(project_id: Optional[str] = None, id_token: Optional[str] = None):
    """
    Cliente de Firestore que actúa COMO el usuario logueado:
    el ID token viaja como bearer, así que las security rules aplican.
    """
    project_id = project_id or config.FIREBASE_PROJECT_ID
    if not project_id:
        raise RuntimeError("FIREBASE_PROJECT_ID is not configured in .env")

    credentials = None
    if id_token:
        credentials = google.oauth2.credentials.Credentials(token=id_token)

    return firestore.Client(project=project_id, credentials=credentials)


class Subscription:
    """
    Handle cancelable de un listener en vivo.
    cancel() suelta el listener una sola vez; después de que cancel()
    vuelve ya no se entrega ningún evento al callback.
    Los errores del hilo del watch no se escapan: quedan en `error`
    y se avisan por on_error.
    """

    def __init__(
        self,
        on_event: Callable[[SnapshotEvent], None],
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        self._on_event = on_event
        self._on_error = on_error
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._is_alive: Optional[Callable[[], bool]] = None
        self._lock = threading.RLock()
        self._active = True
        self.error: Optional[Exception] = None

    @property
    def active(self) -> bool:
        return self._active

    @property
    def alive(self) -> bool:
        """Sigue recibiendo cambios: no cancelado, sin error y el watch arriba."""
        if not self._active or self.error is not None:
            return False
        return self._is_alive() if self._is_alive is not None else True

    def attach(
        self,
        unsubscribe: Callable[[], None],
        is_alive: Optional[Callable[[], bool]] = None,
    ) -> None:
        self._unsubscribe = unsubscribe
        self._is_alive = is_alive

    def dispatch(self, event: SnapshotEvent) -> bool:
        with self._lock:
            if not self._active:
                return False
            try:
                self._on_event(event)
            except Exception as e:
                self.report_error(e)
                return False
            return True

    def report_error(self, error: Exception) -> None:
        with self._lock:
            if not self._active:
                return
            self.error = error
            if self._on_error is not None:
                self._on_error(error)

    def cancel(self) -> bool:
        with self._lock:
            if not self._active:
                return False
            self._active = False

        # fuera del lock: el unsubscribe del SDK puede esperar al hilo del watch
        if self._unsubscribe is not None:
            self._unsubscribe()
        return True

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()


class NotificationStore:
    """Las cuatro formas de acceso a la colección de notificaciones."""

    def __init__(self, client, collection: str = config.NOTIFICATIONS_COLLECTION):
        self.client = client
        self.collection = collection

    def _owned_by(self, user_id: str):
        return self.client.collection(self.collection).where(
            filter=FieldFilter("userId", "==", user_id)
        )

    def _unread(self, user_id: str):
        return self._owned_by(user_id).where(filter=FieldFilter("read", "==", False))

    @staticmethod
    def _to_notifications(docs) -> List[Notification]:
        return [Notification.from_document(doc.id, doc.to_dict()) for doc in docs]

    def list_for_user(self, user_id: str) -> List[Notification]:
        return self._to_notifications(self._owned_by(user_id).stream())

    def list_unread(self, user_id: str) -> List[Notification]:
        return self._to_notifications(self._unread(user_id).stream())

    def first_unread(self, user_id: str) -> Optional[Notification]:
        found = self._to_notifications(self._unread(user_id).limit(1).stream())
        return found[0] if found else None

    def mark_as_read(self, notification_id: str) -> None:
        # solo se toca 'read', las rules no dejan cambiar otra cosa
        self.client.collection(self.collection).document(notification_id).update(
            {"read": True}
        )

    def watch_unread(
        self,
        user_id: str,
        on_event: Callable[[SnapshotEvent], None],
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> Subscription:
        """
        Listener en vivo sobre las no leídas del usuario, más nuevas primero.
        Necesita el índice compuesto userId ASC, read ASC, timestamp DESC.
        on_snapshot vuelve enseguida; si falta el índice o las rules no
        dejan, el watch se cae después y `alive` pasa a False.
        """
        query = self._unread(user_id).order_by(
            "timestamp", direction=firestore.Query.DESCENDING
        )
        subscription = Subscription(on_event, on_error)

        def _on_snapshot(docs, changes, read_time):
            try:
                event = self._to_event(docs, changes)
            except Exception as e:
                subscription.report_error(e)
                return
            subscription.dispatch(event)

        watch = query.on_snapshot(_on_snapshot)
        subscription.attach(watch.unsubscribe, lambda: watch.is_active)
        return subscription

    @staticmethod
    def _to_event(docs, changes) -> SnapshotEvent:
        converted = []
        for change in changes:
            data = change.document.to_dict()
            converted.append(
                NotificationChange(
                    kind=change.type.name.lower(),
                    notification=Notification.from_document(change.document.id, data),
                    data=data,
                )
            )
        return SnapshotEvent(total=len(docs), changes=converted)
