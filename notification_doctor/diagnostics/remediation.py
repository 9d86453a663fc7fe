# notification_doctor/diagnostics/remediation.py
from google.api_core import exceptions as gexc

from notification_doctor.models.check_result import ErrorKind


def classify_error(error: Exception) -> ErrorKind:
    if isinstance(error, gexc.PermissionDenied):
        return ErrorKind.ACCESS_DENIED
    # Firestore responde FAILED_PRECONDITION cuando falta el índice compuesto
    if isinstance(error, gexc.FailedPrecondition):
        return ErrorKind.MISSING_INDEX
    return ErrorKind.OTHER


def error_code(error: Exception) -> str:
    """Código estilo Firestore: PERMISSION_DENIED -> permission-denied."""
    status = getattr(error, "grpc_status_code", None)
    if status is not None:
        return status.name.lower().replace("_", "-")
    return type(error).__name__


def error_message(error: Exception) -> str:
    return getattr(error, "message", None) or str(error)


def read_rule(collection: str) -> list:
    return [
        f"match /{collection}/{{notificationId}} {{",
        "  allow read: if request.auth.uid == resource.data.userId;",
        "}",
    ]


def update_rule(collection: str) -> list:
    return [
        f"match /{collection}/{{notificationId}} {{",
        "  allow update: if request.auth.uid == resource.data.userId",
        "                && request.resource.data.diff(resource.data)",
        "                  .affectedKeys().hasOnly([\"read\"]);",
        "}",
    ]


def index_spec(collection: str) -> list:
    return [
        "1. Click the link in the full error message",
        "2. Or create it manually in Firebase Console → Firestore → Indexes",
        f"Collection: {collection}",
        "Fields: userId (Asc), read (Asc), timestamp (Desc)",
    ]
