# notification_doctor/security/session.py
from typing import Optional

import jwt
from pydantic import BaseModel

# claves públicas con las que Firebase Auth firma los ID tokens
FIREBASE_JWKS_URL = (
    "https://www.googleapis.com/service_accounts/v1/jwk/"
    "securetoken@system.gserviceaccount.com"
)
FIREBASE_ISSUER_PREFIX = "https://securetoken.google.com/"


class SessionError(Exception):
    """El ID token vino pero no se pudo validar."""


class Session(BaseModel):
    uid: str
    email: Optional[str] = None


_jwks_client: Optional[jwt.PyJWKClient] = None


def _signing_key(token: str):
    global _jwks_client
    if _jwks_client is None:
        _jwks_client = jwt.PyJWKClient(FIREBASE_JWKS_URL)
    return _jwks_client.get_signing_key_from_jwt(token).key


def decode_id_token(token: str, project_id: Optional[str] = None, verify: bool = True) -> dict:
    """
    Decodifica el ID token de Firebase y devuelve sus claims.
    Con verify=True valida firma, audiencia (project id) e issuer.
    Lanza SessionError si es inválido.
    """
    try:
        if not verify:
            return jwt.decode(token, options={"verify_signature": False})

        if not project_id:
            raise SessionError("FIREBASE_PROJECT_ID is required to verify the ID token")

        return jwt.decode(
            token,
            _signing_key(token),
            algorithms=["RS256"],
            audience=project_id,
            issuer=FIREBASE_ISSUER_PREFIX + project_id,
        )
    except jwt.PyJWTError as e:
        raise SessionError(f"Invalid ID token: {e}") from e


def current_session(
    token: Optional[str],
    project_id: Optional[str] = None,
    verify: bool = True,
) -> Optional[Session]:
    """
    Toma el ID token del usuario logueado y arma la sesión.
    Devuelve None si no hay token (nadie logueado).
    """
    if not token:
        return None

    claims = decode_id_token(token.strip(), project_id=project_id, verify=verify)

    # Firebase manda el uid en user_id y también en sub
    uid = claims.get("user_id") or claims.get("sub")
    if not uid:
        raise SessionError("Token without subject")

    return Session(uid=uid, email=claims.get("email"))
