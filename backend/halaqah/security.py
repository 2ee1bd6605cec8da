"""
Hachage des mots de passe (bcrypt) et jetons de session JWT (python-jose).
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from halaqah.config import settings
from halaqah.exceptions import Unauthenticated


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Hash corrompu ou mot de passe > 72 octets
        return False


def create_access_token(user_id: uuid.UUID, expires_delta: Optional[timedelta] = None) -> str:
    """Génère un JWT signé dont le sujet est l'ID de l'enseignant."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> uuid.UUID:
    """
    Vérifie la signature et l'expiration du jeton et retourne l'ID de l'enseignant.
    Lève Unauthenticated si le jeton est invalide, expiré ou sans sujet exploitable.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise Unauthenticated()

    subject = payload.get("sub")
    try:
        return uuid.UUID(subject)
    except (TypeError, ValueError):
        raise Unauthenticated()
