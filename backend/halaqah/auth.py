"""
Dépendance FastAPI qui résout l'enseignant authentifié de la requête.
Les tests la remplacent via app.dependency_overrides pour injecter une identité.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from halaqah.database import get_db
from halaqah.exceptions import Unauthenticated
from halaqah.schemas.auth import Identity
from halaqah.services import auth_service

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


def get_current_identity(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Identity:
    if not token:
        raise Unauthenticated()
    return auth_service.resolve_identity(db, token)
