"""
Service des comptes enseignants : inscription, connexion et résolution de l'identité
à partir d'un jeton de session.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from halaqah.exceptions import Conflict, Unauthenticated
from halaqah.models.user import User
from halaqah.schemas.auth import Identity, LoginRequest, RegisterRequest, TeacherResponse, TokenResponse
from halaqah.security import create_access_token, decode_access_token, hash_password, verify_password
from halaqah.services.store import store_errors

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Email ou mot de passe incorrect."


def register_teacher(db: Session, data: RegisterRequest) -> TeacherResponse:
    """
    Crée un compte enseignant.
    Lève Conflict si l'email est déjà utilisé. L'inscription n'ouvre pas de session.
    """
    with store_errors(db):
        existing = db.execute(
            select(User.id).where(User.email == data.email)
        ).scalar()
    if existing:
        raise Conflict(f"Un compte existe déjà pour {data.email}.")

    user = User(email=data.email, password_hash=hash_password(data.password), name=data.name)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Inscription concurrente avec le même email
        db.rollback()
        raise Conflict(f"Un compte existe déjà pour {data.email}.")
    db.refresh(user)

    logger.info("Enseignant inscrit : %s (%s)", user.email, user.id)
    return TeacherResponse.model_validate(user)


def login(db: Session, data: LoginRequest) -> TokenResponse:
    """Vérifie les identifiants et retourne un jeton de session."""
    with store_errors(db):
        user = db.execute(
            select(User).where(User.email == data.email)
        ).scalar_one_or_none()

    if user is None or not verify_password(data.password, user.password_hash):
        logger.warning("Échec de connexion pour %s", data.email)
        raise Unauthenticated(INVALID_CREDENTIALS)

    return TokenResponse(access_token=create_access_token(user.id))


def resolve_identity(db: Session, token: str) -> Identity:
    """
    Résout l'enseignant courant à partir du jeton. Appelé à chaque requête, sans cache :
    un compte supprimé entre-temps invalide immédiatement ses jetons.
    Une erreur de lecture du compte vaut absence de session.
    """
    user_id = decode_access_token(token)
    try:
        user = db.get(User, user_id)
    except DBAPIError as exc:
        db.rollback()
        logger.error("Lecture du compte %s impossible : %s", user_id, exc)
        raise Unauthenticated() from exc
    if user is None:
        logger.warning("Jeton valide pour un compte inexistant : %s", user_id)
        raise Unauthenticated()
    return Identity.model_validate(user)
