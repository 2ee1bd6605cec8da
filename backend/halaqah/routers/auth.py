"""
Router pour les comptes enseignants.
Inscription (POST /api/v1/auth/register)
Connexion (POST /api/v1/auth/login)
Identité courante (GET /api/v1/auth/me)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from halaqah.auth import get_current_identity
from halaqah.database import get_db
from halaqah.schemas.auth import Identity, LoginRequest, RegisterRequest, TeacherResponse, TokenResponse
from halaqah.services import auth_service

router = APIRouter(prefix="/api/v1/auth", tags=["Authentification"])


@router.post("/register", response_model=TeacherResponse, status_code=201, summary="Inscrire un enseignant")
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """
    Crée un compte enseignant. L'inscription n'ouvre pas de session :
    l'enseignant doit ensuite se connecter.
    """
    return auth_service.register_teacher(db, data)


@router.post("/login", response_model=TokenResponse, summary="Se connecter")
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """Retourne un jeton Bearer à transmettre dans l'en-tête Authorization."""
    return auth_service.login(db, data)


@router.get("/me", response_model=Identity, summary="Enseignant connecté")
def me(identity: Identity = Depends(get_current_identity)):
    return identity
