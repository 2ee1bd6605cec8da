"""
Erreurs métier levées par les services.

Chaque erreur porte un message lisible (affiché tel quel à l'enseignant) et un
code machine. main.py les traduit en réponses HTTP {"detail", "code"}.
"""

from typing import Optional


class ServiceError(Exception):
    """Base de toutes les erreurs métier."""

    status_code = 400
    code = "error"
    default_message = "Une erreur est survenue."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(ServiceError):
    """Aucune session valide au moment de l'appel."""

    status_code = 401
    code = "not_authenticated"
    default_message = "Session expirée ou absente. Veuillez vous reconnecter."


class ValidationError(ServiceError):
    """Champ obligatoire absent, mal formé ou contrainte violée."""

    status_code = 422
    code = "validation_error"
    default_message = "Données invalides."


class NotFound(ServiceError):
    """Enregistrement inexistant ou appartenant à un autre enseignant."""

    status_code = 404
    code = "not_found"
    default_message = "Enregistrement introuvable."


class Conflict(ServiceError):
    """Enregistrement déjà existant (email d'un compte enseignant)."""

    status_code = 409
    code = "conflict"
    default_message = "Cet enregistrement existe déjà."


class TransportError(ServiceError):
    """Panne réseau ou base de données indisponible ; message du pilote transmis tel quel."""

    status_code = 503
    code = "transport_error"
    default_message = "Service de données indisponible."
