"""
Traduction des erreurs SQLAlchemy en erreurs métier, partagée par les services.

Chaque opération de service tient en une seule requête (ou un seul commit) :
en cas d'échec la session est annulée, rien n'est appliqué partiellement.
"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from halaqah.exceptions import TransportError, ValidationError

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(db: Session, invalid_message: str = "Données refusées par la base : champ obligatoire manquant ou invalide."):
    """
    Encadre un accès à la base :
    - IntegrityError (NOT NULL, FK, CHECK…) → ValidationError
    - toute autre erreur du pilote (connexion perdue, timeout…) → TransportError, message transmis tel quel
    """
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        logger.info("Contrainte violée : %s", exc.orig)
        raise ValidationError(invalid_message) from exc
    except DBAPIError as exc:
        db.rollback()
        logger.error("Erreur d'accès à la base : %s", exc.orig)
        raise TransportError(str(exc.orig)) from exc
