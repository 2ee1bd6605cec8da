# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.
# Sans cet import, la FK students.owner_id → users.id échoue avec
# NoReferencedTableError si user.py n'est pas chargé avant student.py.

from halaqah.models.user import User  # noqa: F401  — doit précéder student
from halaqah.models.student import Student  # noqa: F401
from halaqah.models.payment import Payment  # noqa: F401
