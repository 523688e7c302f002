# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.

from skillverse.models.user import User  # noqa: F401  (doit précéder les autres)
from skillverse.models.school_class import SchoolClass, ClassStudent  # noqa: F401
from skillverse.models.assignment import Assignment  # noqa: F401
from skillverse.models.submission import Submission  # noqa: F401
