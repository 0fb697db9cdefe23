from __future__ import annotations

from functools import lru_cache

from ..config import settings
from ..database import engine
from ..services.election_ledger import ElectionLedger


@lru_cache(maxsize=1)
def get_ledger() -> ElectionLedger:
    """
    FastAPI dependency: the process-wide ledger bound to the shared engine.
    Tests override this via app.dependency_overrides.
    """
    return ElectionLedger(engine, principal=settings.ledger_principal)
