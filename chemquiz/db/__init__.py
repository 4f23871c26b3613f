from chemquiz.db.models import init_db, get_session, bind_engine
from chemquiz.db.repository import ResultRepository, PracticeTotals

__all__ = ["init_db", "get_session", "bind_engine", "ResultRepository", "PracticeTotals"]
