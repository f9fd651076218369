from .db_session import DbSessionService, register_tables

__all__ = ["DbSessionService", "register_tables"]
