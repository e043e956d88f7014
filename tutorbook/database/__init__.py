from .database import DB, Base, DBMiddleware, UTCDateTime, db, db_wrapper, filter_by, select


__all__ = ["Base", "DB", "DBMiddleware", "UTCDateTime", "db", "db_wrapper", "filter_by", "select"]
