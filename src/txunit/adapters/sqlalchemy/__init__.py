"""SQLAlchemy adapter – connection wrappers and unit of work factory."""
from txunit.adapters.sqlalchemy.connection import SqlAlchemyConnection, SqlAlchemyTransaction
from txunit.adapters.sqlalchemy.factory import SqlAlchemyUnitOfWorkFactory

__all__ = ["SqlAlchemyConnection", "SqlAlchemyTransaction", "SqlAlchemyUnitOfWorkFactory"]
