"""Unit of work – variants and factory."""
from txunit.uow.factory import UnitOfWorkFactory, create_unit_of_work
from txunit.uow.unit_of_work import PlainUnitOfWork, TransactionalUnitOfWork, UnitOfWork

__all__ = [
    "PlainUnitOfWork",
    "TransactionalUnitOfWork",
    "UnitOfWork",
    "UnitOfWorkFactory",
    "create_unit_of_work",
]
