"""
txunit – transactional unit of work with retrying dispatch.

Import path convention::

    from txunit.uow import create_unit_of_work
    from txunit.kernel.operations import Command, Query
    from txunit.resilience.retry import RetryPolicy
    from txunit.adapters.sqlalchemy import SqlAlchemyUnitOfWorkFactory
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
