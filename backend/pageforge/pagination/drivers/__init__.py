"""Data-source drivers implementing the query builder interface."""

from pageforge.pagination.drivers.orm import SqlAlchemyQuery, SqlAlchemyRepository

__all__ = ["SqlAlchemyQuery", "SqlAlchemyRepository"]
