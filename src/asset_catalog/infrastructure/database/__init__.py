from .ports import DatabaseAdapter, IDatabaseAdapter, affected_rows

__all__ = ["DatabaseAdapter", "IDatabaseAdapter", "affected_rows"]
