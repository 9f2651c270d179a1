"""Storage implementations of the persistence interfaces.

Keeping implementations separate from core.persistence keeps the scan cycle
free of database imports.
"""

from .postgres import PostgresConfig, PostgresWeightStore
