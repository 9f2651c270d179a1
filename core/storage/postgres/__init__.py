"""SQLAlchemy storage for the learned model state.

Notes
- We avoid logging connection URLs to prevent accidental secret leakage.
"""

from .config import PostgresConfig
from .stores import PostgresWeightStore
