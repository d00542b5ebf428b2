"""
Database storage module.
"""

from storage.database import DeploymentStore
from storage.schemas import (
    Base,
    ResolvedAddress,
    ConfigSnapshot,
    create_all_tables,
    drop_all_tables,
)

__all__ = [
    'DeploymentStore',
    'Base',
    'ResolvedAddress',
    'ConfigSnapshot',
    'create_all_tables',
    'drop_all_tables',
]
