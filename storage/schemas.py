"""
Database schema definitions.
"""
from datetime import datetime

from loguru import logger
from sqlalchemy import Column, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ResolvedAddress(Base):
    """Contract address filled into an environment's record."""
    __tablename__ = 'resolved_addresses'

    id = Column(Integer, primary_key=True, autoincrement=True)
    environment = Column(String(100), nullable=False)
    module = Column(String(50), nullable=False)
    address = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    __table_args__ = (
        Index('idx_address_environment_module', 'environment', 'module'),
    )


class ConfigSnapshot(Base):
    """Serialized deployment record, one row per saved version."""
    __tablename__ = 'config_snapshots'

    id = Column(Integer, primary_key=True, autoincrement=True)
    environment = Column(String(100), nullable=False)
    payload = Column(Text, nullable=False)  # JSON
    created_at = Column(DateTime, default=datetime.now)

    __table_args__ = (
        Index('idx_snapshot_environment', 'environment'),
    )


def create_all_tables(engine):
    """Create all tables in the database."""
    Base.metadata.create_all(engine)
    logger.info("All database tables created successfully")


def drop_all_tables(engine):
    """Drop all tables (use with caution!)."""
    Base.metadata.drop_all(engine)
    logger.warning("All database tables dropped")
