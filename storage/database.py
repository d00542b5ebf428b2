"""
Ledger of resolved contract addresses and saved config versions.
"""
import json
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from config.settings import DATABASE_URL
from deployment.models import DeployConfig, Module, field_path, with_resolved_address
from storage.schemas import ConfigSnapshot, ResolvedAddress, create_all_tables
from utils.exceptions import ConfigInvalid, ConfigNotFound
from utils.logging_config import get_logger
from utils.validators import ValidationError, validate_address


class DeploymentStore:
    """
    Persist the address fill-ins of each environment.

    Registry records live in memory; this store keeps the history so a
    later run can rebuild the same record with `apply_addresses`.
    """

    def __init__(self,
                 database_url: str = DATABASE_URL,
                 create_tables: bool = True,
                 environments: Optional[Iterable[str]] = None):
        """
        Args:
            database_url: SQLAlchemy URL
            create_tables: Create missing tables on startup
            environments: Names writes are restricted to (None = any name)
        """
        self.database_url = database_url
        self.environments = frozenset(environments) if environments is not None else None

        url = make_url(database_url)
        if url.get_backend_name() == 'sqlite' and url.database not in (None, '', ':memory:'):
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(database_url, echo=False)
        self.SessionLocal = sessionmaker(bind=self.engine)

        if create_tables:
            create_all_tables(self.engine)

        logger.info(f"Database initialized: {url.render_as_string(hide_password=True)}")

    def _check_environment(self, environment: str):
        if self.environments is not None and environment not in self.environments:
            raise ConfigNotFound(environment, available=self.environments)

    @contextmanager
    def get_session(self) -> Session:
        """Get database session with context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Database error: {e}")
            raise
        finally:
            session.close()

    def record_address(self, environment: str, module: Union[Module, str], address: str) -> int:
        """
        Store one resolved address.

        Returns:
            Row id
        """
        self._check_environment(environment)
        module = Module.parse(module)
        try:
            address = validate_address(address, name=field_path(module))
        except ValidationError as e:
            raise ConfigInvalid(field_path(module), environment, str(e)) from e

        with self.get_session() as session:
            row = ResolvedAddress(environment=environment, module=module.value, address=address)
            session.add(row)
            session.flush()
            row_id = row.id

        get_logger(environment).info(f"Recorded {module.value} -> {address}")
        return row_id

    def address_history(self, environment: str) -> List[Dict]:
        """All recorded addresses for an environment, oldest first."""
        with self.get_session() as session:
            rows = (session.query(ResolvedAddress)
                    .filter(ResolvedAddress.environment == environment)
                    .order_by(ResolvedAddress.id)
                    .all())
            return [
                {
                    'module': Module.parse(row.module),
                    'address': row.address,
                    'created_at': row.created_at,
                }
                for row in rows
            ]

    def latest_addresses(self, environment: str) -> Dict[Module, str]:
        """Most recent address per module."""
        latest: Dict[Module, str] = {}
        for entry in self.address_history(environment):
            latest[entry['module']] = entry['address']
        return latest

    def apply_addresses(self, config: DeployConfig, environment: str) -> DeployConfig:
        """Replay recorded addresses onto a record. The input is not modified."""
        for module, address in self.latest_addresses(environment).items():
            config = with_resolved_address(config, module, address)
        return config

    def save_snapshot(self, environment: str, config: DeployConfig) -> int:
        """
        Store a version of an environment's record.

        Returns:
            Snapshot id
        """
        self._check_environment(environment)
        payload = json.dumps(config.to_dict(), sort_keys=True)

        with self.get_session() as session:
            row = ConfigSnapshot(environment=environment, payload=payload)
            session.add(row)
            session.flush()
            snapshot_id = row.id

        get_logger(environment).info(f"Saved config snapshot {snapshot_id}")
        return snapshot_id

    def load_snapshot(self, environment: str, snapshot_id: Optional[int] = None) -> DeployConfig:
        """
        Load a saved record, the latest one unless `snapshot_id` is given.

        Raises:
            ConfigNotFound if nothing matches
        """
        with self.get_session() as session:
            query = session.query(ConfigSnapshot).filter(ConfigSnapshot.environment == environment)
            if snapshot_id is not None:
                query = query.filter(ConfigSnapshot.id == snapshot_id)
            row = query.order_by(ConfigSnapshot.id.desc()).first()
            payload = row.payload if row is not None else None

        if payload is None:
            raise ConfigNotFound(environment)

        return DeployConfig.from_dict(json.loads(payload))

    def list_snapshots(self, environment: str) -> List[Dict]:
        """Snapshot ids and timestamps for an environment, oldest first."""
        with self.get_session() as session:
            rows = (session.query(ConfigSnapshot.id, ConfigSnapshot.created_at)
                    .filter(ConfigSnapshot.environment == environment)
                    .order_by(ConfigSnapshot.id)
                    .all())
            return [{'id': row.id, 'created_at': row.created_at} for row in rows]
