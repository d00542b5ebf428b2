"""
Script to set up the deployment ledger schema.
"""
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from storage.database import DeploymentStore
from config.settings import DATABASE_URL
from loguru import logger


def main():
    """Set up database."""
    logger.info("=" * 60)
    logger.info("DEPLOYMENT LEDGER SETUP")
    logger.info("=" * 60)

    # Tables are created on construction
    DeploymentStore(DATABASE_URL, create_tables=True)

    logger.info("✓ Database setup complete!")


if __name__ == '__main__':
    main()
