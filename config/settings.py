"""
Global settings and configuration.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_STORAGE_PATH = Path(os.getenv('DATA_STORAGE_PATH', PROJECT_ROOT / 'data_storage'))

# Registry source: JSON file when set, built-in environment tables otherwise
DEPLOY_CONFIG_FILE = os.getenv('DEPLOY_CONFIG_FILE')
DEPLOY_ENVIRONMENT = os.getenv('DEPLOY_ENVIRONMENT', 'local')

# Database (resolved address ledger and config snapshots)
DATABASE_URL = os.getenv('DATABASE_URL', f'sqlite:///{DATA_STORAGE_PATH}/deployments.db')

# Logging
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
# File sink is opt-in; unset means console only
LOG_FILE = Path(os.environ['LOG_FILE']) if os.getenv('LOG_FILE') else None
