import os
from pathlib import Path

from dotenv import load_dotenv

# token.env first (bot secrets), then a plain .env; neither is required
load_dotenv(dotenv_path='token.env')
load_dotenv()

ROOT = Path(__file__).resolve().parent.parent

WORLD_FOLDER = os.getenv('WORLD_FOLDER') or str(ROOT / 'world')
SETTINGS_FILE = os.getenv('SETTINGS_FILE') or os.path.join(WORLD_FOLDER, 'settings.json')

# Version the world is being migrated to
SYSTEM_VERSION = os.getenv('SYSTEM_VERSION', '2.0.0')

MIGRATE_ON_READY = os.getenv('MIGRATE_ON_READY', '0') == '1'
MIGRATION_BACKUP_ENABLED = os.getenv('MIGRATION_BACKUP_ENABLED', '1') == '1'
