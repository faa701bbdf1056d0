from pathlib import Path
import logging

PROJECT_ROOT = Path(__file__).parent.parent.absolute()
CONFIG_DIR = PROJECT_ROOT / "configs"
STAGE_CONFIG_PATH = CONFIG_DIR / "stage" / "stage_config.yaml"

GLOBAL_LOGGING_LEVEL_THRESHOLD = logging.DEBUG
LOGGING_LEVEL_TERMINAL = logging.WARNING
LOGGING_LEVEL_FILE = logging.INFO
