"""Configuration for the test harness.

Everything is read once at import from the environment (a `.env` file in the
project root is loaded first). Paths are absolute and derived from the
directory this file lives in.
"""
import os

from dotenv import load_dotenv

ROOT = os.path.abspath(os.path.dirname(__file__))

load_dotenv(os.path.join(ROOT, '.env'))


def _env_ms(name, default):
    v = os.getenv(name)
    try:
        return int(v) if v is not None and v != "" else int(default)
    except Exception:
        return int(default)


def _env_flag(name, default):
    v = os.getenv(name)
    if v is None or v == "":
        return default
    return v.strip().lower() not in ('0', 'false', 'no', 'off')


# Base URLs for the different environments
BASE_URLS = {
    'dev': 'https://dev.example.com',
    'qa': 'https://qa.example.com',
    'staging': 'https://staging.example.com',
    'prod': 'https://www.example.com',
}
TEST_ENV = (os.getenv('TEST_ENV') or 'qa').lower()
BASE_URL = (os.getenv('BASE_URL') or BASE_URLS.get(TEST_ENV, BASE_URLS['qa'])).rstrip('/')

# Timeouts (milliseconds)
DEFAULT_TIMEOUT_MS = _env_ms('DEFAULT_TIMEOUT_MS', 30000)
PAGE_LOAD_TIMEOUT_MS = _env_ms('PAGE_LOAD_TIMEOUT_MS', 60000)
ELEMENT_WAIT_TIMEOUT_MS = _env_ms('ELEMENT_WAIT_TIMEOUT_MS', 10000)

# Browser
BROWSER = (os.getenv('BROWSER') or 'chromium').lower()
HEADLESS = _env_flag('HEADLESS', True)
# slow down headed runs a little so they can be followed by eye
SLOW_MO = _env_ms('SLOW_MO', 0 if HEADLESS else 50)
VIEWPORT = {'width': 1280, 'height': 720}

# Paths
FEATURES_DIR = os.path.join(ROOT, 'features')
REPORTS_DIR = os.path.join(ROOT, 'reports')
RUNS_DIR = os.path.join(REPORTS_DIR, 'runs')
SCREENSHOTS_DIR = os.path.join(ROOT, 'screenshots')
TEST_DATA_DIR = os.path.join(ROOT, 'test-data')
UPLOADS_DIR = os.path.join(TEST_DATA_DIR, 'uploads')
CERTIFICATES_DIR = os.path.join(UPLOADS_DIR, 'certificates')
KEYS_DIR = os.path.join(UPLOADS_DIR, 'keys')
SAMPLE_FILES_DIR = os.path.join(TEST_DATA_DIR, 'sample-files')
LOCATORS_DIR = os.path.join(ROOT, 'locators')
LOGS_DIR = os.path.join(ROOT, 'logs')
ALLURE_RESULTS_DIR = os.getenv('ALLURE_RESULTS_DIR') or os.path.join(ROOT, 'allure-results')
FEATURE_COLLECTOR = os.path.join(FEATURES_DIR, 'test_features.py')

# Reporting
SCREENSHOT_ON_FAILURE = _env_flag('SCREENSHOT_ON_FAILURE', True)
SCREENSHOT_RETENTION_DAYS = _env_ms('SCREENSHOT_RETENTION_DAYS', 7)

LOG_LEVEL = (os.getenv('LOG_LEVEL') or 'INFO').upper()

ARTIFACT_DIRS = [
    SCREENSHOTS_DIR,
    REPORTS_DIR,
    UPLOADS_DIR,
    SAMPLE_FILES_DIR,
    CERTIFICATES_DIR,
    KEYS_DIR,
    ALLURE_RESULTS_DIR,
]


def ensure_directories(dirs=None):
    """Create the artifact directories (idempotent)."""
    for d in dirs or ARTIFACT_DIRS:
        os.makedirs(d, exist_ok=True)
