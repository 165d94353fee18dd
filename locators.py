"""Element locators loaded from per-page CSV files.

Each page has a file `locators/<page>.csv` with the columns
`locator_name,locator_type,locator_value`. Lookups return a selector string
Playwright understands directly.
"""
import os
import csv
import threading

import config
from runner_utils import get_logger

logger = get_logger('LocatorReader')

# Used when the locators directory is missing or holds no CSV files.
DEFAULT_LOCATORS = {
    'google': {
        'search_box': 'input[name="q"]',
        'search_button': 'input[name="btnK"]',
        'search_box_1': 'input[name="q"]',
    },
    'upload_page': {
        'file_input': 'input#file-upload',
        'upload_button': 'input#file-submit',
        'upload_success_message': 'div.example h3',
        'multiple_file_input': 'input#file-upload',
    },
}


class LocatorError(Exception):
    pass


class LocatorFileNotFoundError(LocatorError, FileNotFoundError):
    pass


class LocatorNotFoundError(LocatorError, KeyError):
    def __str__(self):
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ''


def to_selector(locator_type, value):
    """Convert a (type, value) pair to a Playwright selector string."""
    t = (locator_type or '').strip().lower()
    if t == 'css':
        return value
    if t == 'xpath':
        return f"xpath={value}"
    if t == 'text':
        return f"text={value}"
    if t == 'id':
        return f"#{value}"
    if t == 'class':
        return f".{value}"
    return value


def read_locator_csv(path):
    """Parse a locator CSV into {name: {'type': ..., 'value': ...}}.

    Blank lines are skipped, fields are trimmed and short or long rows are
    tolerated.
    """
    locators = {}
    with open(path, 'r', encoding='utf-8', newline='') as f:
        reader = csv.reader(f)
        header = None
        for row in reader:
            row = [c.strip() for c in row]
            if not any(row):
                continue
            if header is None:
                header = row
                continue
            rec = dict(zip(header, row))
            name = rec.get('locator_name')
            if not name:
                continue
            locators[name] = {
                'type': rec.get('locator_type', ''),
                'value': rec.get('locator_value', ''),
            }
    return locators


class LocatorReader:
    def __init__(self, locators_dir=None):
        self.locators_dir = locators_dir or config.LOCATORS_DIR
        self._lock = threading.RLock()
        self._cache = {}

    def locator_file(self, page_name):
        return os.path.join(self.locators_dir, f"{page_name}.csv")

    def load_locators(self, page_name):
        path = self.locator_file(page_name)
        logger.info(f"Loading locators from: {path}")
        if not os.path.exists(path):
            logger.error(f"Locator file not found: {path}")
            raise LocatorFileNotFoundError(f"Locator file not found: {path}")
        try:
            locators = read_locator_csv(path)
        except Exception as e:
            logger.error(f"Failed to load locators for {page_name}: {e}")
            raise
        with self._lock:
            self._cache[page_name] = locators
        logger.info(f"Successfully loaded {len(locators)} locators for {page_name}")
        return locators

    def get_locators(self, page_name):
        with self._lock:
            cached = self._cache.get(page_name)
        if cached is None:
            cached = self.load_locators(page_name)
        return cached

    def get_locator(self, page_name, locator_name):
        entry = self.get_locators(page_name).get(locator_name)
        if not entry:
            msg = f"Locator '{locator_name}' not found for page '{page_name}'"
            logger.error(msg)
            raise LocatorNotFoundError(msg)
        return to_selector(entry.get('type'), entry.get('value', ''))

    def clear_cache(self):
        with self._lock:
            self._cache.clear()


def load_all_locators(locators_dir=None):
    """Return {page: {locator_name: selector}} for every CSV in the directory."""
    locators_dir = locators_dir or config.LOCATORS_DIR
    if not os.path.isdir(locators_dir):
        logger.warning('Locators directory not found, using default locators')
        return {p: dict(v) for p, v in DEFAULT_LOCATORS.items()}

    files = sorted(f for f in os.listdir(locators_dir) if f.endswith('.csv'))
    if not files:
        logger.warning('No CSV files found in locators directory, using default locators')
        return {p: dict(v) for p, v in DEFAULT_LOCATORS.items()}

    out = {}
    for fname in files:
        page_name = os.path.splitext(fname)[0]
        entries = read_locator_csv(os.path.join(locators_dir, fname))
        out[page_name] = {n: to_selector(e['type'], e['value']) for n, e in entries.items()}
    return out


# shared instance used by element_helper and file_upload
locator_reader = LocatorReader()
