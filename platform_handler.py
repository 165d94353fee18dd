"""OS detection and well-known browser executable paths."""
import os
import re
import sys
import datetime

import config
from runner_utils import get_logger

logger = get_logger('PlatformHandler')

BROWSER_PATHS = {
    'win32': {
        'chrome': 'C:\\Program Files\\Google\\Chrome\\Application\\chrome.exe',
        'firefox': 'C:\\Program Files\\Mozilla Firefox\\firefox.exe',
        'edge': 'C:\\Program Files (x86)\\Microsoft\\Edge\\Application\\msedge.exe',
    },
    'darwin': {
        'chrome': '/Applications/Google Chrome.app/Contents/MacOS/Google Chrome',
        'firefox': '/Applications/Firefox.app/Contents/MacOS/firefox',
        'safari': '/Applications/Safari.app/Contents/MacOS/Safari',
    },
    'linux': {
        'chrome': '/usr/bin/google-chrome',
        'firefox': '/usr/bin/firefox',
    },
}

PLATFORM_LABELS = {'win32': 'Windows', 'darwin': 'Mac', 'linux': 'Linux'}


class PlatformHandler:
    def __init__(self, platform=None):
        self.platform = platform or sys.platform
        logger.info(f"Current platform: {self.platform}")

    def is_windows(self):
        return self.platform == 'win32'

    def is_mac(self):
        return self.platform == 'darwin'

    def is_linux(self):
        return self.platform.startswith('linux')

    def _platform_key(self):
        if self.is_windows():
            return 'win32'
        if self.is_mac():
            return 'darwin'
        if self.is_linux():
            return 'linux'
        return None

    def get_browser_executable_path(self, browser_name):
        logger.info(f"Getting executable path for browser: {browser_name}")
        key = self._platform_key()
        if key is None:
            logger.error(f"Unsupported platform: {self.platform}")
            return None
        path = BROWSER_PATHS[key].get((browser_name or '').lower())
        if path is None:
            logger.warning(f"No default path for {browser_name} on {PLATFORM_LABELS[key]}")
        return path

    def get_screenshot_path(self, now=None):
        now = now or datetime.datetime.now(datetime.timezone.utc)
        # ISO timestamp with ':' and '.' made filename-safe, e.g. 2024-01-02T03-04-05-678Z
        stamp = now.strftime('%Y-%m-%dT%H:%M:%S.') + f"{now.microsecond // 1000:03d}Z"
        stamp = stamp.replace(':', '-').replace('.', '-')
        sep = '\\' if self.is_windows() else '/'
        return f"screenshots{sep}screenshot-{stamp}.png"


def scenario_screenshot_path(scenario_name, now=None, screenshots_dir=None):
    """screenshots/<scenario_name_with_underscores>_<Y-m-d_H-M-S>.png"""
    now = now or datetime.datetime.now()
    screenshots_dir = screenshots_dir or config.SCREENSHOTS_DIR
    safe = re.sub(r'\s+', '_', (scenario_name or 'scenario').strip())
    safe = re.sub(r'[\\/:*?"<>|]', '', safe)
    return os.path.join(screenshots_dir, f"{safe}_{now.strftime('%Y-%m-%d_%H-%M-%S')}.png")


# shared instance
platform_handler = PlatformHandler()
