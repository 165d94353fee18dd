"""Browser selection and launch.

`BROWSER` picks the engine: chromium, firefox or webkit, plus the branded
names chrome/msedge which run on chromium through a release channel.
"""
import os

import config
from platform_handler import platform_handler
from runner_utils import get_logger

logger = get_logger('Browsers')

CHANNELS = {'chrome': 'chrome', 'edge': 'msedge', 'msedge': 'msedge'}


def resolve_browser(name=None):
    """Return (engine_name, extra launch kwargs) for a browser name."""
    bname = (name or config.BROWSER or 'chromium').lower()
    if bname == 'firefox':
        return 'firefox', {}
    if bname in ('webkit', 'safari'):
        return 'webkit', {}
    if bname in CHANNELS:
        return 'chromium', {'channel': CHANNELS[bname]}
    return 'chromium', {}


def system_executable(name):
    """Path of an installed system browser when BROWSER_EXECUTABLE_PATH=auto, else the explicit path."""
    explicit = os.getenv('BROWSER_EXECUTABLE_PATH')
    if not explicit:
        return None
    if explicit.lower() != 'auto':
        return explicit
    path = platform_handler.get_browser_executable_path(name)
    if path and os.path.exists(path):
        return path
    logger.warning(f"No installed {name} found; using the bundled browser")
    return None


def launch_browser(playwright, name=None, headless=None, slow_mo=None):
    bname = (name or config.BROWSER or 'chromium').lower()
    headless = config.HEADLESS if headless is None else headless
    slow_mo = config.SLOW_MO if slow_mo is None else slow_mo
    engine, kwargs = resolve_browser(bname)
    exe = system_executable(bname)
    if exe:
        kwargs.pop('channel', None)
        kwargs['executable_path'] = exe
    logger.info(f"Launching {bname} browser (headless: {headless})")
    return getattr(playwright, engine).launch(headless=headless, slow_mo=slow_mo, **kwargs)
