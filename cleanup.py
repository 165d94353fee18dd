import os
import time

import config
from runner_utils import get_logger

logger = get_logger('CleanupHelper')


def cleanup_old_screenshots(max_age_days=7, screenshots_dir=None):
    """Delete .png files older than `max_age_days` (by mtime). Returns the number deleted."""
    logger.info(f"Cleaning up screenshot files older than {max_age_days} days")
    screenshots_dir = screenshots_dir or config.SCREENSHOTS_DIR
    deleted = 0
    try:
        if not os.path.isdir(screenshots_dir):
            return 0
        now = time.time()
        max_age = max_age_days * 24 * 60 * 60
        for fname in os.listdir(screenshots_dir):
            if not fname.endswith('.png'):
                continue
            path = os.path.join(screenshots_dir, fname)
            if now - os.path.getmtime(path) > max_age:
                os.remove(path)
                deleted += 1
        logger.info(f"Deleted {deleted} old screenshot files")
    except Exception as e:
        logger.error(f"Failed to clean up old screenshots: {e}")
    return deleted
