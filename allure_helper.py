"""Allure report helpers.

Attachments go to the test that is currently running (allure-pytest-bdd
collects them); environment details are written as `environment.properties`
in the results directory, which the Allure report renders on its overview
page. Nothing here is allowed to fail a test: problems are logged as warnings.
"""
import os
import sys
import socket
import platform

import allure

import config
from runner_utils import get_logger

logger = get_logger('AllureReportHelper')

FRAMEWORK = 'Playwright BDD'
LANGUAGE = 'Python'


def environment_info(browser_version=None):
    info = {
        'Browser': browser_version or config.BROWSER,
        'Platform': f"{platform.system()} {platform.release()}",
        'OS': f"{sys.platform} {platform.machine()}",
        'Python': platform.python_version(),
        'Hostname': socket.gethostname(),
        'Framework': FRAMEWORK,
        'Language': LANGUAGE,
    }
    return info


def add_environment_info(results_dir=None, browser_version=None):
    """Write environment.properties into the Allure results directory."""
    results_dir = results_dir or config.ALLURE_RESULTS_DIR
    try:
        os.makedirs(results_dir, exist_ok=True)
        lines = []
        for k, v in environment_info(browser_version).items():
            # properties format: escape separators in values
            val = str(v).replace('\\', '\\\\').replace('=', '\\=').replace(':', '\\:')
            lines.append(f"{k}={val}")
        path = os.path.join(results_dir, 'environment.properties')
        with open(path, 'w', encoding='utf-8') as f:
            f.write('\n'.join(lines) + '\n')
        return path
    except Exception as e:
        logger.warning(f"Failed to add environment info to Allure report: {e}")
        return None


def add_screenshot(screenshot, name='Screenshot'):
    try:
        allure.attach(screenshot, name=name, attachment_type=allure.attachment_type.PNG)
    except Exception as e:
        logger.warning(f"Failed to add screenshot to Allure report: {e}")


def add_attachment(name, content, attachment_type=None):
    try:
        allure.attach(content, name=name, attachment_type=attachment_type or allure.attachment_type.TEXT)
    except Exception as e:
        logger.warning(f"Failed to add attachment to Allure report: {e}")


def add_labels():
    """Label the running test with the framework and language."""
    try:
        allure.dynamic.label('framework', FRAMEWORK)
        allure.dynamic.label('language', LANGUAGE)
    except Exception as e:
        logger.warning(f"Failed to add labels to Allure report: {e}")
