"""Hooks and fixtures for the BDD scenarios.

One browser per test process (the parallel runner starts one process per
feature folder); every scenario gets a fresh context and page through the
`world` fixture.
"""
import os

import pytest
from playwright.sync_api import sync_playwright

import config
import allure_helper
import pages  # noqa: F401  registers the page objects
from browsers import launch_browser
from cleanup import cleanup_old_screenshots
from file_upload import file_upload_helper
from platform_handler import scenario_screenshot_path
from runner_utils import get_logger
from world import open_world

from step_definitions.common_steps import *  # noqa: F401,F403

logger = get_logger('Hooks')


@pytest.fixture(scope='session', autouse=True)
def test_environment():
    logger.info('Starting test execution')
    config.ensure_directories()
    cleanup_old_screenshots(config.SCREENSHOT_RETENTION_DAYS)
    file_upload_helper.create_sample_files()
    allure_helper.add_environment_info()
    logger.info('Test setup complete')
    yield
    logger.info('Test execution complete')


@pytest.fixture(scope='session')
def pw():
    with sync_playwright() as p:
        yield p


@pytest.fixture(scope='session')
def shared_browser(pw):
    browser = launch_browser(pw)
    allure_helper.add_environment_info(browser_version=f"{config.BROWSER} {browser.version}")
    logger.info('Browser setup complete')
    try:
        yield browser
    finally:
        try:
            browser.close()
            logger.info('Browser closed')
        except Exception as e:
            logger.error(f"Failed to close browser: {e}")


@pytest.fixture
def world(shared_browser, request):
    with open_world(shared_browser, request.node.name, file_upload_helper) as w:
        yield w


def pytest_bdd_before_scenario(request, feature, scenario):
    logger.info(f"Starting scenario: {scenario.name}")
    allure_helper.add_labels()


def pytest_bdd_after_scenario(request, feature, scenario):
    logger.info(f"Finishing scenario: {scenario.name}")


def pytest_bdd_step_error(request, feature, scenario, step, step_func, step_func_args, exception):
    if not config.SCREENSHOT_ON_FAILURE:
        return
    logger.info('Scenario failed, taking screenshot')
    try:
        w = step_func_args.get('world') or request.getfixturevalue('world')
        if w is None or w.page is None:
            logger.warning('Cannot take screenshot: page object is not available')
            return
        path = scenario_screenshot_path(scenario.name)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        png = w.page.screenshot(path=path, full_page=True)
        allure_helper.add_screenshot(png, name=os.path.basename(path))
        logger.info(f"Screenshot saved to: {path}")
    except Exception as e:
        logger.error(f"Failed to take screenshot: {e}")
