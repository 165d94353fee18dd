"""Step definitions shared by every feature.

Steps match under any keyword (Given/When/Then/And). Elements are addressed
as "<locator name>" on "<page name>", the page name being the locator CSV
file. Quoted arguments may reference scenario variables as {{name}}.
"""
import os

from playwright.sync_api import expect
from pytest_bdd import step, parsers

import config
import element_helper
import allure_helper
from file_upload import file_upload_helper
from platform_handler import platform_handler
from runner_utils import get_logger, substitute_variables as sub
from variables import variables

logger = get_logger('CommonSteps')

SEARCH_RESULTS = 'div#search'
UPLOAD_INPUT = 'input#file-upload'
UPLOAD_SUBMIT = 'input#file-submit'
UPLOAD_SUCCESS = 'div.example h3'
UPLOAD_ERROR = 'div.example h1'
VERIFY_TIMEOUT_MS = 10000
SEARCH_IDLE_TIMEOUT_MS = 15000


def navigate_to(world, page_name):
    """Open a registered page object, an http(s) URL, or a path on BASE_URL."""
    logger.info(f"Navigating to: {page_name}")
    try:
        if page_name and world.has_page_object(page_name):
            world.page_object(page_name).navigate()
        elif page_name and page_name.startswith(('http://', 'https://')):
            world.page.goto(page_name)
        elif page_name and page_name.startswith('/'):
            world.page.goto(config.BASE_URL + page_name)
        else:
            logger.error(f"Navigation to {page_name} is not implemented")
            raise NotImplementedError(f"Navigation to {page_name} is not implemented")
        logger.info(f"Successfully navigated to {page_name}")
    except Exception as e:
        logger.error(f"Failed to navigate to {page_name}: {e}")
        raise


def split_file_list(value):
    return [p.strip() for p in (value or '').split(',') if p.strip()]


# Navigation

@step(parsers.parse('User navigates to "{page_name}"'))
def user_navigates_to(world, page_name):
    navigate_to(world, sub(page_name))


# Element interactions

@step(parsers.parse('User clicks "{locator_name}" on "{page_name}"'))
def user_clicks(world, locator_name, page_name):
    element_helper.click_element(world.page, page_name, locator_name)


@step(parsers.parse('User enters "{text}" in "{locator_name}" on "{page_name}"'))
def user_enters(world, text, locator_name, page_name):
    element_helper.enter_text(world.page, sub(text), page_name, locator_name)


@step(parsers.parse('User verifies "{locator_name}" is "{state}" on "{page_name}"'))
def user_verifies_state(world, locator_name, state, page_name):
    element_helper.verify_element_state(world.page, page_name, locator_name, state)


@step(parsers.parse('User gets text of "{locator_name}" on "{page_name}"'))
def user_gets_text(world, locator_name, page_name):
    text = element_helper.get_text(world.page, page_name, locator_name)
    variables['text_content'] = text
    return text


@step(parsers.parse('User selects "{option}" in "{locator_name}" on "{page_name}"'))
def user_selects(world, option, locator_name, page_name):
    element_helper.select_option(world.page, sub(option), page_name, locator_name)


@step(parsers.parse('User waits for {seconds:d} seconds'))
def user_waits(world, seconds):
    logger.info(f"Waiting for {seconds} seconds")
    world.page.wait_for_timeout(seconds * 1000)


@step(parsers.parse('User submits form using "{locator_name}" on "{page_name}"'))
def user_submits_form(world, locator_name, page_name):
    element_helper.submit_form(world.page, page_name, locator_name)


@step(parsers.parse('User searches for "{text}" in "{locator_name}" on "{page_name}"'))
def user_searches(world, text, locator_name, page_name):
    text = sub(text)
    element_helper.enter_text(world.page, text, page_name, locator_name)
    element_helper.perform_keyboard_action(world.page, 'Enter', page_name, locator_name)
    world.page.wait_for_load_state('networkidle', timeout=SEARCH_IDLE_TIMEOUT_MS)
    logger.info(f"Completed search for '{text}'")


@step(parsers.parse('User verifies search results contain "{expected}"'))
def user_verifies_search_results(world, expected):
    expected = sub(expected)
    logger.info(f'Verifying search results contain "{expected}"')
    try:
        world.page.wait_for_selector(SEARCH_RESULTS, timeout=VERIFY_TIMEOUT_MS)
        text = world.page.text_content(SEARCH_RESULTS) or ''
        assert expected in text, f'Search results do not contain "{expected}"'
        logger.info(f'Search results contain "{expected}" as expected')
    except Exception as e:
        logger.error(f"Failed to verify search results: {e}")
        raise


# File uploads

@step(parsers.parse('User add file "{file_path}" in "{locator_name}" on "{page_name}"'))
def user_adds_file(world, file_path, locator_name, page_name):
    file_upload_helper.upload_file(world.page, sub(file_path), locator_name, page_name)


@step(parsers.parse('User add files "{file_paths}" in "{locator_name}" on "{page_name}"'))
def user_adds_files(world, file_paths, locator_name, page_name):
    file_upload_helper.upload_multiple_files(world.page, split_file_list(sub(file_paths)), locator_name, page_name)


@step(parsers.parse('User add "{file_name}" in "{locator_name}" on "{page_name}"'))
def user_adds_certificate_or_key(world, file_name, locator_name, page_name):
    logger.info(f"Adding file {file_name} to {locator_name} on {page_name}")
    try:
        file_upload_helper.upload_file(world.page, sub(file_name), locator_name, page_name)
        logger.info(f"Successfully added file {file_name}")
    except Exception as e:
        logger.error(f"Failed to add file: {e}")
        raise


@step(parsers.parse('User uploads "{file_name}" file'))
def user_uploads(world, file_name):
    logger.info(f"Uploading file: {file_name}")
    try:
        path = os.path.join(file_upload_helper.upload_dir, file_name)
        world.page.set_input_files(UPLOAD_INPUT, path)
        world.page.click(UPLOAD_SUBMIT)
        logger.info(f"File uploaded: {file_name}")
    except Exception as e:
        logger.error(f"Failed to upload file: {e}")
        raise


@step('User should see success message')
def user_sees_success(world):
    logger.info('Verifying success message')
    try:
        expect(world.page.locator(UPLOAD_SUCCESS)).to_have_text('File Uploaded!', timeout=VERIFY_TIMEOUT_MS)
        logger.info('Success message verified')
    except Exception as e:
        logger.error(f"Failed to verify success message: {e}")
        raise


@step('User should see error message')
def user_sees_error(world):
    logger.info('Verifying error message')
    try:
        expect(world.page.locator(UPLOAD_ERROR)).to_contain_text('Internal Server Error', timeout=VERIFY_TIMEOUT_MS)
        logger.info('Error message verified')
    except Exception as e:
        logger.error(f"Failed to verify error message: {e}")
        raise


@step(parsers.parse('User creates a temporary file "{file_name}" with content "{content}"'))
def user_creates_temp_file(world, file_name, content):
    name = file_upload_helper.create_temp_file(sub(file_name), sub(content))
    world.track_temp_file(name)


# Evidence

@step('User takes a screenshot')
def user_takes_screenshot(world):
    path = os.path.join(config.ROOT, platform_handler.get_screenshot_path())
    os.makedirs(os.path.dirname(path), exist_ok=True)
    png = world.page.screenshot(path=path, full_page=True)
    allure_helper.add_screenshot(png, name=os.path.basename(path))
    logger.info(f"Screenshot saved to: {path}")
