"""Element interactions addressed by (page name, locator name).

Every helper resolves its selector through the CSV locator reader, waits for
the element to reach the state the action needs, logs what it does, and logs
then re-raises on failure so the step fails with the original error.
"""
from playwright.sync_api import expect

import config
from locators import locator_reader
from runner_utils import get_logger

logger = get_logger('ElementHelper')

WAIT_STATES = ('visible', 'enabled', 'selected', 'hidden')
VERIFY_STATES = ('VISIBLE', 'ENABLED', 'SELECTED')
SUBMITTABLE_TAGS = ('input', 'textarea', 'select')


def get_locator(page_name, locator_name):
    return locator_reader.get_locator(page_name, locator_name)


def wait_for_element(page, page_name, locator_name, state='visible', timeout=None):
    """Wait for an element to be visible, enabled, selected or hidden and return its Locator."""
    timeout = config.ELEMENT_WAIT_TIMEOUT_MS if timeout is None else timeout
    logger.info(f"Waiting for element '{locator_name}' on '{page_name}' to be {state}")
    try:
        element = page.locator(get_locator(page_name, locator_name))
        s = (state or '').lower()
        if s == 'visible':
            element.wait_for(state='visible', timeout=timeout)
        elif s == 'enabled':
            element.wait_for(state='visible', timeout=timeout)
            expect(element).to_be_enabled(timeout=timeout)
        elif s == 'selected':
            element.wait_for(state='visible', timeout=timeout)
            expect(element).to_be_checked(timeout=timeout)
        elif s == 'hidden':
            element.wait_for(state='hidden', timeout=timeout)
        else:
            logger.error(f"Unsupported state: {state}")
            raise ValueError(f"Unsupported state: {state}")
        logger.info(f"Element '{locator_name}' is now {state}")
        return element
    except Exception as e:
        logger.error(f"Failed to wait for element '{locator_name}' to be {state}: {e}")
        raise


def click_element(page, page_name, locator_name, timeout=None):
    logger.info(f"Clicking on element '{locator_name}' on '{page_name}'")
    try:
        element = wait_for_element(page, page_name, locator_name, 'enabled', timeout)
        element.click()
        logger.info(f"Successfully clicked on '{locator_name}'")
    except Exception as e:
        logger.error(f"Failed to click on '{locator_name}': {e}")
        raise


def enter_text(page, text, page_name, locator_name, timeout=None):
    logger.info(f"Entering text '{text}' into '{locator_name}' on '{page_name}'")
    try:
        element = wait_for_element(page, page_name, locator_name, 'visible', timeout)
        element.clear()
        element.fill(text)
        logger.info(f"Successfully entered text into '{locator_name}'")
    except Exception as e:
        logger.error(f"Failed to enter text into '{locator_name}': {e}")
        raise


def get_text(page, page_name, locator_name, timeout=None):
    logger.info(f"Getting text from '{locator_name}' on '{page_name}'")
    try:
        element = wait_for_element(page, page_name, locator_name, 'visible', timeout)
        text = element.inner_text()
        logger.info(f"Text from '{locator_name}': {text}")
        return text
    except Exception as e:
        logger.error(f"Failed to get text from '{locator_name}': {e}")
        raise


def select_option(page, option, page_name, locator_name, timeout=None):
    """Select an <option> by value or label."""
    logger.info(f"Selecting '{option}' in '{locator_name}' on '{page_name}'")
    try:
        element = wait_for_element(page, page_name, locator_name, 'visible', timeout)
        element.select_option(option)
        logger.info(f"Successfully selected '{option}' in '{locator_name}'")
    except Exception as e:
        logger.error(f"Failed to select '{option}' in '{locator_name}': {e}")
        raise


def verify_element_state(page, page_name, locator_name, state, timeout=None):
    timeout = config.ELEMENT_WAIT_TIMEOUT_MS if timeout is None else timeout
    logger.info(f"Verifying '{locator_name}' is {state} on '{page_name}'")
    try:
        element = page.locator(get_locator(page_name, locator_name))
        s = (state or '').upper()
        if s == 'VISIBLE':
            expect(element).to_be_visible(timeout=timeout)
            logger.info(f"Element '{locator_name}' is visible")
        elif s == 'ENABLED':
            expect(element).to_be_enabled(timeout=timeout)
            logger.info(f"Element '{locator_name}' is enabled")
        elif s == 'SELECTED':
            expect(element).to_be_checked(timeout=timeout)
            logger.info(f"Element '{locator_name}' is selected")
        else:
            logger.error(f"Unsupported state: {state}")
            raise ValueError(f"Unsupported state: {state}")
    except Exception as e:
        logger.error(f"Verification failed for '{locator_name}': {e}")
        raise


def perform_keyboard_action(page, action, page_name, locator_name=None, timeout=None):
    """Press a key on the element, or on the page keyboard when no locator is given."""
    if locator_name:
        logger.info(f"Performing keyboard action '{action}' on '{locator_name}' on '{page_name}'")
        try:
            element = wait_for_element(page, page_name, locator_name, 'visible', timeout)
            element.press(action)
            logger.info(f"Successfully performed keyboard action '{action}' on '{locator_name}'")
        except Exception as e:
            logger.error(f"Failed to perform keyboard action '{action}' on '{locator_name}': {e}")
            raise
    else:
        logger.info(f"Performing keyboard action '{action}' on page '{page_name}'")
        try:
            page.keyboard.press(action)
            logger.info(f"Successfully performed keyboard action '{action}' on page")
        except Exception as e:
            logger.error(f"Failed to perform keyboard action '{action}' on page: {e}")
            raise


def submit_form(page, page_name, locator_name, timeout=None):
    """Press Enter on a form field, or click the element otherwise, then wait for network idle."""
    timeout = config.ELEMENT_WAIT_TIMEOUT_MS if timeout is None else timeout
    logger.info(f"Submitting form using '{locator_name}' on '{page_name}'")
    try:
        element = wait_for_element(page, page_name, locator_name, 'visible', timeout)
        tag_name = element.evaluate('el => el.tagName.toLowerCase()')
        if tag_name in SUBMITTABLE_TAGS:
            element.press('Enter')
            logger.info(f"Submitted form by pressing Enter on '{locator_name}'")
        else:
            element.click()
            logger.info(f"Submitted form by clicking '{locator_name}'")
        page.wait_for_load_state('networkidle', timeout=timeout)
    except Exception as e:
        logger.error(f"Failed to submit form using '{locator_name}': {e}")
        raise
