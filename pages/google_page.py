from page_registry import page_object
from runner_utils import get_logger

logger = get_logger('GooglePage')

GOOGLE_URL = 'https://www.google.com'


@page_object('google')
class GooglePage:
    # name of the locator CSV (without extension)
    page_name = 'google'

    elements = {
        'search_box': 'input[name="q"]',
        'search_button': 'input[name="btnK"]',
        'search_results': 'div#search',
        'accept_cookies': 'button:has-text("Accept all")',
    }

    def __init__(self, page):
        self.page = page

    def navigate(self):
        logger.info('Navigating to Google')
        self.page.goto(GOOGLE_URL)
        self.page.wait_for_load_state('networkidle')

        # the consent dialog only shows up in some regions
        try:
            accept = self.page.query_selector(self.elements['accept_cookies'])
            if accept:
                accept.click()
                logger.info('Accepted cookies')
        except Exception:
            logger.info('No cookie dialog found or unable to accept')

        logger.info('Successfully navigated to Google')

    def search(self, term):
        logger.info(f"Searching for: {term}")
        self.page.fill(self.elements['search_box'], term)
        try:
            self.page.click(self.elements['search_button'])
        except Exception:
            logger.info('Search button not clickable, pressing Enter instead')
            self.page.press(self.elements['search_box'], 'Enter')

        self.page.wait_for_selector(self.elements['search_results'])
        self.page.wait_for_load_state('networkidle')
        logger.info(f"Search completed for: {term}")

    def verify_search_results(self, expected_text):
        logger.info(f"Verifying search results contain: {expected_text}")
        self.page.wait_for_selector(self.elements['search_results'])
        text = self.page.text_content(self.elements['search_results']) or ''
        found = expected_text in text
        if found:
            logger.info(f'Search results contain "{expected_text}" as expected')
        else:
            logger.warning(f'Search results do not contain "{expected_text}"')
        return found
