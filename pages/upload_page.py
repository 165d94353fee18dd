from page_registry import page_object
from runner_utils import get_logger

logger = get_logger('UploadPage')

UPLOAD_URL = 'https://the-internet.herokuapp.com/upload'


@page_object('upload_page')
class UploadPage:
    page_name = 'upload_page'

    def __init__(self, page, url=UPLOAD_URL):
        self.page = page
        self.url = url

    def navigate(self):
        logger.info(f"Navigating to upload page: {self.url}")
        self.page.goto(self.url)
        self.page.wait_for_load_state('domcontentloaded')
