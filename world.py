"""Per-scenario state shared by step definitions and hooks."""
import contextlib

import config
from page_registry import registry, import_by_path
from runner_utils import get_logger
from variables import set_variables_dict, reset_variables_token

logger = get_logger('World')


class World:
    def __init__(self, page=None, context=None, browser=None, scenario_name=None):
        self.page = page
        self.context = context
        self.browser = browser
        self.scenario_name = scenario_name
        self.temp_files = []
        self.variables = {}
        self._page_objects = {}

    def page_object(self, name):
        """Return the page object for `name`, created on first use.

        `name` is a registered page name, or an import path such as
        'pages.google_page:GooglePage'.
        """
        if name not in self._page_objects:
            if name in registry:
                cls = registry.get(name)
            elif ':' in name and '://' not in name:
                cls = import_by_path(name)
            else:
                raise KeyError(f"No page object registered for: {name}")
            self._page_objects[name] = cls(self.page)
        return self._page_objects[name]

    def has_page_object(self, name):
        return name in self._page_objects or name in registry or (':' in name and '://' not in name)

    def track_temp_file(self, file_name):
        if file_name not in self.temp_files:
            self.temp_files.append(file_name)

    def cleanup_temp_files(self, helper):
        """Delete tracked temp files; a failure on one file does not stop the rest."""
        for file_name in list(self.temp_files):
            try:
                helper.delete_temp_file(file_name)
            except Exception as e:
                logger.error(f"Failed to clean up {file_name}: {e}")
        self.temp_files = []

    def close(self):
        if self.page is not None:
            try:
                self.page.close()
            except Exception as e:
                logger.error(f"Failed to close page: {e}")
            self.page = None
        if self.context is not None:
            try:
                self.context.close()
            except Exception as e:
                logger.error(f"Failed to close context: {e}")
            self.context = None
        self._page_objects = {}


@contextlib.contextmanager
def open_world(browser, scenario_name, helper):
    """A World on a fresh context and page; temp files are deleted and the
    page and context closed on exit."""
    context = browser.new_context(viewport=config.VIEWPORT, accept_downloads=True)
    page = context.new_page()
    page.set_default_timeout(config.DEFAULT_TIMEOUT_MS)
    page.set_default_navigation_timeout(config.PAGE_LOAD_TIMEOUT_MS)
    w = World(page=page, context=context, browser=browser, scenario_name=scenario_name)
    token = set_variables_dict(w.variables)
    try:
        yield w
    finally:
        reset_variables_token(token)
        w.cleanup_temp_files(helper)
        w.close()
