import pytest

from variables import set_variables_dict, reset_variables_token


@pytest.fixture
def scenario_variables():
    """A fresh variables dict bound to the current context for one test."""
    d = {}
    token = set_variables_dict(d)
    try:
        yield d
    finally:
        reset_variables_token(token)


class FakeLocator:
    def __init__(self, page, selector):
        self.page = page
        self.selector = selector

    def wait_for(self, state='visible', timeout=None):
        self.page.calls.append(('wait_for', self.selector, state))

    def click(self):
        self.page.calls.append(('click', self.selector))

    def clear(self):
        self.page.calls.append(('clear', self.selector))

    def fill(self, text):
        self.page.calls.append(('fill', self.selector, text))

    def press(self, key):
        self.page.calls.append(('press', self.selector, key))

    def inner_text(self):
        return self.page.texts.get(self.selector, '')

    def select_option(self, option):
        self.page.calls.append(('select_option', self.selector, option))

    def evaluate(self, expression):
        return self.page.tags.get(self.selector, 'button')


class FakePage:
    """Records the calls the helpers make instead of driving a browser."""

    def __init__(self):
        self.calls = []
        self.texts = {}
        self.tags = {}
        self.fail_screenshot = False

    def locator(self, selector):
        return FakeLocator(self, selector)

    def goto(self, url):
        self.calls.append(('goto', url))

    def set_input_files(self, selector, files, timeout=None):
        self.calls.append(('set_input_files', selector, files))

    def screenshot(self, path=None, full_page=False):
        if self.fail_screenshot:
            raise RuntimeError('screenshot failed')
        if path:
            with open(path, 'wb') as f:
                f.write(b'png')
        self.calls.append(('screenshot', path))
        return b'png'

    def wait_for_load_state(self, state=None, timeout=None):
        self.calls.append(('wait_for_load_state', state))

    def wait_for_timeout(self, ms):
        self.calls.append(('wait_for_timeout', ms))

    def close(self):
        self.calls.append(('close',))


@pytest.fixture
def fake_page():
    return FakePage()
