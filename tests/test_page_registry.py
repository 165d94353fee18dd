import pytest

import pages
import page_registry
from page_registry import PageRegistry, import_by_path, page_object, registry
from world import World


class Recorder:
    def __init__(self, page):
        self.page = page


def test_register_and_get(monkeypatch):
    warnings = []
    monkeypatch.setattr(page_registry.logger, 'warning', warnings.append)
    reg = PageRegistry()
    reg.register('home', Recorder)
    assert 'home' in reg
    assert reg.get('home') is Recorder
    reg.register('home', dict)
    assert reg.get('home') is dict
    assert warnings == ['Page home already registered; overwriting']
    with pytest.raises(KeyError):
        reg.get('missing')


def test_page_object_decorator_uses_page_name_attribute():
    @page_object()
    class Checkout:
        page_name = 'registry_checkout'

    @page_object()
    class RegistryCart:
        pass

    assert registry.get('registry_checkout') is Checkout
    assert registry.get('RegistryCart') is RegistryCart


def test_page_object_decorator_overrides_duplicates():
    @page_object('registry_test_page')
    class First:
        pass

    @page_object('registry_test_page')
    class Second:
        pass

    assert registry.get('registry_test_page') is Second


def test_bundled_pages_are_registered():
    assert registry.get('google') is pages.GooglePage
    assert registry.get('upload_page') is pages.UploadPage


def test_import_by_path():
    assert import_by_path('pages.google_page:GooglePage') is pages.GooglePage
    assert import_by_path('pages.upload_page.UploadPage') is pages.UploadPage
    with pytest.raises(ImportError):
        import_by_path('nodots')


def test_world_page_objects_are_cached(fake_page):
    w = World(page=fake_page)
    first = w.page_object('upload_page')
    assert isinstance(first, pages.UploadPage)
    assert w.page_object('upload_page') is first
    assert isinstance(w.page_object('pages.google_page:GooglePage'), pages.GooglePage)
    assert w.has_page_object('google')
    assert not w.has_page_object('nowhere')
    with pytest.raises(KeyError):
        w.page_object('nowhere')


class FakeHelper:
    def __init__(self):
        self.deleted = []

    def delete_temp_file(self, name):
        if name == 'locked.txt':
            raise PermissionError(name)
        self.deleted.append(name)


def test_world_cleanup_and_close(fake_page):
    w = World(page=fake_page)
    w.track_temp_file('a.txt')
    w.track_temp_file('a.txt')
    w.track_temp_file('locked.txt')
    w.track_temp_file('b.txt')
    helper = FakeHelper()
    w.cleanup_temp_files(helper)
    assert helper.deleted == ['a.txt', 'b.txt']
    assert w.temp_files == []
    w.close()
    assert ('close',) in fake_page.calls
    assert w.page is None
