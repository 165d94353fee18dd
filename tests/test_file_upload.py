import os

import pytest

from file_upload import FileUploadHelper, SAMPLE_FILES
from locators import LocatorReader


@pytest.fixture
def helper(tmp_path):
    locators = tmp_path / 'locators'
    locators.mkdir()
    (locators / 'upload_page.csv').write_text(
        'locator_name,locator_type,locator_value\nfile_input,id,file-upload\n', encoding='utf-8')
    return FileUploadHelper(
        project_root=str(tmp_path),
        screenshots_dir=str(tmp_path / 'screenshots'),
        reader=LocatorReader(str(locators)),
    )


def test_create_sample_files(helper):
    names = helper.create_sample_files()
    assert names == sorted(SAMPLE_FILES)
    for rel in SAMPLE_FILES:
        assert os.path.exists(os.path.join(helper.upload_dir, rel))


def test_resolve_file_path_search_order(helper, tmp_path):
    helper.create_sample_files()
    assert helper.resolve_file_path('sample.txt') == os.path.join(helper.upload_dir, 'sample.txt')
    assert helper.resolve_file_path('sample.cert') == os.path.join(helper.upload_dir, 'certificates', 'sample.cert')
    assert helper.resolve_file_path('sample.key') == os.path.join(helper.upload_dir, 'keys', 'sample.key')

    (tmp_path / 'sample.txt').write_text('root copy', encoding='utf-8')
    assert helper.resolve_file_path('sample.txt') == str(tmp_path / 'sample.txt')

    (tmp_path / 'test-data' / 'data.csv').write_text('a,b', encoding='utf-8')
    assert helper.resolve_file_path('data.csv') == str(tmp_path / 'test-data' / 'data.csv')

    absolute = str(tmp_path / 'sample.txt')
    assert helper.resolve_file_path(absolute) == absolute


def test_resolve_file_path_missing(helper):
    with pytest.raises(FileNotFoundError) as exc:
        helper.resolve_file_path('ghost.pdf')
    assert 'ghost.pdf' in str(exc.value)
    assert 'certificates' in str(exc.value)


def test_upload_file_sets_resolved_path(helper, fake_page):
    helper.create_sample_files()
    helper.upload_file(fake_page, 'sample.txt', 'file_input', 'upload_page')
    assert fake_page.calls == [
        ('set_input_files', '#file-upload', os.path.join(helper.upload_dir, 'sample.txt')),
    ]


def test_upload_multiple_files(helper, fake_page):
    helper.create_sample_files()
    helper.upload_multiple_files(fake_page, ['sample.txt', 'sample.cert'], 'file_input', 'upload_page')
    _, selector, files = fake_page.calls[0]
    assert selector == '#file-upload'
    assert [os.path.basename(f) for f in files] == ['sample.txt', 'sample.cert']


def test_upload_failure_takes_screenshot_and_reraises(helper, fake_page):
    with pytest.raises(FileNotFoundError):
        helper.upload_file(fake_page, 'ghost.txt', 'file_input', 'upload_page')
    shots = os.listdir(helper.screenshots_dir)
    assert len(shots) == 1
    assert shots[0].startswith('file-upload-error-')


def test_upload_failure_survives_screenshot_error(helper, fake_page):
    fake_page.fail_screenshot = True
    with pytest.raises(FileNotFoundError):
        helper.upload_multiple_files(fake_page, ['ghost.txt'], 'file_input', 'upload_page')


def test_temp_file_lifecycle(helper):
    assert helper.create_temp_file('note.txt', 'hello') == 'note.txt'
    path = os.path.join(helper.upload_dir, 'note.txt')
    with open(path, encoding='utf-8') as f:
        assert f.read() == 'hello'
    helper.delete_temp_file('note.txt')
    assert not os.path.exists(path)
    # deleting again only warns
    helper.delete_temp_file('note.txt')
