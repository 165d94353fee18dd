import os
import time

from cleanup import cleanup_old_screenshots


def touch(path, age_days):
    path.write_bytes(b'png')
    t = time.time() - age_days * 24 * 60 * 60
    os.utime(path, (t, t))


def test_removes_only_old_png_files(tmp_path):
    touch(tmp_path / 'old.png', 10)
    touch(tmp_path / 'new.png', 1)
    touch(tmp_path / 'old.txt', 10)
    assert cleanup_old_screenshots(7, str(tmp_path)) == 1
    assert sorted(os.listdir(tmp_path)) == ['new.png', 'old.txt']


def test_missing_directory(tmp_path):
    assert cleanup_old_screenshots(7, str(tmp_path / 'missing')) == 0
