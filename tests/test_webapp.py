import json
import os

import pytest
from fastapi.testclient import TestClient

from webapp import utils
from webapp import main as webapp_main
from webapp.routers import run as run_router


class FakeProc:
    pid = 4242

    def __init__(self, cmd, **kwargs):
        self.cmd = cmd
        self.kwargs = kwargs
        self.returncode = None
        self.signals = []
        FakeProc.last = self

    def poll(self):
        return self.returncode

    def send_signal(self, sig):
        self.signals.append(sig)

    def terminate(self):
        self.signals.append('terminate')


@pytest.fixture
def client(monkeypatch, tmp_path):
    runs = tmp_path / 'runs'
    runs.mkdir()
    monkeypatch.setattr(utils, 'RUNS_DIR', str(runs))
    monkeypatch.setattr(run_router.subprocess, 'Popen', FakeProc)
    monkeypatch.setattr(webapp_main, 'running', {})
    return TestClient(webapp_main.app)


def write_run(runs_dir, name, summary=None, log=''):
    d = os.path.join(runs_dir, name)
    os.makedirs(d)
    if summary is not None:
        with open(os.path.join(d, 'summary.json'), 'w', encoding='utf-8') as f:
            json.dump(summary, f)
    with open(os.path.join(d, 'run.log'), 'w', encoding='utf-8') as f:
        f.write(log)
    return d


def test_build_command():
    cmd = run_router.build_command('/tmp/s.json', 'search,upload', 2)
    assert cmd[1:] == ['-m', 'scripts.run_parallel', '--summary', '/tmp/s.json',
                       '--folders', 'search,upload', '--workers', '2']
    assert '--workers' not in run_router.build_command('/tmp/s.json')


def test_start_run_and_refuse_second(client):
    r = client.post('/run', data={'folders': 'search, upload', 'workers': '1'},
                    headers={'accept': 'application/json'})
    assert r.status_code == 200
    body = r.json()
    assert body['ok'] is True
    assert body['run'].startswith('search-upload-')
    assert FakeProc.last.cmd[-4:] == ['--folders', 'search,upload', '--workers', '1']
    assert os.path.isdir(os.path.join(utils.RUNS_DIR, body['run']))

    again = client.post('/run', data={'workers': '0'}, headers={'accept': 'application/json'})
    assert again.status_code == 409
    assert again.json()['run'] == body['run']


def test_status_and_stop(client):
    r = client.post('/run', data={'workers': '0'}, headers={'accept': 'application/json'})
    run = r.json()['run']
    proc = FakeProc.last

    status = client.get(f'/status/{run}').json()
    assert status['running'] is True
    assert status['returncode'] is None

    stopped = client.post(f'/stop/{run}').json()
    assert stopped['ok'] is True
    assert proc.signals

    proc.returncode = 1
    status = client.get(f'/status/{run}').json()
    assert status['running'] is False
    assert status['returncode'] == 1
    assert client.post(f'/stop/{run}').json()['ok'] is False


def test_finished_run_is_dropped_once_summary_is_written(client):
    run = client.post('/run', data={'workers': '0'}, headers={'accept': 'application/json'}).json()['run']
    proc = FakeProc.last
    proc.returncode = 0
    assert run in webapp_main.running

    with open(os.path.join(utils.RUNS_DIR, run, 'summary.json'), 'w', encoding='utf-8') as f:
        json.dump({'success': True, 'scenario_counts': {'total': 2}}, f)
    status = client.get(f'/status/{run}').json()
    assert status['running'] is False
    assert status['returncode'] == 0
    assert run not in webapp_main.running
    assert client.get(f'/status/{run}').json()['returncode'] == 0


def test_new_run_prunes_finished_runs(client):
    first = client.post('/run', data={'workers': '0'}, headers={'accept': 'application/json'}).json()['run']
    FakeProc.last.returncode = 1
    with open(os.path.join(utils.RUNS_DIR, first, 'summary.json'), 'w', encoding='utf-8') as f:
        json.dump({'success': False}, f)

    second = client.post('/run', data={'workers': '0'}, headers={'accept': 'application/json'}).json()['run']
    assert list(webapp_main.running) == [second]


def test_status_of_finished_run_from_disk(client):
    write_run(utils.RUNS_DIR, 'old-run', {'success': True, 'scenario_counts': {'total': 3}}, log='a\nb\nc\n')
    body = client.get('/status/old-run?lines=2').json()
    assert body['running'] is False
    assert body['returncode'] == 0
    assert body['summary']['scenario_counts']['total'] == 3
    assert body['log'] == 'b\nc\n'


def test_status_unknown_run(client):
    assert client.get('/status/ghost').status_code == 404
    assert client.post('/stop/ghost').status_code == 404


def test_reporting_lists_and_deletes(client):
    older = write_run(utils.RUNS_DIR, 'first', {'success': False, 'scenario_counts': {'total': 1}})
    os.utime(older, (1, 1))
    write_run(utils.RUNS_DIR, 'second')

    runs = client.get('/reporting').json()['runs']
    assert [r['run'] for r in runs] == ['second', 'first']
    assert runs[0]['finished'] is False
    assert runs[1]['success'] is False

    assert client.post('/reporting/delete', json={'run': '../first'}).json() == {'ok': True}
    assert not os.path.exists(older)
    assert client.post('/reporting/delete', json={'run': 'first'}).status_code == 404
    assert client.post('/reporting/delete', json={}).status_code == 400


def test_index_page(client, monkeypatch):
    monkeypatch.setattr(utils, 'feature_folders', lambda: [{'name': 'search', 'scenarios': 3}])
    write_run(utils.RUNS_DIR, 'done', {'success': True, 'scenario_counts': {'total': 3, 'passed': 3, 'failed': 0, 'skipped': 0}})
    r = client.get('/')
    assert r.status_code == 200
    assert 'search' in r.text
    assert 'PASSED' in r.text


def test_feature_folders_counts(tmp_path):
    (tmp_path / 'search').mkdir()
    (tmp_path / 'search' / 'a.feature').write_text('Feature: a\n  Scenario: one\n    Given x\n', encoding='utf-8')
    assert utils.feature_folders(str(tmp_path)) == [{'name': 'search', 'scenarios': 1}]
