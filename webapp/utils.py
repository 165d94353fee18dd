"""Path constants and small helpers for the dashboard handlers."""
import os
import re
import json
from collections import deque

import config
from parallel_runner import ParallelRunner

RUNS_DIR = config.RUNS_DIR
TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), 'templates')

# Ensure folders exist (idempotent)
os.makedirs(RUNS_DIR, exist_ok=True)
os.makedirs(config.SCREENSHOTS_DIR, exist_ok=True)

SUMMARY_FILE = 'summary.json'
LOG_FILE = 'run.log'


def _sanitize_name(name: str) -> str:
    # produce a filesystem-friendly name from arbitrary text
    if not name:
        return 'run'
    s = re.sub(r"[^a-zA-Z0-9_\- ]+", '', name)
    s = s.strip().replace(' ', '-')
    return s[:120] or 'run'


def safe_run_name(run: str):
    """Return the run directory name or None when it could escape RUNS_DIR."""
    run_name = os.path.basename(str(run or ''))
    if not run_name or run_name.startswith('.') or run_name in ('', '..'):
        return None
    return run_name


def run_dir_for(run_name: str) -> str:
    return os.path.join(RUNS_DIR, run_name)


def load_summary(run_dir: str):
    path = os.path.join(run_dir, SUMMARY_FILE)
    if not os.path.exists(path):
        return None
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except Exception:
        return None


def tail_file(path: str, lines: int = 50) -> str:
    if not os.path.exists(path):
        return ''
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        return ''.join(deque(f, maxlen=lines))


def list_runs():
    """Run directories, newest first, with their summary when written."""
    entries = []
    try:
        names = os.listdir(RUNS_DIR)
    except FileNotFoundError:
        names = []
    for d in names:
        # ignore hidden files created by macOS (e.g. .DS_Store)
        if d.startswith('.'):
            continue
        path = os.path.join(RUNS_DIR, d)
        if not os.path.isdir(path):
            continue
        try:
            mtime = os.path.getmtime(path)
        except Exception:
            mtime = 0
        entries.append({'name': d, 'mtime': mtime, 'summary': load_summary(path)})
    entries.sort(key=lambda x: x['mtime'], reverse=True)
    return entries


def feature_folders(features_dir=None):
    """Feature folders with their expected scenario counts."""
    runner = ParallelRunner(features_dir=features_dir or config.FEATURES_DIR)
    return [
        {'name': f, 'scenarios': runner.count_scenarios_in_folder(f)}
        for f in runner.get_feature_folders()
    ]


__all__ = [
    'RUNS_DIR', 'TEMPLATES_DIR', 'SUMMARY_FILE', 'LOG_FILE',
    '_sanitize_name', 'safe_run_name', 'run_dir_for', 'load_summary', 'tail_file',
    'list_runs', 'feature_folders',
]
