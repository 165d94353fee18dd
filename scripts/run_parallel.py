#!/usr/bin/env python3
"""Run feature folders in parallel, one test process per folder.
Usage:
  python -m scripts.run_parallel [--folders a,b] [--workers N] [--summary PATH]
  python -m scripts.run_parallel -- features search
Examples:
  python -m scripts.run_parallel                      # every folder under features/ at once
  python -m scripts.run_parallel -f search,upload -w 1
  run-parallel --features upload --summary reports/summary.json

Ctrl+C terminates every running child and exits with status 1.
"""
from __future__ import annotations
import argparse
import asyncio
import json
import os
import signal
import sys
import time
import traceback
from typing import List

import config
from parallel_runner import ParallelRunner
from runner_utils import get_logger, format_duration

logger = get_logger('ParallelRunner')

RULE = '=' * 80
THIN_RULE = '-' * 80


def split_folders(value: str) -> List[str]:
    return [f.strip() for f in (value or '').split(',') if f.strip()]


def parse_args(argv=None):
    p = argparse.ArgumentParser(description='Run feature folders in parallel, one process per folder')
    p.add_argument('--folders', '-f', '--features', dest='folders', default='',
                   help='Comma-separated list of folders to run tests from')
    p.add_argument('--workers', '-w', type=int, default=0,
                   help='Maximum number of parallel workers (default: all folders)')
    p.add_argument('--summary', default=None, help='Write the run result as JSON to this path')
    p.add_argument('targets', nargs='*',
                   help="'features' to run every folder, or 'features <folder>' for one folder")
    return p.parse_args(argv)


def resolve_folders(args) -> List[str]:
    folders = split_folders(args.folders)
    if folders:
        return folders
    targets = list(args.targets or [])
    if targets and targets[0] == 'features':
        targets = targets[1:]
    return [t for t in targets if t]


def print_summary(result: dict, duration: float, out=None) -> None:
    out = out or sys.stdout
    counts = result.get('scenario_counts') or {}

    def w(line=''):
        print(line, file=out)

    w()
    w(RULE)
    w('TEST EXECUTION SUMMARY')
    w(RULE)
    w(f"Duration: {format_duration(duration)}")
    w(f"Overall result: {'PASS' if result.get('success') else 'FAIL'}")
    if result.get('message'):
        w(f"Message: {result['message']}")
    w(f"Total scenarios: {counts.get('total', 0)}")
    w(f"Passed: {counts.get('passed', 0)}")
    w(f"Failed: {counts.get('failed', 0)}")
    w(f"Skipped: {counts.get('skipped', 0)}")
    w(THIN_RULE)
    w('FOLDER RESULTS:')
    for fr in result.get('folder_results') or []:
        c = fr.get('scenario_counts') or {}
        w(f"{fr['folder']}: {'PASS' if fr.get('success') else 'FAIL'} - {c.get('total', 0)} scenarios "
          f"({c.get('passed', 0)} passed, {c.get('failed', 0)} failed, {c.get('skipped', 0)} skipped)")
    w(RULE)


def write_summary(path: str, result: dict, duration: float) -> None:
    payload = {
        'success': bool(result.get('success')),
        'message': result.get('message'),
        'duration': duration,
        'scenario_counts': result.get('scenario_counts') or {},
        'folder_results': result.get('folder_results') or [],
    }
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(payload, f, indent=2)


def install_sigint_handler(runner: ParallelRunner):
    def handler(signum, frame):
        logger.info('Received SIGINT. Shutting down gracefully...')
        runner.kill_all()
        sys.exit(1)

    return signal.signal(signal.SIGINT, handler)


def main(argv=None) -> int:
    args = parse_args(argv)
    folders = resolve_folders(args)
    os.makedirs(config.REPORTS_DIR, exist_ok=True)

    runner = ParallelRunner()
    previous = install_sigint_handler(runner)
    try:
        start = time.time()
        result = asyncio.run(runner.run(folders, args.workers))
        duration = time.time() - start
        print_summary(result, duration)
        if args.summary:
            write_summary(args.summary, result, duration)
        return 0 if result.get('success') else 1
    except Exception as e:
        logger.error(f"Error running tests: {e}")
        logger.error(traceback.format_exc())
        return 1
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)


if __name__ == '__main__':
    raise SystemExit(main())
