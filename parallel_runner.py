"""Run feature folders in parallel, one pytest-bdd process per folder.

Each folder under the features directory is handed to its own child process
(`FOLDER_NAME=<folder> python -m pytest features/test_features.py ...`), so
scenarios inside a folder run one after another while folders run side by
side. Child output is echoed with a `[<folder>] ` prefix, and the scenario
counts are read back from pytest's final summary line.
"""
import os
import re
import sys
import asyncio

import config
from runner_utils import get_logger

logger = get_logger('ParallelRunner')

SCENARIO_RE = re.compile(r"^\s*(Scenario|Example|Scenario Outline|Scenario Template):")
OUTLINE_RE = re.compile(r"^\s*(Scenario Outline|Scenario Template):")
EXAMPLES_RE = re.compile(r"^\s*(Examples|Scenarios):")
BLOCK_RE = re.compile(r"^\s*(Feature|Rule|Background):")

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")
# e.g. "==== 2 failed, 3 passed, 1 skipped, 4 warnings in 12.34s (0:00:12) ===="
SUMMARY_RE = re.compile(r"^[=\s]*(?P<body>\d+ [a-z]+(?:, \d+ [a-z]+)*) in [\d.]+s", re.MULTILINE)
COUNT_RE = re.compile(r"(\d+) ([a-z]+)")

OUTCOME_BUCKETS = {
    'passed': 'passed',
    'xpassed': 'passed',
    'failed': 'failed',
    'error': 'failed',
    'errors': 'failed',
    'skipped': 'skipped',
    'xfailed': 'skipped',
}

# child output lines can be long (tracebacks, JSON payloads)
STREAM_LIMIT = 1024 * 1024


def empty_counts():
    return {'total': 0, 'passed': 0, 'failed': 0, 'skipped': 0}


def add_counts(target, counts):
    for k in ('total', 'passed', 'failed', 'skipped'):
        target[k] += int(counts.get(k, 0) or 0)
    return target


def parse_scenario_counts(output):
    """Read scenario counts from the last pytest summary line in `output`."""
    try:
        matches = list(SUMMARY_RE.finditer(ANSI_RE.sub('', output or '')))
        if not matches:
            return empty_counts()
        counts = empty_counts()
        for num, outcome in COUNT_RE.findall(matches[-1].group('body')):
            bucket = OUTCOME_BUCKETS.get(outcome)
            if bucket:
                counts[bucket] += int(num)
        counts['total'] = counts['passed'] + counts['failed'] + counts['skipped']
        return counts
    except Exception as e:
        logger.error(f"Failed to parse scenario counts: {e}")
        return empty_counts()


def count_scenarios_in_text(text):
    """Count scenarios in Gherkin source; an outline counts once per example row."""
    count = 0
    outline_rows = None
    in_examples = False
    header_pending = False

    def close_outline():
        return max(outline_rows, 1) if outline_rows is not None else 0

    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith('#'):
            continue
        if OUTLINE_RE.match(line):
            count += close_outline()
            outline_rows, in_examples = 0, False
        elif SCENARIO_RE.match(line):
            count += close_outline() + 1
            outline_rows, in_examples = None, False
        elif EXAMPLES_RE.match(line):
            if outline_rows is not None:
                in_examples, header_pending = True, True
        elif BLOCK_RE.match(line):
            count += close_outline()
            outline_rows, in_examples = None, False
        elif line.startswith('|') and in_examples:
            if header_pending:
                header_pending = False
            else:
                outline_rows += 1
    return count + close_outline()


class ParallelRunner:
    def __init__(self, features_dir=None, reports_dir=None, allure_dir=None, command=None,
                 extra_args=None, env=None, cwd=None, stdout=None, stderr=None):
        self.features_dir = features_dir or config.FEATURES_DIR
        self.reports_dir = reports_dir or config.REPORTS_DIR
        self.allure_dir = allure_dir or config.ALLURE_RESULTS_DIR
        # command prefix; report options and extra_args are appended per folder
        self.command = list(command or [sys.executable, '-m', 'pytest', config.FEATURE_COLLECTOR, '-p', 'no:cacheprovider'])
        self.extra_args = list(extra_args or [])
        self.env = dict(os.environ) if env is None else dict(env)
        self.cwd = cwd or config.ROOT
        self.stdout = stdout
        self.stderr = stderr
        self.processes = []
        self.results = {}
        self.scenario_counts = empty_counts()

    def get_feature_folders(self):
        try:
            folders = sorted(
                d for d in os.listdir(self.features_dir)
                if os.path.isdir(os.path.join(self.features_dir, d)) and not d.startswith(('.', '__'))
            )
            logger.info(f"Found feature folders: {', '.join(folders)}")
            return folders
        except Exception as e:
            logger.error(f"Failed to get feature folders: {e}")
            return []

    def get_feature_files(self, folder):
        try:
            folder_path = os.path.join(self.features_dir, folder)
            files = sorted(
                os.path.join(folder_path, f) for f in os.listdir(folder_path) if f.endswith('.feature')
            )
            logger.info(f"Found feature files in {folder}: {len(files)}")
            return files
        except Exception as e:
            logger.error(f"Failed to get feature files in {folder}: {e}")
            return []

    def count_scenarios_in_file(self, feature_file):
        try:
            with open(feature_file, 'r', encoding='utf-8') as f:
                return count_scenarios_in_text(f.read())
        except Exception as e:
            logger.error(f"Failed to count scenarios in {feature_file}: {e}")
            return 0

    def count_scenarios_in_folder(self, folder):
        total = sum(self.count_scenarios_in_file(f) for f in self.get_feature_files(folder))
        logger.info(f"Total scenarios in {folder}: {total}")
        return total

    def parse_scenario_counts(self, output):
        return parse_scenario_counts(output)

    def build_command(self, folder):
        return self.command + [
            '--cucumberjson', os.path.join(self.reports_dir, f'cucumber-report-{folder}.json'),
            '--junitxml', os.path.join(self.reports_dir, f'junit-{folder}.xml'),
            '--alluredir', self.allure_dir,
        ] + self.extra_args

    def _emit(self, folder, sink, chunks, raw):
        text = raw.decode('utf-8', errors='replace')
        chunks.append(text)
        out = sink()
        out.write(f"[{folder}] {text}")
        out.flush()

    async def _pump(self, stream, folder, sink, chunks):
        # fixed-size reads; a single line may be longer than STREAM_LIMIT
        pending = b''
        while True:
            data = await stream.read(STREAM_LIMIT)
            if not data:
                break
            if b'\n' not in data:
                pending += data
                continue
            lines = (pending + data).split(b'\n')
            pending = lines.pop()
            for line in lines:
                self._emit(folder, sink, chunks, line + b'\n')
        if pending:
            self._emit(folder, sink, chunks, pending + b'\n')

    def _out(self):
        return self.stdout or sys.stdout

    def _err(self):
        return self.stderr or sys.stderr

    def _record(self, folder, success, code, output, counts):
        add_counts(self.scenario_counts, counts)
        self.results[folder] = {'success': success, 'code': code, 'output': output, 'scenario_counts': counts}

    async def run_folder_tests(self, folder):
        """Run every feature file in `folder` in one child process and return its result."""
        feature_files = self.get_feature_files(folder)
        if not feature_files:
            logger.warning(f"No feature files found in {folder}")
            return {
                'folder': folder,
                'success': True,
                'code': None,
                'message': 'No feature files found',
                'scenario_counts': empty_counts(),
            }

        expected = self.count_scenarios_in_folder(folder)
        cmd = self.build_command(folder)
        env = dict(self.env)
        env['FOLDER_NAME'] = folder
        os.makedirs(self.reports_dir, exist_ok=True)

        logger.info(f"Starting tests for folder: {folder} with {len(feature_files)} feature files ({expected} scenarios)")
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
                cwd=self.cwd,
                limit=STREAM_LIMIT,
            )
        except Exception as e:
            logger.error(f"Failed to start tests for folder {folder}: {e}")
            counts = empty_counts()
            self._record(folder, False, None, '', counts)
            return {'folder': folder, 'success': False, 'code': None, 'message': str(e), 'scenario_counts': counts}

        self.processes.append(proc)
        chunks = []
        try:
            await asyncio.gather(
                self._pump(proc.stdout, folder, self._out, chunks),
                self._pump(proc.stderr, folder, self._err, chunks),
            )
            code = await proc.wait()
        finally:
            if proc in self.processes and proc.returncode is not None:
                self.processes.remove(proc)

        output = ''.join(chunks)
        success = code == 0
        counts = self.parse_scenario_counts(output)
        self._record(folder, success, code, output, counts)

        logger.info(f"Tests for folder {folder} completed with {'success' if success else 'failure'}")
        logger.info(
            f"Scenarios: {counts['total']} total, {counts['passed']} passed, "
            f"{counts['failed']} failed, {counts['skipped']} skipped"
        )
        if counts['total'] != expected:
            logger.warning(f"Warning: Expected {expected} scenarios but found {counts['total']} in the output")

        return {'folder': folder, 'success': success, 'code': code, 'scenario_counts': counts}

    async def _run_folders(self, folders):
        self.scenario_counts = empty_counts()
        results = await asyncio.gather(*(self.run_folder_tests(f) for f in folders))
        all_passed = all(r['success'] for r in results)
        c = self.scenario_counts
        logger.info(f"All tests completed. Overall result: {'PASS' if all_passed else 'FAIL'}")
        logger.info(
            f"Total scenarios: {c['total']} ({c['passed']} passed, {c['failed']} failed, {c['skipped']} skipped)"
        )
        return {
            'success': all_passed,
            'folder_results': list(results),
            'detailed_results': dict(self.results),
            'scenario_counts': dict(c),
        }

    async def run_parallel(self):
        """Run every feature folder at once."""
        folders = self.get_feature_folders()
        if not folders:
            logger.warning('No feature folders found')
            return {'success': False, 'message': 'No feature folders found', 'folder_results': [], 'scenario_counts': empty_counts()}
        logger.info(f"Running tests in parallel for {len(folders)} folders")
        return await self._run_folders(folders)

    async def run_specific_folders(self, folders):
        if not folders:
            logger.warning('No folders specified')
            return {'success': False, 'message': 'No folders specified', 'folder_results': [], 'scenario_counts': empty_counts()}
        logger.info(f"Running tests in parallel for specified folders: {', '.join(folders)}")
        return await self._run_folders(list(folders))

    async def run_in_batches(self, folders, max_workers):
        """Run folders `max_workers` at a time; each batch finishes before the next starts."""
        folders = list(folders or [])
        if not max_workers or max_workers <= 0 or max_workers >= len(folders):
            return await self.run_specific_folders(folders)

        logger.info(f"Using {max_workers} workers for {len(folders)} folders")
        batches = [folders[i:i + max_workers] for i in range(0, len(folders), max_workers)]
        all_passed = True
        all_results = []
        totals = empty_counts()
        for i, batch in enumerate(batches):
            logger.info(f"Running batch {i + 1} of {len(batches)}: {', '.join(batch)}")
            batch_result = await self.run_specific_folders(batch)
            all_passed = all_passed and batch_result['success']
            all_results.extend(batch_result['folder_results'])
            add_counts(totals, batch_result['scenario_counts'])

        self.scenario_counts = totals
        return {
            'success': all_passed,
            'folder_results': all_results,
            'detailed_results': dict(self.results),
            'scenario_counts': dict(totals),
        }

    async def run(self, folders=None, max_workers=0):
        """Run the given folders (or all of them), throttled to `max_workers` when set."""
        if folders:
            logger.info(f"Running tests for folders: {', '.join(folders)}")
            return await self.run_in_batches(folders, max_workers)
        logger.info('Running tests for all folders')
        if max_workers and max_workers > 0:
            all_folders = self.get_feature_folders()
            if not all_folders:
                return await self.run_parallel()
            return await self.run_in_batches(all_folders, max_workers)
        return await self.run_parallel()

    def kill_all(self):
        """Terminate every child still running. Safe to call from a signal handler."""
        logger.info(f"Killing {len(self.processes)} running processes")
        for proc in list(self.processes):
            if proc.returncode is not None:
                continue
            try:
                proc.terminate()
            except ProcessLookupError:
                pass
            except Exception as e:
                logger.error(f"Failed to kill process: {e}")
        self.processes = []
