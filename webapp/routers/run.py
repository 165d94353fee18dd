from fastapi import APIRouter, Request, Form, HTTPException
from fastapi.responses import JSONResponse, RedirectResponse
import os, sys, time, uuid, signal, subprocess

import config
from .. import utils

router = APIRouter()


def build_command(summary_path, folders='', workers=0):
    cmd = [sys.executable, '-m', 'scripts.run_parallel', '--summary', summary_path]
    if folders:
        cmd += ['--folders', folders]
    if workers and workers > 0:
        cmd += ['--workers', str(workers)]
    return cmd


def _wants_json(request: Request) -> bool:
    accept = request.headers.get('accept', '').lower()
    xrw = request.headers.get('x-requested-with', '').lower()
    return 'application/json' in accept or xrw == 'xmlhttprequest'


@router.post('/run')
async def run(request: Request, folders: str = Form(''), workers: int = Form(0)):
    from ..main import running, active_run
    current = active_run()
    if current:
        return JSONResponse({'ok': False, 'error': 'Already running', 'run': current}, status_code=409)

    folders = ','.join(f.strip() for f in (folders or '').split(',') if f.strip())
    run_id = str(uuid.uuid4())[:8]
    ts = time.strftime('%Y-%m-%d_%H-%M-%S', time.localtime())
    run_name = f"{utils._sanitize_name(folders.replace(',', '-') or 'all')}-{ts}-{run_id}"
    run_dir = utils.run_dir_for(run_name)
    os.makedirs(run_dir, exist_ok=True)
    logfile = os.path.join(run_dir, utils.LOG_FILE)
    summary_path = os.path.join(run_dir, utils.SUMMARY_FILE)

    cmd = build_command(summary_path, folders, workers)
    try:
        with open(logfile, 'wb') as logf:
            proc = subprocess.Popen(cmd, cwd=config.ROOT, stdout=logf, stderr=subprocess.STDOUT, env=dict(os.environ))
    except Exception as e:
        with open(logfile, 'ab') as lf:
            lf.write(str(e).encode('utf-8'))
        return JSONResponse({'ok': False, 'error': f'Failed to start run: {e}'}, status_code=500)

    running[run_name] = {'pid': proc.pid, 'proc': proc, 'log': logfile, 'run_dir': run_dir, 'run_id': run_id,
                         'folders': folders, 'workers': workers, 'started_at': time.time()}
    if _wants_json(request):
        return JSONResponse({'ok': True, 'run': run_name, 'pid': proc.pid, 'status_url': f'/status/{run_name}'})
    return RedirectResponse(f'/status/{run_name}', status_code=303)


@router.get('/status/{run}')
async def status(run: str, lines: int = 50):
    from ..main import running
    run_name = utils.safe_run_name(run)
    if not run_name:
        raise HTTPException(status_code=400, detail='Invalid run name')
    run_dir = utils.run_dir_for(run_name)
    info = running.get(run_name)
    if info is None and not os.path.isdir(run_dir):
        raise HTTPException(status_code=404, detail='Run not found')

    returncode = None
    if info is not None:
        returncode = info['proc'].poll()
    summary = utils.load_summary(run_dir)
    if returncode is not None and summary is not None:
        running.pop(run_name, None)
    if info is None and summary is not None:
        returncode = 0 if summary.get('success') else 1
    return JSONResponse({
        'ok': True,
        'run': run_name,
        'running': info is not None and returncode is None,
        'returncode': returncode,
        'summary': summary,
        'log': utils.tail_file(os.path.join(run_dir, utils.LOG_FILE), lines),
    })


@router.post('/stop/{run}')
async def stop(run: str):
    """Interrupt a run; the runner's SIGINT handler terminates its child processes."""
    from ..main import running
    run_name = utils.safe_run_name(run)
    info = running.get(run_name) if run_name else None
    if info is None:
        raise HTTPException(status_code=404, detail='Run not found')
    proc = info['proc']
    if proc.poll() is not None:
        return JSONResponse({'ok': False, 'error': 'Run already finished', 'returncode': proc.returncode})
    try:
        if os.name == 'nt':
            proc.terminate()
        else:
            proc.send_signal(signal.SIGINT)
    except Exception as e:
        return JSONResponse({'ok': False, 'error': f'Failed to stop run: {e}'}, status_code=500)
    return JSONResponse({'ok': True, 'run': run_name})
