from fastapi import APIRouter, Request, HTTPException
from fastapi.responses import JSONResponse
import os, shutil

from .. import utils

router = APIRouter()


@router.get('/reporting')
async def reporting():
    # list available runs, newest first (by mtime)
    runs = []
    for entry in utils.list_runs():
        summary = entry.get('summary') or {}
        runs.append({
            'run': entry['name'],
            'finished': bool(summary),
            'success': summary.get('success') if summary else None,
            'scenario_counts': summary.get('scenario_counts') if summary else None,
        })
    return JSONResponse({'ok': True, 'runs': runs})


@router.post('/reporting/delete')
async def reporting_delete(request: Request):
    # delete a run directory on the server; expects JSON body: {"run": "<name>"}
    from ..main import running
    try:
        data = await request.json()
    except Exception:
        raise HTTPException(status_code=400, detail='Invalid JSON')
    run = data.get('run') if isinstance(data, dict) else None
    if not run:
        raise HTTPException(status_code=400, detail='Missing run')
    # sanitize and ensure we only delete things under RUNS_DIR
    run_name = utils.safe_run_name(run)
    if not run_name:
        raise HTTPException(status_code=400, detail='Invalid run name')
    target = utils.run_dir_for(run_name)
    if not os.path.exists(target):
        raise HTTPException(status_code=404, detail='Run not found')
    info = running.get(run_name)
    if info is not None and info['proc'].poll() is None:
        raise HTTPException(status_code=409, detail='Run is still in progress')
    try:
        if os.path.isdir(target):
            shutil.rmtree(target)
        else:
            os.remove(target)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f'Failed to delete: {e}')
    running.pop(run_name, None)
    return JSONResponse({'ok': True})
