from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

import config
from . import utils

app = FastAPI(title='Parallel feature runner')
templates = Jinja2Templates(directory=utils.TEMPLATES_DIR)
app.mount('/reports', StaticFiles(directory=config.REPORTS_DIR), name='reports')
app.mount('/screenshots', StaticFiles(directory=config.SCREENSHOTS_DIR), name='screenshots')

# simple in-memory running map (process info for spawned run_parallel processes)
running = {}


def prune_finished():
    """Forget runs that have exited and written their summary; their status is read from disk."""
    for name, info in list(running.items()):
        if info['proc'].poll() is not None and utils.load_summary(info['run_dir']) is not None:
            running.pop(name, None)


def active_run():
    """Name of the run still in progress, if any."""
    prune_finished()
    for name, info in list(running.items()):
        proc = info.get('proc')
        try:
            if proc is not None and proc.poll() is None:
                return name
        except Exception:
            running.pop(name, None)
    return None


@app.get('/', response_class=HTMLResponse)
async def index(request: Request):
    """Feature folders, the active run and recent runs."""
    return templates.TemplateResponse(request, 'index.html', {
        'folders': utils.feature_folders(),
        'runs': utils.list_runs()[:20],
        'active': active_run(),
    })


# import and include routers now that shared state is defined (avoids circular imports)
from .routers.run import router as run_router
from .routers.reporting import router as reporting_router
app.include_router(run_router)
app.include_router(reporting_router)
