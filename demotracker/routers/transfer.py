from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from demotracker.repositories.base import DemoStore
from demotracker.routers.deps import get_store
from demotracker.services.transfer_service import (
    ImportDocumentError,
    export_document,
    export_filename,
    import_demos,
    parse_import_document,
)

router = APIRouter(prefix="/api", tags=["transfer"])


@router.get("/export")
def export_demos(store: DemoStore = Depends(get_store)):
    return Response(
        content=export_document(store.demos),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.post("/import")
async def import_file(file: UploadFile = File(...), store: DemoStore = Depends(get_store)):
    content = await file.read()
    try:
        demos = parse_import_document(content)
    except ImportDocumentError as exc:
        return JSONResponse(
            {
                "ok": False,
                "error": "invalid_document",
                "message": f"Error importing data. Please check the file format. ({exc})",
            },
            status_code=400,
        )
    result = await run_in_threadpool(import_demos, store, demos)
    return {"ok": True, "imported": result.imported, "skipped": result.skipped}
