from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response

from product_importer.dependencies import get_run_repository
from product_importer.errors import ExportError, RunNotFoundError
from product_importer.repositories.run_repo import RunRepository
from product_importer.viewmodels.export_vm import ExportViewModel

router = APIRouter(prefix="/export")


@router.get("/csv")
async def export_csv(
    run_id: str | None = None,
    repo: RunRepository = Depends(get_run_repository),
):
    try:
        content, result = ExportViewModel.load(repo, run_id).generate_csv()
    except RunNotFoundError as exc:
        return JSONResponse({"error": str(exc)}, status_code=404)
    except ExportError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)

    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f"attachment; filename={result.filename}",
            "X-Product-Count": str(result.product_count),
        },
    )


@router.get("/json")
async def export_json(
    run_id: str | None = None,
    repo: RunRepository = Depends(get_run_repository),
):
    try:
        content, result = ExportViewModel.load(repo, run_id).generate_json()
    except RunNotFoundError as exc:
        return JSONResponse({"error": str(exc)}, status_code=404)
    except ExportError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)

    return Response(
        content=content,
        media_type="application/json",
        headers={
            "Content-Disposition": f"attachment; filename={result.filename}",
            "X-Product-Count": str(result.product_count),
        },
    )
