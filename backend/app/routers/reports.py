"""Router exposing report templates and generated reports."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services import (
    ReportData,
    ReportDefinition,
    ReportService,
    ReportServiceError,
    ReportTemplateNotFoundError,
    SqlRecordRepository,
)
from ..services.report_records import ExportFormat

LOGGER = logging.getLogger(__name__)

router = APIRouter()

REPORT_LOAD_ERROR = "Failed to load report data"


def _get_template_or_404(db: Session, template_id: str):
    try:
        return ReportService.require_template(db, template_id)
    except ReportTemplateNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Report template not found"
        ) from exc


def _run_report(db: Session, definition: ReportDefinition) -> ReportData:
    try:
        return ReportService.generate_report(definition, SqlRecordRepository(db))
    except SQLAlchemyError as exc:
        LOGGER.exception(
            "Failed to generate report",
            exc_info=exc,
            extra={"template_id": definition.template_id, "report_type": definition.report_type.value},
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=REPORT_LOAD_ERROR
        ) from exc


@router.get("/templates", response_model=List[schemas.ReportTemplateRead])
def list_templates(db: Session = Depends(get_db)) -> List[schemas.ReportTemplateRead]:
    """Return saved templates, seeding the built-in ones on first use."""

    return ReportService.list_templates(db)


@router.post(
    "/templates",
    response_model=schemas.ReportTemplateRead,
    status_code=status.HTTP_201_CREATED,
)
def create_template(
    template_in: schemas.ReportTemplateCreate, db: Session = Depends(get_db)
) -> schemas.ReportTemplateRead:
    return ReportService.create_template(db, template_in)


@router.get("/templates/{template_id}", response_model=schemas.ReportTemplateRead)
def get_template(template_id: str, db: Session = Depends(get_db)) -> schemas.ReportTemplateRead:
    return _get_template_or_404(db, template_id)


@router.put("/templates/{template_id}", response_model=schemas.ReportTemplateRead)
def update_template(
    template_id: str,
    template_in: schemas.ReportTemplateUpdate,
    db: Session = Depends(get_db),
) -> schemas.ReportTemplateRead:
    template = _get_template_or_404(db, template_id)
    try:
        return ReportService.update_template(db, template, template_in)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.delete("/templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(template_id: str, db: Session = Depends(get_db)) -> None:
    template = _get_template_or_404(db, template_id)
    ReportService.delete_template(db, template)


@router.get("/templates/{template_id}/run", response_model=schemas.ReportDataResponse)
def run_template(template_id: str, db: Session = Depends(get_db)) -> schemas.ReportDataResponse:
    """Generate the report a saved template describes."""

    template = _get_template_or_404(db, template_id)
    report = _run_report(db, ReportDefinition.from_template(template))
    return schemas.ReportDataResponse(**report.as_dict())


@router.get("/templates/{template_id}/export")
def export_template(
    template_id: str,
    export_format: ExportFormat = Query(ExportFormat.CSV, alias="format"),
    db: Session = Depends(get_db),
) -> Response:
    """Download a generated report as CSV or JSON."""

    template = _get_template_or_404(db, template_id)
    report = _run_report(db, ReportDefinition.from_template(template))
    try:
        export = ReportService.export_report(report, export_format)
    except ReportServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@router.post("/preview", response_model=schemas.ReportDataResponse)
def preview_report(
    template_in: schemas.ReportTemplateBase, db: Session = Depends(get_db)
) -> schemas.ReportDataResponse:
    """Generate a report from an unsaved template."""

    report = _run_report(db, ReportDefinition.from_schema(template_in))
    return schemas.ReportDataResponse(**report.as_dict())
