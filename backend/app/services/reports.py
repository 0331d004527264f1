"""Report templates and on-demand report generation."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from .. import models, schemas
from .aggregation import filter_records, group_records, summarize, total_amount
from .periods import current_moment, previous_period, resolve_period
from .presentation import export_csv, export_filename, export_json, to_chart_points
from .record_sources import RecordRepository
from .report_records import (
    ChartType,
    ExportFormat,
    GroupBy,
    Period,
    PeriodRange,
    ReportRecord,
    ReportSummary,
    ReportType,
    to_decimal,
)

LOGGER = logging.getLogger(__name__)

REQUIRED_TEMPLATE_FIELDS = frozenset(
    {"name", "description", "report_type", "date_range", "group_by", "chart_type", "metrics"}
)

EXPORT_MEDIA_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.JSON: "application/json",
}

DEFAULT_TEMPLATES: Sequence[Mapping[str, Any]] = (
    {
        "id": "monthly-earnings",
        "name": "Monthly Earnings Report",
        "description": "Comprehensive monthly earnings breakdown",
        "report_type": ReportType.EARNINGS.value,
        "date_range": PeriodRange.MONTH.value,
        "metrics": ["total", "average", "count"],
        "group_by": GroupBy.DAY.value,
        "chart_type": ChartType.BAR.value,
        "filters": {},
    },
    {
        "id": "client-summary",
        "name": "Client Summary Report",
        "description": "Earnings breakdown by client",
        "report_type": ReportType.CLIENTS.value,
        "date_range": PeriodRange.QUARTER.value,
        "metrics": ["total", "count"],
        "group_by": GroupBy.CLIENT.value,
        "chart_type": ChartType.PIE.value,
        "filters": {},
    },
    {
        "id": "platform-analysis",
        "name": "Platform Analysis",
        "description": "Performance comparison across platforms",
        "report_type": ReportType.EARNINGS.value,
        "date_range": PeriodRange.MONTH.value,
        "metrics": ["total", "average"],
        "group_by": GroupBy.PROJECT.value,
        "chart_type": ChartType.BAR.value,
        "filters": {},
    },
)


class ReportServiceError(RuntimeError):
    """Raised when a report cannot be generated or exported."""


class ReportTemplateNotFoundError(ReportServiceError):
    """Raised when a template identifier does not exist."""


def _optional_amount(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return to_decimal(value)


def _names(raw: Any) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(str(item) for item in raw if item not in (None, ""))


@dataclass(frozen=True)
class ReportFilterSet:
    """Constraints narrowing a report beyond its period."""

    platforms: tuple[str, ...] = ()
    clients: tuple[str, ...] = ()
    projects: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "ReportFilterSet":
        """Accept both stored (snake_case) and browser (camelCase) filter keys."""

        raw = raw or {}
        return cls(
            platforms=_names(raw.get("platforms")),
            clients=_names(raw.get("clients")),
            projects=_names(raw.get("projects")),
            categories=_names(raw.get("categories")),
            min_amount=_optional_amount(raw.get("min_amount", raw.get("minAmount"))),
            max_amount=_optional_amount(raw.get("max_amount", raw.get("maxAmount"))),
        )

    def apply(self, records: Iterable[ReportRecord], period: Period) -> list[ReportRecord]:
        return filter_records(
            records,
            period,
            min_amount=self.min_amount,
            max_amount=self.max_amount,
            platform_ids=self.platforms,
            client_ids=self.clients,
            projects=self.projects,
            categories=self.categories,
        )


@dataclass(frozen=True)
class ReportDefinition:
    """Everything needed to run a report, detached from storage."""

    name: str
    report_type: ReportType
    date_range: PeriodRange = PeriodRange.MONTH
    group_by: GroupBy = GroupBy.DAY
    chart_type: ChartType = ChartType.BAR
    filters: ReportFilterSet = field(default_factory=ReportFilterSet)
    custom_start_date: Optional[date] = None
    custom_end_date: Optional[date] = None
    template_id: Optional[str] = None

    @classmethod
    def from_template(cls, template: models.ReportTemplate) -> "ReportDefinition":
        return cls(
            name=template.name,
            report_type=ReportType(template.report_type),
            date_range=PeriodRange(template.date_range),
            group_by=GroupBy(template.group_by),
            chart_type=ChartType(template.chart_type),
            filters=ReportFilterSet.from_mapping(template.filters),
            custom_start_date=template.custom_start_date,
            custom_end_date=template.custom_end_date,
            template_id=template.id,
        )

    @classmethod
    def from_schema(cls, data: schemas.ReportTemplateBase) -> "ReportDefinition":
        return cls(
            name=data.name,
            report_type=ReportType(data.report_type),
            date_range=PeriodRange(data.date_range),
            group_by=GroupBy(data.group_by),
            chart_type=ChartType(data.chart_type),
            filters=ReportFilterSet.from_mapping(data.filters.model_dump()),
            custom_start_date=data.custom_start_date,
            custom_end_date=data.custom_end_date,
        )


@dataclass(frozen=True)
class ReportData:
    definition: ReportDefinition
    generated_at: datetime
    period: Period
    previous_period: Optional[Period]
    summary: ReportSummary
    chart_data: list[dict[str, Any]]
    table_data: list[dict[str, Any]]

    def as_dict(self) -> dict[str, Any]:
        return {
            "template_id": self.definition.template_id,
            "template_name": self.definition.name,
            "generated_at": self.generated_at,
            "period": self.period.as_dict(),
            "previous_period": self.previous_period.as_dict() if self.previous_period else None,
            "summary": self.summary.as_dict(),
            "chart_data": self.chart_data,
            "table_data": self.table_data,
        }


@dataclass(frozen=True)
class ReportExport:
    content: str
    media_type: str
    filename: str


def _select_records(report_type: ReportType, repository: RecordRepository) -> Sequence[ReportRecord]:
    if report_type == ReportType.EARNINGS:
        return repository.earnings()
    if report_type == ReportType.EXPENSES:
        return repository.expenses()
    if report_type == ReportType.TIME:
        return repository.time_entries()
    if report_type == ReportType.CLIENTS:
        return repository.clients()
    return ()


def _template_payload(data: schemas.ReportTemplateBase) -> dict[str, Any]:
    payload = data.model_dump(exclude_none=True)
    payload["filters"] = data.filters.model_dump(mode="json", exclude_none=True)
    return payload


class ReportService:
    """Operations for saved report templates and the reports they produce."""

    @staticmethod
    def ensure_default_templates(db: Session) -> int:
        """Seed the built-in templates when no template has been saved yet."""

        if db.query(models.ReportTemplate).count():
            return 0
        for payload in DEFAULT_TEMPLATES:
            db.add(models.ReportTemplate(**payload))
        db.commit()
        LOGGER.info("Seeded %d default report templates", len(DEFAULT_TEMPLATES))
        return len(DEFAULT_TEMPLATES)

    @staticmethod
    def list_templates(db: Session) -> list[models.ReportTemplate]:
        ReportService.ensure_default_templates(db)
        return (
            db.query(models.ReportTemplate)
            .order_by(models.ReportTemplate.created_at, models.ReportTemplate.name)
            .all()
        )

    @staticmethod
    def get_template(db: Session, template_id: str) -> Optional[models.ReportTemplate]:
        return (
            db.query(models.ReportTemplate)
            .filter(models.ReportTemplate.id == template_id)
            .first()
        )

    @staticmethod
    def require_template(db: Session, template_id: str) -> models.ReportTemplate:
        template = ReportService.get_template(db, template_id)
        if template is None:
            raise ReportTemplateNotFoundError(f"Report template {template_id} not found")
        return template

    @staticmethod
    def build_template(data: schemas.ReportTemplateCreate) -> models.ReportTemplate:
        """Return an unsaved template row for ``data``."""

        return models.ReportTemplate(**_template_payload(data))

    @staticmethod
    def create_template(db: Session, data: schemas.ReportTemplateCreate) -> models.ReportTemplate:
        template = ReportService.build_template(data)
        db.add(template)
        db.commit()
        db.refresh(template)
        return template

    @staticmethod
    def update_template(
        db: Session, template: models.ReportTemplate, data: schemas.ReportTemplateUpdate
    ) -> models.ReportTemplate:
        update_data = data.model_dump(exclude_unset=True)
        if "filters" in update_data:
            update_data["filters"] = (
                data.filters.model_dump(mode="json", exclude_none=True) if data.filters else {}
            )

        start = update_data.get("custom_start_date", template.custom_start_date)
        end = update_data.get("custom_end_date", template.custom_end_date)
        if start is not None and end is not None and start > end:
            raise ValueError("custom_start_date cannot be after custom_end_date")

        for key, value in update_data.items():
            if key in REQUIRED_TEMPLATE_FIELDS and value is None:
                continue
            setattr(template, key, value)
        db.add(template)
        db.commit()
        db.refresh(template)
        return template

    @staticmethod
    def delete_template(db: Session, template: models.ReportTemplate) -> None:
        db.delete(template)
        db.commit()

    @staticmethod
    def generate_report(
        definition: ReportDefinition,
        repository: RecordRepository,
        now: Optional[datetime] = None,
    ) -> ReportData:
        """Run the aggregation pipeline for ``definition`` over ``repository``.

        Growth compares the report total with the equal-length period right
        before it. Client reports ignore the period and carry no growth.
        """

        generated_at = now or current_moment()
        period = resolve_period(
            definition.date_range,
            now=generated_at,
            custom_start=definition.custom_start_date,
            custom_end=definition.custom_end_date,
        )
        records = _select_records(definition.report_type, repository)
        selected = definition.filters.apply(records, period)

        before: Optional[Period] = None
        previous_total: Optional[Decimal] = None
        if definition.report_type not in (ReportType.CLIENTS, ReportType.CUSTOM):
            before = previous_period(period)
            previous_total = total_amount(definition.filters.apply(records, before))

        buckets = group_records(selected, definition.group_by)
        LOGGER.debug(
            "Generated report %r: %d records in %d buckets",
            definition.name,
            len(selected),
            len(buckets),
        )
        return ReportData(
            definition=definition,
            generated_at=generated_at,
            period=period,
            previous_period=before,
            summary=summarize(selected, previous_total),
            chart_data=to_chart_points(buckets),
            table_data=[record.as_dict() for record in selected],
        )

    @staticmethod
    def export_report(report: ReportData, export_format: ExportFormat | str) -> ReportExport:
        try:
            fmt = ExportFormat(export_format)
        except ValueError as exc:
            raise ReportServiceError(f"Unsupported export format: {export_format}") from exc

        if fmt == ExportFormat.CSV:
            content = export_csv(report.chart_data)
        else:
            content = export_json(
                report.definition.name,
                report.summary.as_dict(),
                report.chart_data,
                report.generated_at,
            )
        return ReportExport(
            content=content,
            media_type=EXPORT_MEDIA_TYPES[fmt],
            filename=export_filename(report.definition.name, report.generated_at, fmt.value),
        )
