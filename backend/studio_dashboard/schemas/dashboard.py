from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from studio_dashboard.services.targets import StatusColor


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


EXPORT_LABELS: dict[str, str] = {
    "membership_sales": "Membership Sales (No Renewals)",
    "membership_sales_with_renewals": "Membership Sales (With Renewals)",
    "intro_sales": "Intro Offers Sales",
    "leads_customers": "New Leads and Customers",
    "intro_conversions": "Intro Offers Conversions",
    "payments": "Latest Payments",
}


class MissingExportError(ValueError):
    def __init__(self, export_names: list[str]) -> None:
        self.export_names = export_names
        self.export_name = export_names[0]
        labels = ", ".join(EXPORT_LABELS.get(name, name) for name in export_names)
        super().__init__(f"Missing files: {labels}")


class StudioExports(CamelModel):
    """Raw text of the six Momence exports the dashboard is built from."""

    membership_sales: str | None = Field(default=None, description="Membership sales export without renewals.")
    membership_sales_with_renewals: str | None = Field(
        default=None,
        description="Membership sales export including renewals.",
    )
    intro_sales: str | None = Field(default=None, description="Intro offers sales report.")
    leads_customers: str | None = Field(default=None, description="New leads and customers report.")
    intro_conversions: str | None = Field(default=None, description="Intro offers conversions report.")
    payments: str | None = Field(default=None, description="Latest payments report.")

    def missing_exports(self) -> list[str]:
        return [name for name in EXPORT_LABELS if not getattr(self, name)]

    def require_all(self) -> None:
        missing = self.missing_exports()
        if missing:
            raise MissingExportError(missing)


class DashboardRequest(StudioExports):
    month: str | int = Field(..., description="Month name (e.g. 'September') or zero-indexed month number.")
    year: int = Field(..., ge=2000, le=2100)


class MetricValue(BaseModel):
    value: int | float
    change: int


class DashboardMetrics(CamelModel):
    new_members: MetricValue
    intros_sold: MetricValue
    avg_leads_per_day: MetricValue
    lead_to_intro_conversion: MetricValue
    intro_to_member_conversion: MetricValue
    intro_to_pack_conversion: MetricValue
    total_sales: MetricValue
    pack_sales: MetricValue
    membership_cancellations: MetricValue


class LeadsIntroSalesPoint(CamelModel):
    month: str
    intro_sales: int
    new_leads: int
    target_intro_sales: float
    target_new_leads: float


class NewMembersPoint(CamelModel):
    month: str
    new_members: int
    target: float


class CumulativeMembersPoint(CamelModel):
    month: str
    retained_members: int
    new_members: int
    total_members: int
    target_total_members: float


class TotalSalesPoint(CamelModel):
    month: str
    membership: int
    intro: int
    drop_in: int
    pack: int
    private: int
    party: int
    other: int
    total_sales: int


class ChartData(CamelModel):
    leads_intro_sales: list[LeadsIntroSalesPoint]
    new_members: list[NewMembersPoint]
    cumulative_members: list[CumulativeMembersPoint]
    total_sales: list[TotalSalesPoint]


class DashboardReport(CamelModel):
    month: str
    month_number: int
    year: int
    metrics: DashboardMetrics
    statuses: dict[str, StatusColor]
    targets: dict[str, float | None]
    charts: ChartData
    summary: str


class TargetsResponse(CamelModel):
    year: int
    month: int
    targets: dict[str, float | None]
