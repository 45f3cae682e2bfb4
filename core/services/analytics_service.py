# =============================================================================
# core/services/analytics_service.py - Business Analytics
# =============================================================================
# Read-only aggregations across entities, computed with pandas over the
# fetched documents.
#
# Grouped results use the shape [{"_id": <group key>, "count": n}, ...]
# so dashboards can chart them directly.
# =============================================================================

import logging
from typing import Any

import pandas as pd

from lib.supabase_client import SupabaseClient
from lib.utils import parse_datetime, utc_now
from core.models.project import ProjectPhase, ProjectStatus
from core.models.shipment import ShipmentStatus
from app.exceptions import ApiError

logger = logging.getLogger(__name__)

DAY_SECONDS = 24 * 60 * 60
DEFAULT_WINDOW_DAYS = 90

# metric name -> table
TIME_SERIES_METRICS = {
    "projects": "projects",
    "inventory": "inventory",
    "shipments": "shipments",
    "customers": "customers",
    "orders": "purchase_orders",
    "activities": "activities",
    "tasks": "tasks",
}
PERIODS = ("day", "week", "month", "quarter", "year")

CLOSED_PROJECT = [ProjectStatus.COMPLETED.value, ProjectStatus.CANCELLED.value]
CLOSED_SHIPMENT = [ShipmentStatus.DELIVERED.value, ShipmentStatus.CANCELLED.value]
CLOSED_TASK = ["completed", "cancelled"]


# =============================================================================
# DataFrame Helpers
# =============================================================================

def load_frame(table: str, columns: list[str]) -> pd.DataFrame:
    """
    Fetch a table into a DataFrame that always has `columns`.

    Missing fields become None, so an empty table still yields a frame
    with the expected columns.
    """
    rows = SupabaseClient.fetch_all(table)
    return pd.DataFrame(rows).reindex(columns=columns)


def to_dates(series: pd.Series) -> pd.Series:
    """Parse stored timestamps into a UTC datetime series (NaT when absent)."""
    return pd.to_datetime(series.map(parse_datetime), utc=True)


def to_numbers(series: pd.Series) -> pd.Series:
    return pd.to_numeric(series, errors="coerce")


def days_between(start: pd.Series, end: pd.Series) -> pd.Series:
    return (end - start).dt.total_seconds() / DAY_SECONDS


def _scalar(value: Any) -> Any:
    """Convert numpy scalars and NaN to plain JSON values."""
    if value is None:
        return None
    if isinstance(value, (list, dict)):
        return value
    if pd.isna(value):
        return None
    return value.item() if hasattr(value, "item") else value


def count_by(series: pd.Series, top: int | None = None, by_key: bool = False) -> list[dict[str, Any]]:
    """
    Group counts as [{"_id": key, "count": n}], largest first.

    Args:
        top: Keep only the first `top` groups
        by_key: Sort by the group key instead of the count
    """
    counts = series.value_counts(dropna=False)
    groups = [{"_id": _scalar(key), "count": int(n)} for key, n in counts.items()]
    if by_key:
        groups.sort(key=lambda g: (g["_id"] is None, str(g["_id"])))
    return groups[:top] if top else groups


def percentage(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole else 0


def window(
    from_date: str | None,
    to_date: str | None,
    days: int = DEFAULT_WINDOW_DAYS,
) -> tuple[pd.Timestamp, pd.Timestamp]:
    """
    Resolve a date window, defaulting to the last `days` days.

    Raises:
        ApiError: 400 for unparseable dates
    """
    now = pd.Timestamp(utc_now())
    end = parse_datetime(to_date) if to_date else now
    start = parse_datetime(from_date) if from_date else now - pd.Timedelta(days=days)
    if end is None or start is None:
        raise ApiError("Invalid date range", status_code=400)
    return pd.Timestamp(start), pd.Timestamp(end)


def customer_names() -> dict[str, str]:
    return {
        row["id"]: row.get("companyName")
        for row in SupabaseClient.fetch_all("customers")
    }


# =============================================================================
# Analytics
# =============================================================================

class AnalyticsService:
    """Service for analytics endpoints."""

    @staticmethod
    def business_overview() -> dict[str, Any]:
        projects = load_frame("projects", ["status"])
        inventory = load_frame("inventory", ["stockQuantity", "reorderPoint"])
        shipments = load_frame("shipments", ["status"])
        tasks = load_frame("tasks", ["status", "dueDate"])

        low_stock = to_numbers(inventory["stockQuantity"]).fillna(0) <= to_numbers(inventory["reorderPoint"]).fillna(0)
        overdue = (to_dates(tasks["dueDate"]) < pd.Timestamp(utc_now())) & ~tasks["status"].isin(CLOSED_TASK)

        return {
            "counts": {
                "projects": len(projects),
                "activeProjects": int((~projects["status"].isin(CLOSED_PROJECT)).sum()),
                "inventoryItems": len(inventory),
                "lowStockItems": int(low_stock.sum()),
                "shipments": len(shipments),
                "inProgressShipments": int((~shipments["status"].isin(CLOSED_SHIPMENT)).sum()),
                "customers": SupabaseClient.count_documents("customers"),
                "suppliers": SupabaseClient.count_documents("suppliers"),
                "purchaseOrders": SupabaseClient.count_documents("purchase_orders"),
                "tasks": len(tasks),
                "overdueTasks": int(overdue.sum()),
            }
        }

    @staticmethod
    def project_performance(from_date: str | None = None, to_date: str | None = None) -> dict[str, Any]:
        """Phase/status/customer breakdowns in a startDate window, plus delivery metrics."""
        start, end = window(from_date, to_date)
        projects = load_frame(
            "projects",
            ["customer", "status", "phase", "startDate", "targetCompletionDate", "actualCompletionDate"],
        )
        started = to_dates(projects["startDate"])
        in_window = projects[(started >= start) & (started <= end)]

        completed = projects[projects["status"] == ProjectStatus.COMPLETED.value]
        c_start = to_dates(completed["startDate"])
        c_actual = to_dates(completed["actualCompletionDate"])
        c_target = to_dates(completed["targetCompletionDate"])

        durations = days_between(c_start, c_actual).dropna()
        with_target = c_target.notna() & c_actual.notna() & c_start.notna()
        on_time = int((c_actual[with_target] <= c_target[with_target]).sum())

        names = customer_names()
        by_customer = [
            {**group, "customerName": names.get(group["_id"])}
            for group in count_by(in_window["customer"], top=10)
        ]

        return {
            "projectsByPhase": count_by(in_window["phase"]),
            "projectsByStatus": count_by(in_window["status"]),
            "averageProjectDuration": float(durations.mean()) if len(durations) else 0,
            "onTimeCompletionRate": percentage(on_time, int(with_target.sum())),
            "projectsByCustomer": by_customer,
        }

    @staticmethod
    def inventory() -> dict[str, Any]:
        rows = SupabaseClient.fetch_all("inventory")
        items = pd.DataFrame(rows).reindex(
            columns=["category", "price", "stockQuantity", "reorderPoint", "updatedAt"]
        )

        quantity = to_numbers(items["stockQuantity"]).fillna(0)
        reorder = to_numbers(items["reorderPoint"]).fillna(0)
        price = to_numbers(items["price"])

        low_positions = quantity[quantity <= reorder].sort_values(kind="stable").index[:10]
        low_stock_items = [rows[i] for i in low_positions]

        valued = items.assign(totalValue=quantity * price)[(quantity > 0) & price.notna()]
        by_category = (
            valued.groupby("category", dropna=False)
            .agg(totalValue=("totalValue", "sum"), itemCount=("totalValue", "size"))
            .sort_values("totalValue", ascending=False)
        )
        value_by_category = [
            {"_id": _scalar(category), "totalValue": float(row.totalValue), "itemCount": int(row.itemCount)}
            for category, row in by_category.iterrows()
        ]

        stale_cutoff = pd.Timestamp(utc_now()) - pd.Timedelta(days=90)
        no_movement = int((to_dates(items["updatedAt"]) < stale_cutoff).sum())

        return {
            "lowStockItems": low_stock_items,
            "valueByCategory": value_by_category,
            "totalValue": float(valued["totalValue"].sum()),
            "noMovementItems": no_movement,
            "inventoryByStatus": [
                {"status": "Out of Stock", "count": int((quantity == 0).sum())},
                {"status": "Low Stock", "count": int(((quantity > 0) & (quantity <= reorder)).sum())},
                {"status": "Adequate Stock", "count": int((quantity > reorder).sum())},
            ],
        }

    @staticmethod
    def shipments(from_date: str | None = None, to_date: str | None = None) -> dict[str, Any]:
        start, end = window(from_date, to_date)
        shipments = load_frame(
            "shipments",
            ["status", "courier", "type", "createdAt", "shippedDate", "estimatedDeliveryDate", "actualDeliveryDate"],
        )
        created = to_dates(shipments["createdAt"])
        recent = shipments[(created >= start) & (created <= end)]

        delivered = recent[recent["status"] == ShipmentStatus.DELIVERED.value]
        shipped = to_dates(delivered["shippedDate"])
        arrived = to_dates(delivered["actualDeliveryDate"])
        estimated = to_dates(delivered["estimatedDeliveryDate"])

        shipping_days = days_between(shipped, arrived).dropna()
        with_estimate = estimated.notna() & arrived.notna()
        on_time = int((arrived[with_estimate] <= estimated[with_estimate]).sum())

        return {
            "shipmentsByStatus": count_by(recent["status"], by_key=True),
            "shipmentsByCarrier": count_by(recent["courier"], top=10),
            "shipmentsByType": count_by(recent["type"]),
            "averageShippingTime": float(shipping_days.mean()) if len(shipping_days) else 0,
            "onTimeDeliveryRate": percentage(on_time, int(with_estimate.sum())),
            "totalShipments": len(recent),
        }

    @staticmethod
    def customers() -> dict[str, Any]:
        customers = load_frame("customers", ["id", "companyName", "industry", "size"])
        projects = load_frame("projects", ["customer", "status"])
        names = customer_names()

        top_by_projects = [
            {**group, "customerName": names.get(group["_id"])}
            for group in count_by(projects["customer"], top=10)
        ]

        status_counts = projects.groupby(["customer", "status"], dropna=False).size()
        per_customer: dict[Any, dict[str, Any]] = {}
        for (customer, status), n in status_counts.items():
            key = _scalar(customer)
            entry = per_customer.setdefault(key, {"_id": key, "statuses": [], "totalProjects": 0})
            entry["statuses"].append({"status": _scalar(status), "count": int(n)})
            entry["totalProjects"] += int(n)

        project_status = sorted(per_customer.values(), key=lambda e: e["totalProjects"], reverse=True)[:10]
        for entry in project_status:
            entry["customerName"] = names.get(entry["_id"])

        return {
            "customersByIndustry": count_by(customers["industry"]),
            "customersBySize": count_by(customers["size"], by_key=True),
            "topCustomersByProjects": top_by_projects,
            "customerProjectStatus": project_status,
            "totalCustomers": len(customers),
        }

    @staticmethod
    def time_series(metric: str | None, period: str | None = "week", count: int = 12) -> dict[str, Any]:
        """
        Count documents created per period over the last `count` periods.

        Labels:
            day "2025-3-7", week "2025-W9" (Sunday-based), month "2025-3",
            quarter "2025-Q1", year "2025"

        Raises:
            ApiError: 400 for a missing or unknown metric
        """
        if not metric:
            raise ApiError("Metric parameter is required", status_code=400)
        if metric not in TIME_SERIES_METRICS:
            raise ApiError(f"Invalid metric: {metric}", status_code=400)
        if period not in PERIODS:
            period = "week"

        end = pd.Timestamp(utc_now())
        span = {
            "day": pd.Timedelta(days=count),
            "week": pd.Timedelta(weeks=count),
            "month": pd.DateOffset(months=count),
            "quarter": pd.DateOffset(months=count * 3),
            "year": pd.DateOffset(years=count),
        }[period]
        start = end - span

        frame = load_frame(TIME_SERIES_METRICS[metric], ["createdAt"])
        created = to_dates(frame["createdAt"])
        created = created[(created >= start) & (created <= end)]

        keys = pd.DataFrame({"year": created.dt.year})
        if period == "day":
            keys["month"] = created.dt.month
            keys["day"] = created.dt.day
        elif period == "week":
            keys["week"] = created.dt.strftime("%U").astype(int)
        elif period == "month":
            keys["month"] = created.dt.month
        elif period == "quarter":
            keys["quarter"] = created.dt.quarter

        if keys.empty:
            return {"metric": metric, "period": period, "timeSeriesData": []}

        grouped = keys.groupby(list(keys.columns)).size().sort_index()

        data = []
        for key, n in grouped.items():
            parts = key if isinstance(key, tuple) else (key,)
            year = int(parts[0])
            if period == "day":
                label = f"{year}-{int(parts[1])}-{int(parts[2])}"
            elif period == "week":
                label = f"{year}-W{int(parts[1])}"
            elif period == "month":
                label = f"{year}-{int(parts[1])}"
            elif period == "quarter":
                label = f"{year}-Q{int(parts[1])}"
            else:
                label = f"{year}"
            data.append({"date": label, "count": int(n)})

        return {"metric": metric, "period": period, "timeSeriesData": data}

    @staticmethod
    def project_completion() -> dict[str, Any]:
        """Actual vs target duration for completed projects, per project, per phase and overall."""
        projects = load_frame(
            "projects",
            ["name", "phase", "status", "startDate", "targetCompletionDate", "actualCompletionDate"],
        )
        completed = projects[projects["status"] == ProjectStatus.COMPLETED.value].copy()
        completed["start"] = to_dates(completed["startDate"])
        completed["target"] = to_dates(completed["targetCompletionDate"])
        completed["actual"] = to_dates(completed["actualCompletionDate"])
        completed = completed[completed["start"].notna() & completed["actual"].notna()]

        completed["actualDuration"] = days_between(completed["start"], completed["actual"]).round()
        completed["targetDuration"] = days_between(completed["start"], completed["target"]).round()
        completed["durationVariance"] = completed["actualDuration"] - completed["targetDuration"]

        project_data = []
        for row in completed.itertuples():
            has_target = not pd.isna(row.targetDuration)
            variance = float(row.durationVariance) if has_target else None
            project_data.append({
                "projectName": _scalar(row.name),
                "phase": _scalar(row.phase),
                "actualDuration": int(row.actualDuration),
                "targetDuration": int(row.targetDuration) if has_target else None,
                "durationVariance": variance,
                "variancePercentage": (
                    variance / row.targetDuration * 100
                    if has_target and row.targetDuration
                    else None
                ),
                "onTime": bool(row.actual <= row.target) if has_target else None,
            })

        phase_analytics = []
        for phase in ProjectPhase:
            group = [p for p in project_data if p["phase"] == phase.value]
            phase_analytics.append({"phase": phase.value, **AnalyticsService._duration_summary(group)})

        overall = AnalyticsService._duration_summary(project_data)
        overall["totalProjects"] = overall.pop("projectCount")

        return {
            "projectData": project_data,
            "phaseAnalytics": phase_analytics,
            "overallAnalytics": overall,
        }

    @staticmethod
    def _duration_summary(group: list[dict[str, Any]]) -> dict[str, Any]:
        if not group:
            return {
                "projectCount": 0,
                "averageActualDuration": 0,
                "averageTargetDuration": 0,
                "averageVariance": 0,
                "onTimePercentage": 0,
            }

        frame = pd.DataFrame(group)
        target = frame["targetDuration"].dropna()
        variance = frame["durationVariance"].dropna()
        return {
            "projectCount": len(group),
            "averageActualDuration": float(frame["actualDuration"].mean()),
            "averageTargetDuration": float(target.mean()) if len(target) else 0,
            "averageVariance": float(variance.mean()) if len(variance) else 0,
            "onTimePercentage": percentage(sum(1 for p in group if p["onTime"] is True), len(group)),
        }
