# =============================================================================
# core/services/customer_service.py - Customer Business Logic
# =============================================================================
# Customer CRUD with company-name uniqueness, a dependent-project guard
# on delete, and summary statistics.
# =============================================================================

import logging
from collections import Counter
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import days_from_now, is_valid_id, parse_datetime, resolve_sort, utc_now, utc_now_iso
from core.models.activity import ActivityAction, EntityType
from core.models.customer import CustomerCreate, CustomerUpdate
from core.services.activity_service import ActivityService
from app.auth.models import AuthUser
from app.exceptions import ApiError, InvalidIdError, NotFoundError, require_fields

logger = logging.getLogger(__name__)

TABLE = "customers"
SORT_FIELDS = {"companyName", "industry", "size", "status", "createdAt", "customerSince", "contractValue"}

REQUIRED_FIELDS = {
    "companyName": "Company name is required",
    "industry": "Industry is required",
    "size": "Company size is required",
    "primaryContact": "Primary contact is required",
    "accountManager": "Account manager is required",
}


def _duplicate_name(company_name: str) -> ApiError:
    return ApiError(f'Customer with name "{company_name}" already exists', status_code=400)


class CustomerService:
    """Service for customer management operations."""

    @staticmethod
    def list_customers(
        page: int,
        limit: int,
        search: str | None = None,
        industry: str | None = None,
        size: str | None = None,
        status: str | None = None,
        account_manager: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        client = SupabaseClient.get_client()
        query = client.table(TABLE).select("*", count="exact")

        if search:
            clause = SupabaseClient.search_clause(
                search,
                ["companyName", "primaryContact->>name", "primaryContact->>email"],
            )
            if clause:
                query = query.or_(clause)
        if industry:
            query = query.eq("industry", industry)
        if size:
            query = query.eq("size", size)
        if status:
            query = query.eq("status", status)
        if account_manager:
            query = query.eq("accountManager", account_manager)

        column, descending = resolve_sort(sort_by, sort_order, SORT_FIELDS, "companyName")
        return SupabaseClient.fetch_page(query, column, descending, page, limit)

    @staticmethod
    def get_customer(customer_id: str) -> dict[str, Any]:
        if not is_valid_id(customer_id):
            raise InvalidIdError("customer")

        customer = SupabaseClient.fetch_document(TABLE, customer_id)
        if not customer:
            raise NotFoundError("Customer")
        return customer

    @staticmethod
    def create_customer(payload: CustomerCreate, user: AuthUser) -> dict[str, Any]:
        data = payload.to_document()
        require_fields(data, REQUIRED_FIELDS)

        if SupabaseClient.find_one(TABLE, companyName=data["companyName"]):
            raise _duplicate_name(data["companyName"])

        data.setdefault("customerSince", utc_now_iso())
        data["createdBy"] = user.id

        customer = SupabaseClient.insert_document(TABLE, data)
        logger.info(f"Created customer: {customer['id']}")

        ActivityService.log_activity(
            description=f'Customer "{customer["companyName"]}" created',
            entity_type=EntityType.CUSTOMER,
            entity_id=customer["id"],
            action=ActivityAction.CREATE,
            user_id=user.id,
            metadata={"customerId": customer["id"]},
        )
        return customer

    @staticmethod
    def update_customer(customer_id: str, payload: CustomerUpdate, user: AuthUser) -> dict[str, Any]:
        customer = CustomerService.get_customer(customer_id)
        changes = payload.to_document(partial=True)

        new_name = changes.get("companyName")
        if new_name and new_name != customer.get("companyName"):
            if SupabaseClient.find_one(TABLE, companyName=new_name):
                raise _duplicate_name(new_name)

        updated = SupabaseClient.update_document(TABLE, customer_id, changes)
        if not updated:
            raise NotFoundError("Customer")

        ActivityService.log_activity(
            description=f'Customer "{updated["companyName"]}" updated',
            entity_type=EntityType.CUSTOMER,
            entity_id=customer_id,
            action=ActivityAction.UPDATE,
            user_id=user.id,
            metadata={"customerId": customer_id, "fields": sorted(changes)},
        )
        return updated

    @staticmethod
    def delete_customer(customer_id: str, user: AuthUser) -> None:
        """
        Delete a customer.

        Raises:
            ApiError: 400 if any project still references the customer
        """
        customer = CustomerService.get_customer(customer_id)

        dependent_projects = SupabaseClient.count_documents("projects", customer=customer_id)
        if dependent_projects > 0:
            raise ApiError(
                f"Cannot delete customer: {dependent_projects} project(s) are associated with this customer",
                status_code=400,
            )

        SupabaseClient.delete_document(TABLE, customer_id)
        logger.info(f"Deleted customer: {customer_id}")

        ActivityService.log_activity(
            description=f'Customer "{customer.get("companyName")}" deleted',
            entity_type=EntityType.CUSTOMER,
            entity_id=customer_id,
            action=ActivityAction.DELETE,
            user_id=user.id,
            metadata={"customerId": customer_id},
        )

    @staticmethod
    def get_stats() -> dict[str, Any]:
        """Breakdowns, total contract value, recent sign-ups and renewals."""
        customers = SupabaseClient.fetch_all(TABLE)

        now = utc_now()
        thirty_days_ago = parse_datetime(days_from_now(-30))
        ninety_days_ahead = parse_datetime(days_from_now(90))

        recent = 0
        renewals = 0
        for customer in customers:
            since = parse_datetime(customer.get("customerSince"))
            if since and since >= thirty_days_ago:
                recent += 1
            renewal = parse_datetime(customer.get("contractRenewalDate"))
            if renewal and now <= renewal <= ninety_days_ahead:
                renewals += 1

        return {
            "totalCustomers": len(customers),
            "statusBreakdown": dict(Counter(c.get("status") for c in customers)),
            "industryBreakdown": dict(Counter(c.get("industry") for c in customers)),
            "sizeBreakdown": dict(Counter(c.get("size") for c in customers)),
            "totalContractValue": sum(c.get("contractValue") or 0 for c in customers),
            "recentCustomersCount": recent,
            "upcomingRenewalsCount": renewals,
        }
