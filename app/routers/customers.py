# =============================================================================
# app/routers/customers.py - Customer Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, ListParamsDep
from core.models.customer import CustomerCreate, CustomerUpdate
from core.services.customer_service import CustomerService
from lib.utils import list_envelope

router = APIRouter()


@router.get("/stats")
async def customer_stats(user: CurrentUser):
    """Status/industry/size breakdowns, contract value, sign-ups and renewals."""
    return {"success": True, "data": CustomerService.get_stats()}


@router.get("")
async def list_customers(
    user: CurrentUser,
    params: ListParamsDep,
    search: Annotated[str | None, Query(description="Matches company or contact name and email")] = None,
    industry: Annotated[str | None, Query()] = None,
    size: Annotated[str | None, Query()] = None,
    customer_status: Annotated[str | None, Query(alias="status")] = None,
    account_manager: Annotated[str | None, Query(alias="accountManager")] = None,
):
    customers, total = CustomerService.list_customers(
        page=params.page,
        limit=params.limit,
        search=search,
        industry=industry,
        size=size,
        status=customer_status,
        account_manager=account_manager,
        sort_by=params.sort_by,
        sort_order=params.sort_order,
    )
    return list_envelope(customers, total, params.page, params.limit)


@router.get("/{customer_id}")
async def get_customer(customer_id: str, user: CurrentUser):
    return {"success": True, "data": CustomerService.get_customer(customer_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_customer(request: CustomerCreate, user: CurrentUser):
    return {"success": True, "data": CustomerService.create_customer(request, user)}


@router.put("/{customer_id}")
async def update_customer(customer_id: str, request: CustomerUpdate, user: CurrentUser):
    return {"success": True, "data": CustomerService.update_customer(customer_id, request, user)}


@router.delete("/{customer_id}")
async def delete_customer(customer_id: str, user: CurrentUser):
    CustomerService.delete_customer(customer_id, user)
    return {"success": True, "message": "Customer deleted successfully"}
