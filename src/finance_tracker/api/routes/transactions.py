"""Transaction endpoints. Every route is scoped to the authenticated caller."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from finance_tracker.api.deps import get_current_user, get_transaction_service
from finance_tracker.models.user import User
from finance_tracker.schemas.base import MessageResponse
from finance_tracker.schemas.transaction import (
    CategoryStatsResponse,
    StatisticsResponse,
    SummaryResponse,
    TransactionCreate,
    TransactionListResult,
    TransactionResponse,
    TransactionUpdate,
)
from finance_tracker.services.transaction import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    TransactionService,
    build_filter,
)

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get(
    "",
    response_model=TransactionListResult,
    summary="List transactions with filters",
    description="""
    List the caller's transactions, newest first.

    ## Filters
    - **category**: one category, or `all`
    - **type**: `income`, `expense`, or `all`
    - **startDate**, **endDate**: inclusive date range, either end optional

    `summary` totals cover every transaction matching the filters, not just
    the returned page.
    """,
)
async def list_transactions(
    page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
    limit: Annotated[
        int, Query(ge=1, description=f"Items per page (at most {MAX_PAGE_SIZE})")
    ] = DEFAULT_PAGE_SIZE,
    category: Annotated[str | None, Query(description="Filter by category")] = None,
    type: Annotated[str | None, Query(description="income, expense or all")] = None,
    start_date: Annotated[
        date | None, Query(alias="startDate", description="Filter from date (inclusive)")
    ] = None,
    end_date: Annotated[
        date | None, Query(alias="endDate", description="Filter to date (inclusive)")
    ] = None,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionListResult:
    filters = build_filter(
        category=category, type=type, start_date=start_date, end_date=end_date
    )
    result = await service.list_transactions(
        current_user.id, filters, page=page, page_size=limit
    )

    return TransactionListResult(
        transactions=[TransactionResponse.model_validate(txn) for txn in result.items],
        current_page=result.page,
        total_pages=result.total_pages,
        total=result.total_count,
        summary=SummaryResponse(
            total_income=result.summary.total_income,
            total_expenses=result.summary.total_expenses,
            balance=result.summary.balance,
        ),
    )


@router.get(
    "/stats/summary",
    response_model=StatisticsResponse,
    summary="Income/expense statistics",
    description="Totals, transaction count and per-category breakdown for a date range.",
)
async def get_statistics(
    start_date: Annotated[
        date | None, Query(alias="startDate", description="Filter from date (inclusive)")
    ] = None,
    end_date: Annotated[
        date | None, Query(alias="endDate", description="Filter to date (inclusive)")
    ] = None,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> StatisticsResponse:
    stats = await service.get_statistics(current_user.id, start_date, end_date)
    return StatisticsResponse(
        total_income=stats.summary.total_income,
        total_expenses=stats.summary.total_expenses,
        balance=stats.summary.balance,
        transaction_count=stats.transaction_count,
        category_stats={
            category: CategoryStatsResponse(
                income=totals.income, expenses=totals.expenses, total=totals.total
            )
            for category, totals in stats.category_stats.items()
        },
    )


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Get a transaction",
    responses={404: {"description": "Transaction not found"}},
)
async def get_transaction(
    transaction_id: str,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionResponse:
    txn = await service.get_transaction(current_user.id, transaction_id)
    return TransactionResponse.model_validate(txn)


@router.post(
    "",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a transaction",
    responses={400: {"description": "Validation failed"}},
)
async def create_transaction(
    payload: TransactionCreate,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionResponse:
    txn = await service.create_transaction(
        current_user.id,
        title=payload.title,
        amount=payload.amount,
        category=payload.category,
        date=payload.date,
    )
    return TransactionResponse.model_validate(txn)


@router.put(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Update a transaction",
    responses={
        400: {"description": "Validation failed"},
        404: {"description": "Transaction not found"},
    },
)
async def update_transaction(
    transaction_id: str,
    payload: TransactionUpdate,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionResponse:
    txn = await service.update_transaction(
        current_user.id, transaction_id, payload.model_dump(exclude_unset=True)
    )
    return TransactionResponse.model_validate(txn)


@router.delete(
    "/{transaction_id}",
    response_model=MessageResponse,
    summary="Delete a transaction",
    responses={404: {"description": "Transaction not found"}},
)
async def delete_transaction(
    transaction_id: str,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> MessageResponse:
    await service.delete_transaction(current_user.id, transaction_id)
    return MessageResponse(message="Transaction deleted successfully")
