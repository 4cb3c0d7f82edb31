from fastapi import Depends, FastAPI, HTTPException, Response, status
from fastapi.middleware.cors import CORSMiddleware
from typing import Any, Dict, List
import logging

from config import API_HOST, API_PORT, configure_logging
from exceptions import SettleUpError
from group_store import GroupStore
from models import (
    Expense,
    ExpenseCreate,
    Group,
    GroupCreate,
    GroupUpdate,
    SettlementResult,
    ShareResponse,
)
from settlement_optimizer import compute_settlements
from share_summary import build_share_text

# Configure logging
configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="SettleUp API",
    description="Track shared group expenses and work out who owes whom",
    version="1.0.0"
)

# CORS middleware to allow frontend connections
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Single process store; swap via dependency_overrides in tests
_store = GroupStore()


def get_store() -> GroupStore:
    return _store


def _http_error(e: SettleUpError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.detail)


# ===== API ENDPOINTS =====
@app.get("/")
async def root():
    return {"message": "SettleUp API"}


@app.post("/groups/", response_model=Group, status_code=status.HTTP_201_CREATED)
async def create_group(group: GroupCreate, store: GroupStore = Depends(get_store)):
    """Create a new group"""
    try:
        return store.create_group(group.name, group.members)
    except SettleUpError as e:
        raise _http_error(e)


@app.get("/groups/", response_model=List[Group])
async def list_groups(store: GroupStore = Depends(get_store)):
    """List all groups"""
    return store.list_groups()


@app.post("/groups/import", response_model=Group)
async def import_group(data: Dict[str, Any], response: Response, store: GroupStore = Depends(get_store)):
    """Add a group shared by another member; existing groups are kept as they are"""
    try:
        group, created = store.import_group(data)
    except SettleUpError as e:
        raise _http_error(e)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return group


@app.get("/groups/{group_id}", response_model=Group)
async def get_group(group_id: str, store: GroupStore = Depends(get_store)):
    """Get group details"""
    try:
        return store.get_group(group_id)
    except SettleUpError as e:
        raise _http_error(e)


@app.put("/groups/{group_id}", response_model=Group)
async def update_group(group_id: str, group: GroupUpdate, store: GroupStore = Depends(get_store)):
    """Rename a group or change its members"""
    try:
        return store.update_group(group_id, group.name, group.members)
    except SettleUpError as e:
        raise _http_error(e)


@app.delete("/groups/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(group_id: str, store: GroupStore = Depends(get_store)):
    """Delete a group and its expenses"""
    try:
        store.delete_group(group_id)
    except SettleUpError as e:
        raise _http_error(e)


@app.post("/groups/{group_id}/expenses", response_model=Expense, status_code=status.HTTP_201_CREATED)
async def create_expense(group_id: str, expense: ExpenseCreate, store: GroupStore = Depends(get_store)):
    """Add an expense to a group"""
    try:
        return store.add_expense(group_id, **expense.model_dump())
    except SettleUpError as e:
        raise _http_error(e)


@app.put("/groups/{group_id}/expenses/{expense_id}", response_model=Expense)
async def update_expense(
    group_id: str, expense_id: str, expense: ExpenseCreate, store: GroupStore = Depends(get_store)
):
    """Edit an existing expense"""
    try:
        return store.update_expense(group_id, expense_id, **expense.model_dump())
    except SettleUpError as e:
        raise _http_error(e)


@app.delete("/groups/{group_id}/expenses/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(group_id: str, expense_id: str, store: GroupStore = Depends(get_store)):
    """Remove an expense from a group"""
    try:
        store.delete_expense(group_id, expense_id)
    except SettleUpError as e:
        raise _http_error(e)


@app.get("/groups/{group_id}/settlements", response_model=SettlementResult)
async def calculate_settlements(group_id: str, store: GroupStore = Depends(get_store)):
    """Calculate optimal settlements for a group"""
    try:
        group = store.get_group(group_id)
    except SettleUpError as e:
        raise _http_error(e)
    return compute_settlements(group)


@app.get("/groups/{group_id}/share", response_model=ShareResponse)
async def share_group(group_id: str, store: GroupStore = Depends(get_store)):
    """Share text plus a snapshot another member can import"""
    try:
        group = store.get_group(group_id)
    except SettleUpError as e:
        raise _http_error(e)

    result = compute_settlements(group)
    return {
        "text": build_share_text(group, result),
        "group": store.export_group(group_id),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=API_HOST, port=API_PORT)
