"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from alter_ego.api.models import ProStatusRequest, PurchaseRequest

if TYPE_CHECKING:
    from alter_ego.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.post("/credits/purchases", dependencies=[Depends(require_admin)])
async def apply_purchase(body: PurchaseRequest, request: Request) -> dict[str, object]:
    """Apply an already-verified store purchase to the ledger."""
    container: AppContainer = request.app.state.container
    ledger = container.ledger
    if body.sku != ledger.pro_sku and body.sku not in ledger.credit_packs:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown sku"
        )
    added = ledger.purchase(body.sku)
    return {
        "credits_added": added,
        "credits": ledger.balance,
        "is_unlimited": ledger.is_unlimited,
    }


@router.put("/pro", dependencies=[Depends(require_admin)])
async def set_pro_status(body: ProStatusRequest, request: Request) -> dict[str, object]:
    """Turn unlimited generation on or off."""
    container: AppContainer = request.app.state.container
    container.ledger.set_unlimited(body.is_unlimited)
    return {"credits": container.ledger.balance, "is_unlimited": body.is_unlimited}
