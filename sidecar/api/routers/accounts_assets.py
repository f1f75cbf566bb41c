from typing import List, Optional
from fastapi import APIRouter, Query, Path, HTTPException, Request
from pydantic import NonNegativeInt

from sidecar.api.services.accounts_assets_service import AccountsAssetsService
from sidecar.api.utils.params import validate_address
from sidecar.api.utils.sanitize_numbers import sanitize_numbers
from sidecar.base.enhanced_logging import classify_error
from sidecar.base.errors import SidecarError

router = APIRouter(
    prefix="/accounts",
    tags=["accounts-assets"],
    responses={
        400: {"description": "Invalid request or assets pallet unavailable at the block"},
        500: {"description": "Internal server error"}
    }
)


def get_accounts_assets_service(request: Request) -> AccountsAssetsService:
    state = request.app.state
    return AccountsAssetsService(state.chain_state, executor=state.executor, metrics=state.storage_metrics)


@router.get(
    "/{account_id}/asset-balances",
    summary="Get Account Asset Balances",
    description=(
        "Returns the balances an account holds in the assets pallet at a given block.\n\n"
        "When no `assets` are given every asset with stored account balances is queried. "
        "Each entry reports the balance as a decimal string together with the frozen and "
        "sufficiency flags; all three are null when the account holds no record for the asset."
    ),
    response_description="Asset balances of the account and the block they were read at",
)
async def get_asset_balances(
        request: Request,
        account_id: str = Path(..., description="SS58 address of the account",
                               example="15oF4uVJwmo4TdGW7VfQxNLavjCXviqxT9S1MgbjMNHr6Sp5"),
        at: Optional[str] = Query(None, description="Block hash or height to query at. Defaults to the head"),
        assets: List[NonNegativeInt] = Query([], description="Asset ids to query, all assets when omitted", example=[1984])
):
    error_ctx = request.app.state.error_ctx
    try:
        validate_address(account_id, "account id")
        service = get_accounts_assets_service(request)
        snapshot = await service.resolve_snapshot(at)
        result = await service.fetch_asset_balances(snapshot, account_id, assets)
        return sanitize_numbers(result.to_dict())
    except SidecarError as e:
        error_ctx.log_rejection(str(e), account_id=account_id, at=at, assets=assets)
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except Exception as e:
        error_ctx.log_error(
            "Error fetching asset balances",
            e,
            account_id=account_id,
            at=at,
            assets=assets,
            error_category=classify_error(e)
        )
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@router.get(
    "/{account_id}/asset-approvals",
    summary="Get Account Asset Approval",
    description=(
        "Returns the allowance an account granted a delegate over one asset at a given block.\n\n"
        "Amount and deposit are null when no approval is stored."
    ),
    response_description="Approval amount and deposit and the block they were read at",
)
async def get_asset_approval(
        request: Request,
        account_id: str = Path(..., description="SS58 address of the owner",
                               example="15oF4uVJwmo4TdGW7VfQxNLavjCXviqxT9S1MgbjMNHr6Sp5"),
        asset_id: int = Query(..., alias="assetId", description="Asset id of the approval", ge=0),
        delegate: str = Query(..., description="SS58 address of the delegate"),
        at: Optional[str] = Query(None, description="Block hash or height to query at. Defaults to the head")
):
    error_ctx = request.app.state.error_ctx
    try:
        validate_address(account_id, "account id")
        validate_address(delegate, "delegate")
        service = get_accounts_assets_service(request)
        snapshot = await service.resolve_snapshot(at)
        result = await service.fetch_asset_approval(snapshot, account_id, asset_id, delegate)
        return sanitize_numbers(result.to_dict())
    except SidecarError as e:
        error_ctx.log_rejection(str(e), account_id=account_id, asset_id=asset_id, delegate=delegate, at=at)
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except Exception as e:
        error_ctx.log_error(
            "Error fetching asset approval",
            e,
            account_id=account_id,
            asset_id=asset_id,
            delegate=delegate,
            at=at,
            error_category=classify_error(e)
        )
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")
