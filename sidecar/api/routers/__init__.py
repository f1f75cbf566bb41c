from fastapi import APIRouter
from typing import Dict

from sidecar.api.routers import accounts_assets

# Controller name in the chain config -> router serving it
CONTROLLER_ROUTERS: Dict[str, APIRouter] = {
    'AccountsAssets': accounts_assets.router,
}
