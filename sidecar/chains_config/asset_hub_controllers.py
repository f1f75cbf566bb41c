from sidecar.chains_config.controller_config import ControllerConfig, ControllerOptions

# Asset hub parachains carry the assets pallet
_ASSET_HUB_CONTROLLERS = [
    'AccountsAssets',
    'AccountsBalanceInfo',
    'AccountsValidate',
    'Blocks',
    'BlocksExtrinsics',
    'NodeNetwork',
    'NodeTransactionPool',
    'NodeVersion',
    'PalletsAssets',
    'PalletsStorage',
    'RuntimeCode',
    'RuntimeMetadata',
    'RuntimeSpec',
    'TransactionDryRun',
    'TransactionFeeEstimate',
    'TransactionMaterial',
    'TransactionSubmit',
]

statemint_controllers = ControllerConfig(
    controllers=_ASSET_HUB_CONTROLLERS,
    options=ControllerOptions(finalizes=True, min_calc_fee_runtime=601),
)

statemine_controllers = ControllerConfig(
    controllers=_ASSET_HUB_CONTROLLERS,
    options=ControllerOptions(finalizes=True, min_calc_fee_runtime=1),
)

westmint_controllers = ControllerConfig(
    controllers=_ASSET_HUB_CONTROLLERS,
    options=ControllerOptions(finalizes=True, min_calc_fee_runtime=1),
)
