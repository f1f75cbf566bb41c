from sidecar.chains_config.controller_config import ControllerConfig, ControllerOptions

_RELAY_CONTROLLERS = [
    'AccountsBalanceInfo',
    'AccountsStakingInfo',
    'AccountsStakingPayouts',
    'AccountsValidate',
    'AccountsVestingInfo',
    'Blocks',
    'BlocksExtrinsics',
    'BlocksTrace',
    'NodeNetwork',
    'NodeTransactionPool',
    'NodeVersion',
    'PalletsStakingProgress',
    'PalletsStorage',
    'Paras',
    'RuntimeCode',
    'RuntimeMetadata',
    'RuntimeSpec',
    'TransactionDryRun',
    'TransactionFeeEstimate',
    'TransactionMaterial',
    'TransactionSubmit',
]

polkadot_controllers = ControllerConfig(
    controllers=_RELAY_CONTROLLERS,
    options=ControllerOptions(finalizes=True, min_calc_fee_runtime=0),
)

kusama_controllers = ControllerConfig(
    controllers=_RELAY_CONTROLLERS,
    options=ControllerOptions(finalizes=True, min_calc_fee_runtime=1062),
)

westend_controllers = ControllerConfig(
    controllers=_RELAY_CONTROLLERS,
    options=ControllerOptions(finalizes=True, min_calc_fee_runtime=6),
)
