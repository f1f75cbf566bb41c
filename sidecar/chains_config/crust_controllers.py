from sidecar.chains_config.controller_config import ControllerConfig, ControllerOptions

# Controllers for Crust
crust_controllers = ControllerConfig(
    controllers=[
        'AccountsBalanceInfo',
        'AccountsValidate',
        'Blocks',
        'BlocksExtrinsics',
        'NodeNetwork',
        'NodeTransactionPool',
        'NodeVersion',
        'PalletsStorage',
        'RuntimeCode',
        'RuntimeMetadata',
        'RuntimeSpec',
        'TransactionDryRun',
        'TransactionFeeEstimate',
        'TransactionMaterial',
        'TransactionSubmit',
    ],
    options=ControllerOptions(
        finalizes=True,
        min_calc_fee_runtime=1,
    ),
)
