from sidecar.chains_config.controller_config import ControllerConfig, ControllerOptions

# Used for any runtime without its own declaration. Chains without deterministic
# finality are assumed, so `at` defaults to the best head.
default_controllers = ControllerConfig(
    controllers=[
        'AccountsAssets',
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
    options=ControllerOptions(finalizes=False),
)
