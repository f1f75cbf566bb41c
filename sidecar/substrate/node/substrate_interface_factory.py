from sidecar.base.enhanced_logging import ErrorContextManager, classify_error
from sidecar.substrate import Network, networks
from substrateinterface import SubstrateInterface


class SubstrateInterfaceFactory:
    """
    Factory class for creating SubstrateInterface instances based on network type.
    Relay chains, asset hubs and standalone chains share one configuration today,
    parachains that need a custom type registry get their own branch.
    """

    _error_ctx = ErrorContextManager("substrate-interface-factory")

    @staticmethod
    def create_substrate_interface(network: str, node_ws_url: str) -> SubstrateInterface:
        """
        Create a SubstrateInterface instance based on the network type.

        Args:
            network: The network identifier (e.g., 'polkadot', 'statemint')
            node_ws_url: The WebSocket URL for the node

        Returns:
            SubstrateInterface: Configured for the specified network

        Raises:
            ValueError: If the network is not supported
        """
        network = network.lower()

        if network not in networks:
            error = ValueError(f"Unsupported network: {network}")
            SubstrateInterfaceFactory._error_ctx.log_error(
                "Unsupported network configuration",
                error,
                network=network,
                endpoint=node_ws_url,
                error_category="validation_error",
                supported_networks=networks
            )
            raise error

        if network == Network.CRUST.value:
            return SubstrateInterfaceFactory._create_interface(network, node_ws_url, use_remote_preset=False)
        return SubstrateInterfaceFactory._create_interface(network, node_ws_url, use_remote_preset=True)

    @staticmethod
    def _create_interface(network: str, node_ws_url: str, use_remote_preset: bool) -> SubstrateInterface:
        try:
            return SubstrateInterface(
                url=node_ws_url,
                use_remote_preset=use_remote_preset,
                cache_region=None
            )
        except Exception as e:
            SubstrateInterfaceFactory._error_ctx.log_error(
                f"Failed to create {network} SubstrateInterface",
                e,
                network=network,
                endpoint=node_ws_url,
                error_category=classify_error(e),
                interface_config={
                    "use_remote_preset": use_remote_preset,
                    "cache_region": None
                }
            )
            raise RuntimeError(f"Failed to create {network} SubstrateInterface: {e}")
