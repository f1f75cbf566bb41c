import os
from enum import Enum
from dotenv import load_dotenv


class Network(Enum):
    POLKADOT = "polkadot"
    KUSAMA = "kusama"
    WESTEND = "westend"
    STATEMINT = "statemint"
    STATEMINE = "statemine"
    WESTMINT = "westmint"
    CRUST = "crust"


networks = [network.value for network in Network]


load_dotenv()


def get_substrate_node_url(network: str) -> str:
    network = network.lower()
    if network not in networks:
        raise ValueError(f"Unsupported network: {network}")

    node_ws_url = os.getenv(f"{network.upper()}_NODE_WS_URL")
    if not node_ws_url:
        raise ValueError(f"Node WebSocket URL not set for network: {network}. Please check your environment variables.")

    return node_ws_url
