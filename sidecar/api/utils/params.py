import re
from substrateinterface.utils.ss58 import is_valid_ss58_address

from sidecar.base.errors import InvalidParameter

PUBLIC_KEY_PATTERN = re.compile(r'^0x[0-9a-fA-F]{64}$')


def validate_address(address: str, name: str = "address") -> str:
    """Accept an SS58 address or a hex-encoded 32 byte public key, reject anything else."""
    if PUBLIC_KEY_PATTERN.match(address):
        return address

    try:
        valid = is_valid_ss58_address(address)
    except Exception:
        valid = False

    if not valid:
        raise InvalidParameter(f"Invalid {name}: {address}")
    return address
