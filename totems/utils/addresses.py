import re

from totems.utils.exceptions import InvalidAddress

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


def is_valid_address(address) -> bool:
    return isinstance(address, str) and ADDRESS_PATTERN.match(address) is not None


def normalize_address(address) -> str:
    """Lowercase a 20-byte hex address, rejecting anything else"""
    if not is_valid_address(address):
        raise InvalidAddress(address)
    return address.lower()


def is_zero_address(address) -> bool:
    return address is None or normalize_address(address) == ZERO_ADDRESS
