import base58

from tokensale.ledger.exception import InvalidAddress
from tokensale.ledger.types import ADDRESS_LEN, Address

ADDRESS_VERSION_BYTE = b"\x17"


def decode_address(address_b58: str) -> Address:
    """Decode a base58check address into its 20-byte script hash.

    :raises InvalidAddress: if the checksum, version byte or length is wrong
    """
    try:
        payload = base58.b58decode_check(address_b58)
    except ValueError as e:
        raise InvalidAddress(f"Invalid base58 address: {address_b58}") from e
    if len(payload) != ADDRESS_LEN + 1 or payload[:1] != ADDRESS_VERSION_BYTE:
        raise InvalidAddress(f"Invalid address payload: {address_b58}")
    return Address(payload[1:])


def get_address_b58_from_script_hash(script_hash: bytes) -> str:
    if len(script_hash) != ADDRESS_LEN:
        raise InvalidAddress("script hash must have 20 bytes")
    return base58.b58encode_check(ADDRESS_VERSION_BYTE + script_hash).decode("ascii")


def parse_address(value: str | bytes) -> Address:
    """Accept raw bytes, a 40-char hex string or a base58 address."""
    if isinstance(value, bytes):
        if len(value) != ADDRESS_LEN:
            raise InvalidAddress(f"address must have {ADDRESS_LEN} bytes, got {len(value)}")
        return Address(value)
    if len(value) == ADDRESS_LEN * 2:
        try:
            return Address(bytes.fromhex(value))
        except ValueError:
            pass
    return decode_address(value)
