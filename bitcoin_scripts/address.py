"""
Bitcoin Scripts - Address Rendering

Encoding of standard output script commitments into network addresses.
"""

from bitcoinlib.keys import Address

BASE58_SCRIPT_TYPES = ('p2pkh', 'p2sh')


def encode_address(hashed_data: bytes, script_type: str, network: str = 'bitcoin',
                   witver: int = 0) -> str:
    """
    Encode a hash (or witness program) into an address string.

    Args:
        hashed_data: Public key hash, script hash or witness program
        script_type: One of 'p2pkh', 'p2sh', 'p2wpkh', 'p2wsh', 'p2tr'
        network: bitcoinlib network name ('bitcoin', 'testnet', 'regtest', ...)
        witver: Witness version for segwit outputs

    Returns:
        Address string
    """
    encoding = 'base58' if script_type in BASE58_SCRIPT_TYPES else 'bech32'
    return Address(
        hashed_data=hashed_data,
        script_type=script_type,
        encoding=encoding,
        witver=witver,
        network=network,
    ).address
