"""
Pytest configuration and fixtures for descriptor wallet tests.
"""

import pytest

from bitcoin_hd.keys import PrivateKey, PublicKey
from bitcoin_hd.xkey import ExtendedKey, seed_to_master_key
from bitcoin_scripts.builder import ScriptBuilder
from bitcoin_scripts.opcodes import ScriptOpcode
from bitcoin_scripts.types import LockScript
from descriptors.template import KeyTemplate, MultiSig, SingleSig

from tests.vectors import ACCOUNT_XPUB, BIP32_SEED, G_COMPRESSED, G_UNCOMPRESSED


@pytest.fixture
def master_key() -> ExtendedKey:
    """Master private key of BIP32 test vector 1."""
    return seed_to_master_key(BIP32_SEED)


@pytest.fixture
def account_xpub() -> ExtendedKey:
    """m/0H of BIP32 test vector 1, public only."""
    return ExtendedKey.from_string(ACCOUNT_XPUB)


@pytest.fixture
def generator_key() -> PublicKey:
    """Compressed public key of private key 1."""
    return PrivateKey((1).to_bytes(32, 'big')).public_key()


@pytest.fixture
def uncompressed_key() -> PublicKey:
    return PublicKey(bytes.fromhex(G_UNCOMPRESSED))


@pytest.fixture
def p2pk_lock_script() -> LockScript:
    """<G> OP_CHECKSIG"""
    return (ScriptBuilder()
            .push_slice(bytes.fromhex(G_COMPRESSED))
            .push_opcode(ScriptOpcode.OP_CHECKSIG)
            .into_script(LockScript))


@pytest.fixture
def single_sig_template(account_xpub) -> SingleSig:
    """Template deriving m/0H/* keys."""
    return SingleSig(account_xpub)


@pytest.fixture
def multisig_template(account_xpub) -> MultiSig:
    """1-of-2 over the m/0H/0/* and m/0H/1/* branches."""
    return MultiSig(1, (KeyTemplate(account_xpub, (0,)), KeyTemplate(account_xpub, (1,))))


# Test markers for different test categories
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "cli: mark test as exercising the command line interface"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# Pytest collection hooks
def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on test paths and names."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        if "cli" in item.name:
            item.add_marker(pytest.mark.cli)

        if "slow" in item.name or "large" in item.name:
            item.add_marker(pytest.mark.slow)
