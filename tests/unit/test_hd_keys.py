"""
Tests for keys, BIP32 derivation and BIP39 seeds.
"""

import pytest
from coincurve.context import Context

from bitcoin_hd.exceptions import DerivationError, IndexOutOfRangeError, InvalidKeyError
from bitcoin_hd.index import (
    BIP32_HARDENED_OFFSET,
    HardenedIndex,
    UnhardenedIndex,
    format_derivation_path,
    parse_derivation_path,
)
from bitcoin_hd.keys import PrivateKey, PublicKey
from bitcoin_hd.seed import (
    generate_mnemonic,
    get_standard_derivation_path,
    mnemonic_to_seed,
)
from bitcoin_hd.xkey import ExtendedKey

from tests.vectors import (
    ACCOUNT_CHILD_1_XPUB,
    ACCOUNT_XPUB,
    BIP39_MNEMONIC,
    BIP39_SEED,
    G_COMPRESSED,
    G_UNCOMPRESSED,
    MASTER_FINGERPRINT,
    MASTER_XPRV,
    MASTER_XPUB,
)


class TestPrivateKey:
    """Test private key validation."""

    def test_random_key(self):
        key = PrivateKey()
        assert len(key.bytes) == 32
        assert key != PrivateKey()

    @pytest.mark.parametrize("data", [b'', b'\x01' * 31, b'\x00' * 32, b'\xff' * 32])
    def test_invalid_key(self, data):
        with pytest.raises(InvalidKeyError):
            PrivateKey(data)

    def test_public_key(self):
        key = PrivateKey((1).to_bytes(32, 'big'))
        assert key.public_key().hex == G_COMPRESSED
        assert key.public_key(compressed=False).hex == G_UNCOMPRESSED

    def test_repr_hides_secret(self):
        key = PrivateKey((1).to_bytes(32, 'big'))
        assert key.hex not in repr(key)


class TestPublicKey:
    """Test public key forms."""

    def test_keeps_serialization_form(self):
        assert PublicKey(bytes.fromhex(G_COMPRESSED)).compressed
        assert not PublicKey(bytes.fromhex(G_UNCOMPRESSED)).compressed
        assert PublicKey(bytes.fromhex(G_UNCOMPRESSED)).compressed_bytes.hex() == G_COMPRESSED

    def test_equality_by_serialized_form(self, generator_key):
        assert generator_key == PublicKey.from_hex(G_COMPRESSED)
        assert generator_key != PublicKey.from_hex(G_UNCOMPRESSED)
        assert str(generator_key) == G_COMPRESSED

    @pytest.mark.parametrize("data", [b'\x02' * 32, b'\x05' + b'\x01' * 32])
    def test_invalid_key(self, data):
        with pytest.raises(InvalidKeyError):
            PublicKey(data)

    def test_invalid_hex(self):
        with pytest.raises(InvalidKeyError):
            PublicKey.from_hex('zz')

    def test_combine(self, generator_key):
        doubled = generator_key.combine(generator_key)
        assert doubled == PrivateKey((2).to_bytes(32, 'big')).public_key()


class TestIndexes:
    """Test derivation index ranges and path notation."""

    def test_unhardened_range(self):
        assert UnhardenedIndex(0) == 0
        assert UnhardenedIndex(BIP32_HARDENED_OFFSET - 1) == BIP32_HARDENED_OFFSET - 1

    @pytest.mark.parametrize("value", [-1, BIP32_HARDENED_OFFSET, True, 1.0])
    def test_unhardened_out_of_range(self, value):
        with pytest.raises(IndexOutOfRangeError):
            UnhardenedIndex(value)

    def test_hardened_index(self):
        index = HardenedIndex.from_ordinal(44)
        assert index == BIP32_HARDENED_OFFSET + 44
        assert index.ordinal == 44
        assert str(index) == '44h'
        with pytest.raises(IndexOutOfRangeError):
            HardenedIndex(5)

    def test_parse_path(self):
        assert parse_derivation_path("m/84'/0h/1") == [
            BIP32_HARDENED_OFFSET + 84, BIP32_HARDENED_OFFSET, 1
        ]
        assert parse_derivation_path("0/1") == [0, 1]
        assert parse_derivation_path("m") == []

    def test_parse_invalid_path(self):
        with pytest.raises(DerivationError):
            parse_derivation_path("m/x")
        with pytest.raises(IndexOutOfRangeError):
            parse_derivation_path("m/2147483648")

    def test_format_path(self):
        path = parse_derivation_path("m/84'/0'/0'/0/5")
        assert format_derivation_path(path) == "m/84h/0h/0h/0/5"
        assert format_derivation_path(path[:1], 'd34db33f') == "d34db33f/84h"


class TestExtendedKey:
    """Test BIP32 test vector 1."""

    def test_master_key(self, master_key):
        assert master_key.to_xpub() == MASTER_XPUB
        assert master_key.to_xprv() == MASTER_XPRV
        assert master_key.fingerprint().hex() == MASTER_FINGERPRINT

    def test_hardened_child(self, master_key):
        child = master_key.derive_path("m/0h")
        assert child.to_xpub() == ACCOUNT_XPUB
        assert child.parent_fingerprint.hex() == MASTER_FINGERPRINT

    def test_public_derivation_matches_private(self, master_key, account_xpub):
        private_child = master_key.derive_path("m/0'/1")
        public_child = account_xpub.derive_child(1)

        assert public_child.to_xpub() == ACCOUNT_CHILD_1_XPUB
        assert private_child.to_xpub() == ACCOUNT_CHILD_1_XPUB
        assert private_child.neuter() == public_child

    def test_custom_context(self, account_xpub):
        child = account_xpub.derive_child(1, Context())
        assert child.to_xpub() == ACCOUNT_CHILD_1_XPUB

    def test_hardened_from_public(self, account_xpub):
        with pytest.raises(DerivationError):
            account_xpub.derive_child(BIP32_HARDENED_OFFSET)

    def test_index_out_of_range(self, account_xpub):
        with pytest.raises(IndexOutOfRangeError):
            account_xpub.derive_child(2 ** 32)

    def test_string_round_trip(self, master_key):
        assert ExtendedKey.from_string(MASTER_XPRV) == master_key
        assert ExtendedKey.from_string(MASTER_XPUB) == master_key.neuter()
        assert not ExtendedKey.from_string(MASTER_XPUB).is_private

    def test_xpub_has_no_xprv(self, account_xpub):
        with pytest.raises(InvalidKeyError):
            account_xpub.to_xprv()

    @pytest.mark.parametrize("encoded", [
        '',
        'not-base58-0OIl',
        MASTER_XPUB[:-1] + ('9' if MASTER_XPUB[-1] != '9' else '8'),
        'xpub661MyMwAqRbcF',
    ])
    def test_from_invalid_string(self, encoded):
        with pytest.raises(InvalidKeyError):
            ExtendedKey.from_string(encoded)


class TestMnemonic:
    """Test BIP39 helpers."""

    def test_seed_vector(self):
        assert mnemonic_to_seed(BIP39_MNEMONIC, "TREZOR").hex() == BIP39_SEED

    def test_invalid_mnemonic(self):
        with pytest.raises(DerivationError):
            mnemonic_to_seed(' '.join(['abandon'] * 12))

    def test_generate(self):
        assert len(generate_mnemonic().split()) == 12
        assert len(generate_mnemonic(256).split()) == 24
        with pytest.raises(DerivationError):
            generate_mnemonic(100)

    def test_standard_paths(self):
        assert get_standard_derivation_path('native_segwit') == "m/84'/0'/0'"
        with pytest.raises(DerivationError):
            get_standard_derivation_path('taproot')
