"""
Tests for the script wrapper types and output script templates.
"""

import pytest

from bitcoin_scripts.exceptions import ScriptError, ScriptParseError
from bitcoin_scripts.hashes import hash160, ripemd160, sha256
from bitcoin_scripts.types import (
    LockScript,
    PubkeyScript,
    RedeemScript,
    SigScript,
    Witness,
    WitnessProgram,
    WitnessScript,
)
from bitcoin_scripts.witness_version import WitnessVersion

from tests.vectors import G_COMPRESSED, G_HASH160

P2PK_SCRIPT = '21' + G_COMPRESSED + 'ac'
P2PK_WSCRIPT_HASH = '1863143c14c5166804bd19203356da136c985678cd4d27a1b8c6329604903262'


class TestWrappers:
    """Test the shared wrapper behaviour."""

    def test_pass_through_bytes(self):
        script = LockScript(b'\x51')
        assert bytes(script) == b'\x51'
        assert script.to_bytes() == b'\x51'
        assert script.as_inner() == b'\x51'
        assert len(script) == 1

    def test_hex_round_trip(self):
        script = PubkeyScript.from_hex(P2PK_SCRIPT)
        assert script.hex() == P2PK_SCRIPT
        assert repr(script) == f"PubkeyScript('{P2PK_SCRIPT}')"

    def test_equality_does_not_cross_types(self):
        assert LockScript(b'\x51') == LockScript(b'\x51')
        assert LockScript(b'\x51') != PubkeyScript(b'\x51')
        assert len({LockScript(b'\x51'), PubkeyScript(b'\x51'), LockScript(b'\x51')}) == 2

    def test_ordering(self):
        scripts = [LockScript(b'\x02'), LockScript(b'\x01')]
        assert sorted(scripts) == [LockScript(b'\x01'), LockScript(b'\x02')]

    def test_wrapper_cannot_be_rewrapped(self):
        """Moving between layers requires an explicit conversion."""
        with pytest.raises(TypeError):
            PubkeyScript(LockScript(b'\x51'))

    def test_non_bytes_rejected(self):
        with pytest.raises(TypeError):
            LockScript('51')

    def test_immutable(self):
        script = LockScript(b'\x51')
        with pytest.raises(AttributeError):
            script._inner = b''

    def test_empty_default(self):
        assert SigScript().is_empty()
        assert PubkeyScript() == PubkeyScript(b'')

    def test_asm_display(self):
        script = PubkeyScript.p2pkh(bytes.fromhex(G_HASH160))
        assert str(script) == f"OP_DUP OP_HASH160 {G_HASH160} OP_EQUALVERIFY OP_CHECKSIG"


class TestPubkeyScript:
    """Test standard output script constructors and classifiers."""

    def setup_method(self):
        self.pubkey_hash = bytes.fromhex(G_HASH160)

    def test_p2pk(self):
        script = PubkeyScript.p2pk(bytes.fromhex(G_COMPRESSED))
        assert script.hex() == P2PK_SCRIPT
        assert script.is_p2pk()
        assert not script.is_p2pkh()
        assert script.address() is None

    def test_p2pkh(self):
        script = PubkeyScript.p2pkh(self.pubkey_hash)
        assert script.hex() == '76a914' + G_HASH160 + '88ac'
        assert script.is_p2pkh()
        assert script.witness_version() is None
        assert script.address() == '1BgGZ9tcN4rm9KBzDn7KprQz87SZ26SAMH'

    def test_p2sh(self):
        script = PubkeyScript.p2sh(self.pubkey_hash)
        assert script.hex() == 'a914' + G_HASH160 + '87'
        assert script.is_p2sh()
        assert script.address().startswith('3')

    def test_hash_length_checked(self):
        with pytest.raises(ScriptError):
            PubkeyScript.p2pkh(b'\x00' * 19)
        with pytest.raises(ScriptError):
            PubkeyScript.p2sh(b'\x00' * 32)

    def test_p2wpkh(self):
        script = PubkeyScript.p2wpkh(self.pubkey_hash)
        assert script.hex() == '0014' + G_HASH160
        assert script.is_witness_program()
        assert script.witness_version() == WitnessVersion.V0
        assert script.witness_program() == WitnessProgram(self.pubkey_hash)
        assert script.address() == 'bc1qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t4'

    def test_p2wsh(self):
        script = PubkeyScript.p2wsh(bytes.fromhex(P2PK_WSCRIPT_HASH))
        assert script.hex() == '0020' + P2PK_WSCRIPT_HASH
        assert script.address() == 'bc1qrp33g0q5c5txsp9arysrx4k6zdkfs4nce4xj0gdcccefvpysxf3qccfmv3'
        assert script.address('testnet') == 'tb1qrp33g0q5c5txsp9arysrx4k6zdkfs4nce4xj0gdcccefvpysxf3q0sl5k7'

    def test_v1_program(self):
        script = PubkeyScript.from_witness_program(WitnessVersion.V1, WitnessProgram(b'\x11' * 32))
        assert bytes(script)[:2] == b'\x51\x20'
        assert script.witness_version() == WitnessVersion.V1

    def test_witness_program_length_limits(self):
        with pytest.raises(ScriptError):
            PubkeyScript.from_witness_program(WitnessVersion.V2, WitnessProgram(b'\x01'))
        with pytest.raises(ScriptError):
            PubkeyScript.from_witness_program(WitnessVersion.V2, WitnessProgram(b'\x01' * 41))

    def test_not_a_witness_program(self):
        # length byte disagrees with the script length
        assert not PubkeyScript(bytes.fromhex('0015' + G_HASH160)).is_witness_program()
        # version opcode outside OP_0..OP_16
        assert not PubkeyScript(bytes.fromhex('4f14' + G_HASH160)).is_witness_program()

    def test_unknown_v0_program_has_no_address(self):
        script = PubkeyScript(bytes.fromhex('0018' + '00' * 24))
        assert script.witness_version() == WitnessVersion.V0
        assert script.address() is None

    def test_to_lock_script(self):
        script = PubkeyScript.from_hex(P2PK_SCRIPT)
        assert script.to_lock_script() == LockScript.from_hex(P2PK_SCRIPT)

    def test_to_lock_script_of_hash_commitment(self):
        for script in (PubkeyScript.p2pkh(self.pubkey_hash),
                       PubkeyScript.p2sh(self.pubkey_hash),
                       PubkeyScript.p2wpkh(self.pubkey_hash)):
            with pytest.raises(ScriptError):
                script.to_lock_script()


class TestScriptCommitments:
    """Test redeem and witness script hashing."""

    def test_redeem_script_hash(self):
        lock_script = LockScript.from_hex(P2PK_SCRIPT)
        redeem_script = RedeemScript.from_lock_script(lock_script)
        assert redeem_script.script_hash() == hash160(bytes(lock_script))
        assert redeem_script.to_p2sh() == PubkeyScript.p2sh(hash160(bytes(lock_script)))

    def test_witness_script_hash(self):
        witness_script = WitnessScript.from_hex(P2PK_SCRIPT)
        assert witness_script.script_hash().hex() == P2PK_WSCRIPT_HASH
        assert witness_script.script_hash() == sha256(bytes.fromhex(P2PK_SCRIPT))

    def test_witness_script_back_to_lock_script(self):
        witness_script = WitnessScript.from_hex(P2PK_SCRIPT)
        assert LockScript.from_witness_script(witness_script) == LockScript.from_hex(P2PK_SCRIPT)

    def test_witness_program_lengths(self):
        with pytest.raises(ScriptError):
            WitnessProgram.from_wpubkey_hash(b'\x00' * 32)
        with pytest.raises(ScriptError):
            WitnessProgram.from_wscript_hash(b'\x00' * 20)
        assert str(WitnessProgram.from_wpubkey_hash(b'\x00' * 20)) == '00' * 20


class TestWitness:
    """Test the witness stack type."""

    def test_serialize(self):
        witness = Witness([b'\x01', b''])
        assert witness.serialize() == b'\x02\x01\x01\x00'
        assert Witness.deserialize(witness.serialize()) == witness

    def test_trailing_data(self):
        with pytest.raises(ScriptParseError):
            Witness.deserialize(b'\x01\x01\x01\xff')

    def test_display(self):
        assert str(Witness([b'\x01', b'\xab\xcd'])) == "[\n01\nabcd\n]\n"

    def test_sequence_access(self):
        witness = Witness([b'\x01', b'\x02'])
        assert witness[1] == b'\x02'
        assert list(witness) == [b'\x01', b'\x02']
        assert witness.to_list() == [b'\x01', b'\x02']
        assert len(witness) == 2

    def test_bytes_are_not_a_stack(self):
        with pytest.raises(TypeError):
            Witness(b'\x01\x02')


class TestHashes:

    def test_known_digests(self):
        assert ripemd160(b'').hex() == '9c1185a5c5e9fc54612808977ee8f548b2258d31'
        assert sha256(b'').hex() == 'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'
        assert hash160(bytes.fromhex(G_COMPRESSED)).hex() == G_HASH160
