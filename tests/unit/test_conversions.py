"""
Tests for deriving category-specific scripts from lock scripts and keys.
"""

import pytest

from bitcoin_scripts.builder import ScriptBuilder
from bitcoin_scripts.category import Category
from bitcoin_scripts.exceptions import UncompressedKeyError, UnsupportedCategoryError
from bitcoin_scripts.hashes import hash160, sha256
from bitcoin_scripts.opcodes import ScriptOpcode
from bitcoin_scripts.script_set import ScriptSet
from bitcoin_scripts.types import LockScript, PubkeyScript, SigScript, Witness

from tests.vectors import G_COMPRESSED, G_HASH160

LOCK_SCRIPTS = [
    LockScript.from_hex('21' + G_COMPRESSED + 'ac'),
    ScriptBuilder().push_int(1).push_slice(bytes.fromhex(G_COMPRESSED)).push_int(1)
    .push_opcode(ScriptOpcode.OP_CHECKMULTISIG).into_script(LockScript),
    LockScript(b'\x51'),
]


def _single_push(sig_script: SigScript) -> bytes:
    instructions = list(sig_script.instructions())
    assert len(instructions) == 1 and instructions[0].is_push
    return instructions[0].data


class TestLockScriptConversions:

    @pytest.mark.parametrize("lock_script", LOCK_SCRIPTS)
    def test_bare(self, lock_script):
        script_set = lock_script.to_scripts(Category.BARE)
        assert bytes(script_set.pubkey_script) == bytes(lock_script)
        assert script_set.sig_script.is_empty()
        assert script_set.witness is None

    @pytest.mark.parametrize("lock_script", LOCK_SCRIPTS)
    def test_hashed_commits_to_redeem_script(self, lock_script):
        script_set = lock_script.to_scripts(Category.HASHED)
        redeem_script = _single_push(script_set.sig_script)

        assert redeem_script == bytes(lock_script)
        assert script_set.pubkey_script == PubkeyScript.p2sh(hash160(redeem_script))
        assert script_set.witness is None

    @pytest.mark.parametrize("lock_script", LOCK_SCRIPTS)
    def test_segwit_commits_to_witness_script(self, lock_script):
        script_set = lock_script.to_scripts(Category.SEGWIT)

        assert script_set.sig_script.is_empty()
        assert script_set.witness == Witness([bytes(lock_script)])
        assert script_set.pubkey_script.witness_program().to_bytes() == sha256(script_set.witness[-1])

    @pytest.mark.parametrize("lock_script", LOCK_SCRIPTS)
    def test_nested_commits_to_both(self, lock_script):
        script_set = lock_script.to_scripts(Category.NESTED)
        redeem_script = PubkeyScript(_single_push(script_set.sig_script))

        assert script_set.pubkey_script == PubkeyScript.p2sh(hash160(bytes(redeem_script)))
        assert redeem_script.witness_program().to_bytes() == sha256(script_set.witness[0])
        assert script_set.witness == Witness([bytes(lock_script)])

    def test_p2wsh_vector(self):
        script = LOCK_SCRIPTS[0].to_pubkey_script(Category.SEGWIT)
        assert script.address() == 'bc1qrp33g0q5c5txsp9arysrx4k6zdkfs4nce4xj0gdcccefvpysxf3qccfmv3'

    def test_hashes(self):
        lock_script = LOCK_SCRIPTS[0]
        assert lock_script.script_hash() == hash160(bytes(lock_script))
        assert lock_script.wscript_hash() == sha256(bytes(lock_script))

    @pytest.mark.parametrize("operation", ["to_pubkey_script", "to_sig_script", "to_witness", "to_scripts"])
    def test_taproot_unsupported(self, operation):
        with pytest.raises(UnsupportedCategoryError):
            getattr(LOCK_SCRIPTS[0], operation)(Category.TAPROOT)

    def test_taproot_error_is_not_implemented(self):
        with pytest.raises(NotImplementedError):
            LOCK_SCRIPTS[0].to_tap_script()


class TestKeyConversions:

    def test_bare(self, generator_key):
        assert generator_key.to_pubkey_script(Category.BARE).hex() == '21' + G_COMPRESSED + 'ac'
        assert generator_key.to_sig_script(Category.BARE).is_empty()
        assert generator_key.to_witness(Category.BARE) is None

    def test_hashed(self, generator_key):
        script_set = generator_key.to_scripts(Category.HASHED)
        assert script_set.pubkey_script.hex() == '76a914' + G_HASH160 + '88ac'
        assert _single_push(script_set.sig_script) == generator_key.bytes
        assert script_set.witness is None
        assert script_set.pubkey_script.address() == '1BgGZ9tcN4rm9KBzDn7KprQz87SZ26SAMH'

    def test_segwit(self, generator_key):
        script_set = generator_key.to_scripts(Category.SEGWIT)
        assert script_set.pubkey_script.hex() == '0014' + G_HASH160
        assert script_set.sig_script.is_empty()
        assert script_set.witness == Witness([generator_key.bytes])
        assert script_set.pubkey_script.address() == 'bc1qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t4'

    def test_nested(self, generator_key):
        script_set = generator_key.to_scripts(Category.NESTED)
        redeem_script = _single_push(script_set.sig_script)

        assert redeem_script.hex() == '0014' + G_HASH160
        assert script_set.pubkey_script == PubkeyScript.p2sh(hash160(redeem_script))
        assert script_set.witness == Witness([generator_key.bytes])
        assert script_set.pubkey_script.address().startswith('3')

    def test_lock_script_matches_pubkey_script(self, generator_key):
        for category in (Category.BARE, Category.HASHED, Category.NESTED, Category.SEGWIT):
            assert (bytes(generator_key.to_lock_script(category)) ==
                    bytes(generator_key.to_pubkey_script(category)))

    def test_to_scripts_returns_script_set(self, generator_key):
        assert isinstance(generator_key.to_scripts(Category.BARE), ScriptSet)

    def test_taproot_unsupported(self, generator_key):
        with pytest.raises(UnsupportedCategoryError):
            generator_key.to_lock_script(Category.TAPROOT)

    def test_uncompressed_legacy_outputs(self, uncompressed_key):
        assert len(bytes(uncompressed_key.to_pubkey_script(Category.BARE))) == 67
        assert uncompressed_key.to_pubkey_script(Category.HASHED).is_p2pkh()
        assert uncompressed_key.to_pubkey_script(Category.HASHED) != \
            PubkeyScript.p2pkh(bytes.fromhex(G_HASH160))

    @pytest.mark.parametrize("category", [Category.SEGWIT, Category.NESTED])
    def test_uncompressed_witness_outputs(self, uncompressed_key, category):
        with pytest.raises(UncompressedKeyError):
            uncompressed_key.to_lock_script(category)
        with pytest.raises(UncompressedKeyError):
            uncompressed_key.to_sig_script(category)
        with pytest.raises(UncompressedKeyError):
            uncompressed_key.to_witness(category)
