"""
Bitcoin Scripts - Script Derivation Capabilities

Three composable behaviours for turning a public key or a lock script into
concrete scripts for a requested category. `LockScript` and public key types
implement them; the category stays a plain enum value.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from .category import Category

if TYPE_CHECKING:
    from .script_set import ScriptSet
    from .types import LockScript, PubkeyScript, SigScript, Witness


class ToLockScript(ABC):
    """Conversion into a `LockScript` for a given category."""

    @abstractmethod
    def to_lock_script(self, category: Category) -> 'LockScript':
        pass


class ToPubkeyScript(ABC):
    """Conversion into a `scriptPubkey` for a given category."""

    @abstractmethod
    def to_pubkey_script(self, category: Category) -> 'PubkeyScript':
        pass


class ToScripts(ToPubkeyScript):
    """Generation of the full output + input script set."""

    def to_scripts(self, category: Category) -> 'ScriptSet':
        """
        Produce the output script together with the matching input scripts.

        Args:
            category: Commitment strategy

        Returns:
            ScriptSet with pubkey script, sig script and optional witness
        """
        from .script_set import ScriptSet

        return ScriptSet(
            pubkey_script=self.to_pubkey_script(category),
            sig_script=self.to_sig_script(category),
            witness=self.to_witness(category),
        )

    @abstractmethod
    def to_sig_script(self, category: Category) -> 'SigScript':
        pass

    @abstractmethod
    def to_witness(self, category: Category) -> Optional['Witness']:
        pass
