"""
Bitcoin Scripts - Script Set

A complete set of scripts needed to create and spend a single output: the
output `scriptPubkey` plus the input `sigScript` and the optional witness.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .builder import ScriptBuilder
from .exceptions import ScriptParseError
from .types import PubkeyScript, SigScript, Witness

logger = logging.getLogger(__name__)


@dataclass
class ScriptSet:
    """
    Scripts produced for one output under one category.

    `witness` is None for legacy inputs. An empty `Witness` still counts as a
    witness being present.
    """
    pubkey_script: PubkeyScript = field(default_factory=PubkeyScript)
    sig_script: SigScript = field(default_factory=SigScript)
    witness: Optional[Witness] = None

    def has_witness(self) -> bool:
        """Whether the input spends through the witness structure."""
        return self.witness is not None

    def is_witness_sh(self) -> bool:
        """Whether this is a witness program nested in P2SH."""
        return not self.sig_script.is_empty() and self.has_witness()

    def transmutate(self, use_witness: bool) -> bool:
        """
        Move the input data between `sigScript` and the witness.

        Legacy inputs are converted by turning every data push of the
        `sigScript` into a witness stack element; non-push opcodes and a
        malformed trailing push are dropped. Witness inputs are converted by
        pushing every stack element into the `sigScript`.

        Args:
            use_witness: Target form of the input data

        Returns:
            True if the set was changed, False if it was already in the
            requested form or is a witness program nested in P2SH
        """
        if self.is_witness_sh():
            return False
        if self.has_witness() == use_witness:
            return False

        if use_witness:
            stack = []
            try:
                for instruction in self.sig_script.instructions():
                    if instruction.is_push:
                        stack.append(instruction.data)
            except ScriptParseError as e:
                logger.debug("Dropped malformed sigScript tail: %s", e)
            self.witness = Witness(stack)
            self.sig_script = SigScript()
            logger.debug("Moved %d sigScript pushes into witness", len(stack))
        else:
            builder = ScriptBuilder()
            for item in self.witness:
                builder.push_slice(item)
            self.sig_script = builder.into_script(SigScript)
            logger.debug("Moved %d witness elements into sigScript", len(self.witness))
            self.witness = None
        return True

    def __str__(self) -> str:
        witness = str(self.witness) if self.witness is not None else ""
        return f"{self.sig_script} {witness} {self.pubkey_script}"
