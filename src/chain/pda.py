"""Program-derived address helpers."""

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from src.chain.constants import METADATA_PROGRAM_ID

METADATA_SEED = b"metadata"


def derive_metadata_address(mint: str) -> str:
    """Derive the Metaplex metadata account for a mint.

    Seeds: ["metadata", metadata program id, mint] under the metadata program.
    Raises if ``mint`` is not a valid base58 public key.
    """
    program = Pubkey.from_string(METADATA_PROGRAM_ID)
    mint_key = Pubkey.from_string(mint)
    pda, _bump = Pubkey.find_program_address(
        [METADATA_SEED, bytes(program), bytes(mint_key)],
        program,
    )
    return str(pda)
