"""PDA derivation for Atrix farm program accounts."""

from typing import Optional, Sequence

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from atrix.config import FARM_PROGRAM_ID
from atrix.errors import InvalidSeedsError, NoValidBumpFoundError

SEED_FARM = b"atrix-farm"
SEED_CROP = b"atrix-farm-crop"
SEED_STAKER = b"atrix-farm-stake"
SEED_HARVESTER = b"atrix-farm-harvester"

# Message solders attaches to PubkeyError when a candidate lands on the curve.
_ON_CURVE = "Provided seeds do not result in a valid address"

_FARM_PROGRAM = Pubkey.from_string(FARM_PROGRAM_ID)


def _create_program_address(
    seeds: Sequence[bytes], program_id: Pubkey
) -> Optional[Pubkey]:
    """Return the address for seeds, or None if it is on the ed25519 curve."""
    try:
        return Pubkey.create_program_address(seeds, program_id)
    except Exception as exc:  # solders.PubkeyError has no public import path
        if type(exc).__name__ != "PubkeyError":
            raise
        if str(exc) == _ON_CURVE:
            return None
        raise InvalidSeedsError(str(exc)) from exc


def find_program_address(
    seeds: Sequence[bytes], program_id: Pubkey
) -> tuple[Pubkey, int]:
    """Return the off-curve address for seeds with the highest valid bump.

    Seed limits are enforced by solders and surface as InvalidSeedsError.
    Raises NoValidBumpFoundError if all 256 bump candidates land on the curve.
    """
    seeds = [bytes(s) for s in seeds]
    for bump in range(255, -1, -1):
        addr = _create_program_address([*seeds, bytes([bump])], program_id)
        if addr is not None:
            return addr, bump
    raise NoValidBumpFoundError(
        f"no viable bump seed for program {program_id}"
    )


def derive_farm_pda(
    base: Pubkey, program_id: Pubkey = _FARM_PROGRAM
) -> tuple[Pubkey, int]:
    return find_program_address([SEED_FARM, bytes(base)], program_id)


def derive_crop_pda(
    farm_key: Pubkey, reward_mint: Pubkey, program_id: Pubkey = _FARM_PROGRAM
) -> tuple[Pubkey, int]:
    return find_program_address(
        [SEED_CROP, bytes(farm_key), bytes(reward_mint)], program_id
    )


def derive_staker_pda(
    farm_key: Pubkey, authority: Pubkey, program_id: Pubkey = _FARM_PROGRAM
) -> tuple[Pubkey, int]:
    # Authority precedes the farm key in the seed list.
    return find_program_address(
        [SEED_STAKER, bytes(authority), bytes(farm_key)], program_id
    )


def derive_harvester_pda(
    crop_key: Pubkey, authority: Pubkey, program_id: Pubkey = _FARM_PROGRAM
) -> tuple[Pubkey, int]:
    return find_program_address(
        [SEED_HARVESTER, bytes(authority), bytes(crop_key)], program_id
    )
