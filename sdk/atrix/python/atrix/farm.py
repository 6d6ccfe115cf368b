"""Instruction builders that fill account lists from decoded state.

These derive the staker and harvester PDAs for an authority and pull the
farm, crop and pool token accounts out of already-decoded accounts, so a
caller only supplies its own wallet and token accounts.
"""

from __future__ import annotations

from dataclasses import dataclass

from solders.instruction import Instruction  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from atrix.config import (
    FARM_PROGRAM_ID,
    POOL_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    SYSVAR_CLOCK_ID,
    SYSVAR_RENT_ID,
    TOKEN_PROGRAM_ID,
)
from atrix.instructions import build_instruction
from atrix.pda import derive_harvester_pda, derive_staker_pda
from atrix.state import CropAccount, FarmAccount, PoolAccount

_FARM = Pubkey.from_string(FARM_PROGRAM_ID)
_POOL = Pubkey.from_string(POOL_PROGRAM_ID)
_SYSTEM_PROGRAM = Pubkey.from_string(SYSTEM_PROGRAM_ID)
_TOKEN_PROGRAM = Pubkey.from_string(TOKEN_PROGRAM_ID)
_CLOCK = Pubkey.from_string(SYSVAR_CLOCK_ID)
_RENT = Pubkey.from_string(SYSVAR_RENT_ID)


@dataclass(frozen=True)
class CropHandle:
    """A crop's address, its decoded state, and the user's reward account."""

    key: Pubkey
    crop: CropAccount
    user_reward_token_account: Pubkey


def create_staker(
    farm_key: Pubkey, authority: Pubkey, program_id: Pubkey = _FARM
) -> Instruction:
    staker, bump = derive_staker_pda(farm_key, authority, program_id)
    return build_instruction(
        "create_staker",
        {
            "farm_account": farm_key,
            "staker_account": staker,
            "authority": authority,
            "system_program": _SYSTEM_PROGRAM,
            "rent": _RENT,
        },
        program_id=program_id,
        staker_bump=bump,
    )


def create_harvester(
    crop_key: Pubkey, authority: Pubkey, program_id: Pubkey = _FARM
) -> Instruction:
    harvester, bump = derive_harvester_pda(crop_key, authority, program_id)
    return build_instruction(
        "create_harvester",
        {
            "crop_account": crop_key,
            "harvester_account": harvester,
            "authority": authority,
            "system_program": _SYSTEM_PROGRAM,
            "rent": _RENT,
        },
        program_id=program_id,
        harvester_bump=bump,
    )


def _crop_accounts(
    handle: CropHandle, authority: Pubkey, program_id: Pubkey, suffix: str
) -> dict[str, Pubkey]:
    harvester, _ = derive_harvester_pda(handle.key, authority, program_id)
    return {
        f"crop{suffix}_account": handle.key,
        f"crop{suffix}_reward_token_account": handle.crop.crop_reward_token_account,
        f"harvester{suffix}_account": harvester,
        f"user_reward{suffix}_token_account": handle.user_reward_token_account,
    }


def _farm_accounts(
    farm_key: Pubkey,
    authority: Pubkey,
    crops: tuple[CropHandle, ...],
    program_id: Pubkey,
) -> dict[str, Pubkey]:
    staker, _ = derive_staker_pda(farm_key, authority, program_id)
    accounts = {
        "farm_account": farm_key,
        "staker_account": staker,
        "authority": authority,
        "token_program": _TOKEN_PROGRAM,
        "clock": _CLOCK,
    }
    for i, handle in enumerate(crops):
        accounts.update(
            _crop_accounts(handle, authority, program_id, "" if i == 0 else f"_{i + 1}")
        )
    return accounts


def _staking(
    name: str,
    farm_key: Pubkey,
    farm: FarmAccount,
    crops: tuple[CropHandle, ...],
    authority: Pubkey,
    user_stake_token_account: Pubkey,
    amount: int,
    program_id: Pubkey,
) -> Instruction:
    accounts = _farm_accounts(farm_key, authority, crops, program_id)
    accounts["farm_stake_token_account"] = farm.farm_stake_token_account
    accounts["user_stake_token_account"] = user_stake_token_account
    return build_instruction(name, accounts, program_id=program_id, amount=amount)


def stake(
    farm_key: Pubkey,
    farm: FarmAccount,
    crop: CropHandle,
    authority: Pubkey,
    user_stake_token_account: Pubkey,
    amount: int,
    program_id: Pubkey = _FARM,
) -> Instruction:
    return _staking(
        "stake", farm_key, farm, (crop,), authority,
        user_stake_token_account, amount, program_id,
    )


def unstake(
    farm_key: Pubkey,
    farm: FarmAccount,
    crop: CropHandle,
    authority: Pubkey,
    user_stake_token_account: Pubkey,
    amount: int,
    program_id: Pubkey = _FARM,
) -> Instruction:
    return _staking(
        "unstake", farm_key, farm, (crop,), authority,
        user_stake_token_account, amount, program_id,
    )


def stake_dual_crop(
    farm_key: Pubkey,
    farm: FarmAccount,
    crop: CropHandle,
    crop_2: CropHandle,
    authority: Pubkey,
    user_stake_token_account: Pubkey,
    amount: int,
    program_id: Pubkey = _FARM,
) -> Instruction:
    return _staking(
        "stake_dual_crop", farm_key, farm, (crop, crop_2), authority,
        user_stake_token_account, amount, program_id,
    )


def unstake_dual_crop(
    farm_key: Pubkey,
    farm: FarmAccount,
    crop: CropHandle,
    crop_2: CropHandle,
    authority: Pubkey,
    user_stake_token_account: Pubkey,
    amount: int,
    program_id: Pubkey = _FARM,
) -> Instruction:
    return _staking(
        "unstake_dual_crop", farm_key, farm, (crop, crop_2), authority,
        user_stake_token_account, amount, program_id,
    )


def claim(
    farm_key: Pubkey,
    crop: CropHandle,
    authority: Pubkey,
    program_id: Pubkey = _FARM,
) -> Instruction:
    accounts = _farm_accounts(farm_key, authority, (crop,), program_id)
    return build_instruction("claim", accounts, program_id=program_id)


def claim_dual_crop(
    farm_key: Pubkey,
    crop: CropHandle,
    crop_2: CropHandle,
    authority: Pubkey,
    program_id: Pubkey = _FARM,
) -> Instruction:
    accounts = _farm_accounts(farm_key, authority, (crop, crop_2), program_id)
    return build_instruction("claim_dual_crop", accounts, program_id=program_id)


def _liquidity_accounts(
    protocol_key: Pubkey,
    pool_key: Pubkey,
    pool: PoolAccount,
    user_authority: Pubkey,
    user_coin_account: Pubkey,
    user_pc_account: Pubkey,
    user_lp_account: Pubkey,
) -> dict[str, Pubkey]:
    return {
        "protocol_account": protocol_key,
        "pool_account": pool_key,
        "pool_coin_account": pool.pool_coin_account,
        "pool_pc_account": pool.pool_pc_account,
        "lp_mint": pool.lp_mint,
        "user_coin_account": user_coin_account,
        "user_pc_account": user_pc_account,
        "user_lp_account": user_lp_account,
        "user_authority": user_authority,
        "token_program": _TOKEN_PROGRAM,
    }


def deposit(
    protocol_key: Pubkey,
    pool_key: Pubkey,
    pool: PoolAccount,
    user_authority: Pubkey,
    user_coin_account: Pubkey,
    user_pc_account: Pubkey,
    user_lp_account: Pubkey,
    coin_amount: int,
    pc_amount: int,
    program_id: Pubkey = _POOL,
) -> Instruction:
    accounts = _liquidity_accounts(
        protocol_key, pool_key, pool, user_authority,
        user_coin_account, user_pc_account, user_lp_account,
    )
    return build_instruction(
        "deposit",
        accounts,
        program_id=program_id,
        coin_amount=coin_amount,
        pc_amount=pc_amount,
    )


def withdraw(
    protocol_key: Pubkey,
    pool_key: Pubkey,
    pool: PoolAccount,
    user_authority: Pubkey,
    user_coin_account: Pubkey,
    user_pc_account: Pubkey,
    user_lp_account: Pubkey,
    lp_amount: int,
    program_id: Pubkey = _POOL,
) -> Instruction:
    accounts = _liquidity_accounts(
        protocol_key, pool_key, pool, user_authority,
        user_coin_account, user_pc_account, user_lp_account,
    )
    return build_instruction(
        "withdraw", accounts, program_id=program_id, lp_amount=lp_amount
    )
