"""Instruction builder tests: PDA derivation and account placement."""

import struct

import pytest
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from atrix import farm
from atrix.config import SYSTEM_PROGRAM_ID, SYSVAR_CLOCK_ID, TOKEN_PROGRAM_ID
from atrix.discriminator import DISCRIMINATORS
from atrix.instructions import get_layout
from atrix.pda import derive_harvester_pda, derive_staker_pda
from atrix.state import CropAccount, FarmAccount, PoolAccount

FARM_KEY = Pubkey.from_string("J55atXt8BnF99YUC4AmpHY2VuxZ6XbBTjL7dHaePid42")
CROP_KEY = Pubkey.from_string("GcAYkGrZx97u3wUVkjz4z74M2NZhBq3V7bWXmyadvdiC")
CROP_2_KEY = Pubkey.from_bytes(b"\x22" * 32)
AUTHORITY = Pubkey.from_string("AufL1ZuuAZoX7jBw8kECvjUYjfhWqZm13hbXeqnLMhFu")
USER_STAKE = Pubkey.from_bytes(b"\x30" * 32)
USER_REWARD = Pubkey.from_bytes(b"\x31" * 32)
USER_REWARD_2 = Pubkey.from_bytes(b"\x32" * 32)


def _key(n: int) -> Pubkey:
    return Pubkey.from_bytes(bytes([n]) * 32)


FARM = FarmAccount(
    base=_key(1),
    bump=255,
    state_mint=_key(2),
    farm_stake_token_account=_key(3),
    crop_accounts=[CROP_KEY, CROP_2_KEY, None, None],
    authority=_key(4),
)


def _crop(reward_ta: Pubkey) -> CropAccount:
    return CropAccount(
        bump=255,
        authority=_key(4),
        farm_account=FARM_KEY,
        reward_mint=_key(5),
        reward_amount_per_day=1,
        rewards_locked=False,
        crop_reward_token_account=reward_ta,
        accrued_reward_per_stake=0,
        last_reward_timestamp=0,
    )


CROP = farm.CropHandle(CROP_KEY, _crop(_key(6)), USER_REWARD)
CROP_2 = farm.CropHandle(CROP_2_KEY, _crop(_key(7)), USER_REWARD_2)


def _by_name(name: str, ix) -> dict[str, Pubkey]:
    return dict(zip(get_layout(name).account_names, (m.pubkey for m in ix.accounts)))


class TestCreate:
    def test_create_staker(self):
        ix = farm.create_staker(FARM_KEY, AUTHORITY)
        staker, bump = derive_staker_pda(FARM_KEY, AUTHORITY)
        accounts = _by_name("create_staker", ix)
        assert accounts["staker_account"] == staker
        assert accounts["farm_account"] == FARM_KEY
        assert accounts["system_program"] == Pubkey.from_string(SYSTEM_PROGRAM_ID)
        assert bytes(ix.data) == DISCRIMINATORS["create_staker"] + bytes([bump])

    def test_create_harvester(self):
        ix = farm.create_harvester(CROP_KEY, AUTHORITY)
        accounts = _by_name("create_harvester", ix)
        assert str(accounts["harvester_account"]) == (
            "DxHDqv8fABj56GHMa2PaSuou2NGWe2txXjTmjuC8o45J"
        )
        assert bytes(ix.data)[8] == 255
        assert ix.accounts[2].is_signer and ix.accounts[2].is_writable


class TestStaking:
    @pytest.mark.parametrize("builder", [farm.stake, farm.unstake])
    def test_single_crop(self, builder):
        ix = builder(FARM_KEY, FARM, CROP, AUTHORITY, USER_STAKE, 1_000_000)
        name = builder.__name__
        accounts = _by_name(name, ix)
        assert bytes(ix.data) == DISCRIMINATORS[name] + struct.pack("<Q", 1_000_000)
        assert accounts["farm_account"] == FARM_KEY
        assert accounts["farm_stake_token_account"] == _key(3)
        assert accounts["crop_account"] == CROP_KEY
        assert accounts["crop_reward_token_account"] == _key(6)
        assert accounts["staker_account"] == derive_staker_pda(FARM_KEY, AUTHORITY)[0]
        assert accounts["harvester_account"] == derive_harvester_pda(CROP_KEY, AUTHORITY)[0]
        assert accounts["user_stake_token_account"] == USER_STAKE
        assert accounts["user_reward_token_account"] == USER_REWARD
        assert accounts["authority"] == AUTHORITY
        assert accounts["token_program"] == Pubkey.from_string(TOKEN_PROGRAM_ID)
        assert accounts["clock"] == Pubkey.from_string(SYSVAR_CLOCK_ID)

    @pytest.mark.parametrize("builder", [farm.stake_dual_crop, farm.unstake_dual_crop])
    def test_dual_crop(self, builder):
        ix = builder(FARM_KEY, FARM, CROP, CROP_2, AUTHORITY, USER_STAKE, 7)
        accounts = _by_name(builder.__name__, ix)
        assert len(ix.accounts) == 15
        assert accounts["crop_2_account"] == CROP_2_KEY
        assert accounts["crop_2_reward_token_account"] == _key(7)
        assert accounts["harvester_2_account"] == derive_harvester_pda(CROP_2_KEY, AUTHORITY)[0]
        assert accounts["user_reward_2_token_account"] == USER_REWARD_2
        assert accounts["harvester_account"] != accounts["harvester_2_account"]


class TestClaim:
    def test_claim(self):
        ix = farm.claim(FARM_KEY, CROP, AUTHORITY)
        accounts = _by_name("claim", ix)
        assert bytes(ix.data) == DISCRIMINATORS["claim"]
        assert accounts["harvester_account"] == derive_harvester_pda(CROP_KEY, AUTHORITY)[0]
        assert accounts["user_reward_token_account"] == USER_REWARD

    def test_claim_dual_crop(self):
        ix = farm.claim_dual_crop(FARM_KEY, CROP, CROP_2, AUTHORITY)
        accounts = _by_name("claim_dual_crop", ix)
        assert len(ix.accounts) == 13
        assert accounts["crop_2_account"] == CROP_2_KEY


class TestLiquidity:
    POOL = PoolAccount(*[_key(i) for i in range(40, 48)])

    def test_deposit(self):
        ix = farm.deposit(
            _key(50), _key(51), self.POOL, AUTHORITY,
            _key(52), _key(53), _key(54), coin_amount=10, pc_amount=20,
        )
        accounts = _by_name("deposit", ix)
        assert accounts["pool_coin_account"] == self.POOL.pool_coin_account
        assert accounts["pool_pc_account"] == self.POOL.pool_pc_account
        assert accounts["lp_mint"] == self.POOL.lp_mint
        assert accounts["user_authority"] == AUTHORITY
        assert struct.unpack_from("<QQ", bytes(ix.data), 8) == (10, 20)

    def test_withdraw(self):
        ix = farm.withdraw(
            _key(50), _key(51), self.POOL, AUTHORITY,
            _key(52), _key(53), _key(54), lp_amount=99,
        )
        assert bytes(ix.data) == DISCRIMINATORS["withdraw"] + struct.pack("<Q", 99)
        assert ix.accounts[1].pubkey == _key(51)
