"""Instruction encoding for the Atrix farm and pool programs.

Each instruction is described once in INSTRUCTION_LAYOUTS: the program it
targets, its little-endian argument list, and its account list in the
positional order the program reads them. build_instruction() serializes a
call against that description without checking the values themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Sequence, Union

from borsh_incremental import IncrementalWriter
from solders.instruction import AccountMeta, Instruction  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from atrix.config import FARM_PROGRAM_ID, POOL_PROGRAM_ID
from atrix.discriminator import lookup_discriminator
from atrix.errors import UnknownInstructionNameError

AccountsArg = Union[Mapping[str, Pubkey], Sequence[Pubkey]]

_ARG_WRITERS = {
    "u8": IncrementalWriter.write_u8,
    "u64": IncrementalWriter.write_u64,
}


@dataclass(frozen=True)
class AccountSpec:
    name: str
    is_signer: bool = False
    is_writable: bool = False


@dataclass(frozen=True)
class InstructionLayout:
    name: str
    program_id: Pubkey
    args: tuple[tuple[str, str], ...]
    accounts: tuple[AccountSpec, ...]

    @property
    def account_names(self) -> list[str]:
        return [a.name for a in self.accounts]

    def encode_args(self, args: Mapping[str, int]) -> bytes:
        expected = [name for name, _ in self.args]
        missing = [n for n in expected if n not in args]
        extra = sorted(set(args) - set(expected))
        if missing or extra:
            raise ValueError(
                f"{self.name}: expected args {expected}, "
                f"missing {missing}, unexpected {extra}"
            )
        w = IncrementalWriter()
        for arg_name, typ in self.args:
            _ARG_WRITERS[typ](w, args[arg_name])
        return w.to_bytes()

    def account_metas(self, accounts: AccountsArg) -> list[AccountMeta]:
        if isinstance(accounts, Mapping):
            missing = [a.name for a in self.accounts if a.name not in accounts]
            extra = sorted(set(accounts) - set(self.account_names))
            if missing or extra:
                raise ValueError(
                    f"{self.name}: missing accounts {missing}, unexpected {extra}"
                )
            keys = [accounts[a.name] for a in self.accounts]
        else:
            keys = list(accounts)
            if len(keys) != len(self.accounts):
                raise ValueError(
                    f"{self.name}: expected {len(self.accounts)} accounts, got {len(keys)}"
                )
        return [
            AccountMeta(key, is_signer=spec.is_signer, is_writable=spec.is_writable)
            for key, spec in zip(keys, self.accounts)
        ]


def _w(name: str) -> AccountSpec:
    return AccountSpec(name, is_writable=True)


def _r(name: str) -> AccountSpec:
    return AccountSpec(name)


_FARM = Pubkey.from_string(FARM_PROGRAM_ID)
_POOL = Pubkey.from_string(POOL_PROGRAM_ID)

_AUTHORITY_PAYER = AccountSpec("authority", is_signer=True, is_writable=True)
_AUTHORITY = AccountSpec("authority", is_signer=True)

_STAKE_ACCOUNTS = (
    _w("farm_account"),
    _w("farm_stake_token_account"),
    _w("crop_account"),
    _w("crop_reward_token_account"),
    _w("staker_account"),
    _w("harvester_account"),
    _w("user_stake_token_account"),
    _w("user_reward_token_account"),
    _AUTHORITY,
    _r("token_program"),
    _r("clock"),
)

_STAKE_DUAL_CROP_ACCOUNTS = (
    _w("farm_account"),
    _w("farm_stake_token_account"),
    _w("crop_account"),
    _w("crop_reward_token_account"),
    _w("crop_2_account"),
    _w("crop_2_reward_token_account"),
    _w("staker_account"),
    _w("harvester_account"),
    _w("harvester_2_account"),
    _w("user_stake_token_account"),
    _w("user_reward_token_account"),
    _w("user_reward_2_token_account"),
    _AUTHORITY,
    _r("token_program"),
    _r("clock"),
)

_CLAIM_ACCOUNTS = (
    _r("farm_account"),
    _w("crop_account"),
    _w("crop_reward_token_account"),
    _r("staker_account"),
    _w("harvester_account"),
    _w("user_reward_token_account"),
    _AUTHORITY,
    _r("token_program"),
    _r("clock"),
)

_CLAIM_DUAL_CROP_ACCOUNTS = (
    _r("farm_account"),
    _w("crop_account"),
    _w("crop_reward_token_account"),
    _w("crop_2_account"),
    _w("crop_2_reward_token_account"),
    _r("staker_account"),
    _w("harvester_account"),
    _w("harvester_2_account"),
    _w("user_reward_token_account"),
    _w("user_reward_2_token_account"),
    _AUTHORITY,
    _r("token_program"),
    _r("clock"),
)

_LIQUIDITY_ACCOUNTS = (
    _r("protocol_account"),
    _w("pool_account"),
    _w("pool_coin_account"),
    _w("pool_pc_account"),
    _w("lp_mint"),
    _w("user_coin_account"),
    _w("user_pc_account"),
    _w("user_lp_account"),
    AccountSpec("user_authority", is_signer=True),
    _r("token_program"),
)

_AMOUNT = (("amount", "u64"),)

INSTRUCTION_LAYOUTS = MappingProxyType(
    {
        layout.name: layout
        for layout in (
            InstructionLayout(
                "create_staker",
                _FARM,
                (("staker_bump", "u8"),),
                (
                    _r("farm_account"),
                    _w("staker_account"),
                    _AUTHORITY_PAYER,
                    _r("system_program"),
                    _r("rent"),
                ),
            ),
            InstructionLayout(
                "create_harvester",
                _FARM,
                (("harvester_bump", "u8"),),
                (
                    _r("crop_account"),
                    _w("harvester_account"),
                    _AUTHORITY_PAYER,
                    _r("system_program"),
                    _r("rent"),
                ),
            ),
            InstructionLayout("stake", _FARM, _AMOUNT, _STAKE_ACCOUNTS),
            InstructionLayout("unstake", _FARM, _AMOUNT, _STAKE_ACCOUNTS),
            InstructionLayout(
                "stake_dual_crop", _FARM, _AMOUNT, _STAKE_DUAL_CROP_ACCOUNTS
            ),
            InstructionLayout(
                "unstake_dual_crop", _FARM, _AMOUNT, _STAKE_DUAL_CROP_ACCOUNTS
            ),
            InstructionLayout("claim", _FARM, (), _CLAIM_ACCOUNTS),
            InstructionLayout(
                "claim_dual_crop", _FARM, (), _CLAIM_DUAL_CROP_ACCOUNTS
            ),
            InstructionLayout(
                "deposit",
                _POOL,
                (("coin_amount", "u64"), ("pc_amount", "u64")),
                _LIQUIDITY_ACCOUNTS,
            ),
            InstructionLayout(
                "withdraw", _POOL, (("lp_amount", "u64"),), _LIQUIDITY_ACCOUNTS
            ),
        )
    }
)


def get_layout(name: str) -> InstructionLayout:
    layout = INSTRUCTION_LAYOUTS.get(name)
    if layout is None:
        raise UnknownInstructionNameError(
            f"no account layout for instruction {name!r}, "
            f"expected one of {sorted(INSTRUCTION_LAYOUTS)}"
        )
    return layout


def build_instruction(
    name: str,
    accounts: AccountsArg,
    program_id: Pubkey | None = None,
    **args: int,
) -> Instruction:
    """Serialize an instruction call.

    accounts is either a mapping from account name to pubkey or a sequence
    of pubkeys already in the program's positional order. Scalar args are
    passed by name and packed in declared order after the discriminator.
    """
    layout = get_layout(name)
    data = lookup_discriminator(name) + layout.encode_args(args)
    return Instruction(
        layout.program_id if program_id is None else program_id,
        data,
        layout.account_metas(accounts),
    )
