"""On-chain account data structures for the Atrix farm and pool programs.

Binary layout is Borsh: an opaque 8-byte prefix followed by fixed-width
little-endian fields in declaration order. Optional pubkeys carry a one-byte
Option tag. Deserialization raises BufferTooShortError instead of returning
a partial struct and, unless strict=True, tolerates extra trailing bytes for
forward compatibility.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType

from borsh_incremental import (
    BufferTooShortError,
    IncrementalReader,
    IncrementalWriter,
)
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from atrix.discriminator import account_discriminator
from atrix.errors import UnknownLayoutError
from atrix.reserved import ACCOUNT_PADDING_SIZE, Reserved

MAX_CROPS_PER_FARM = 4
ORDER_PROPORTION_LEN = 12
MAX_PLACED_ORDERS = 12


def _read_pubkey(r: IncrementalReader) -> Pubkey:
    return Pubkey.from_bytes(r.read_pubkey_raw())


def _read_option_pubkey(r: IncrementalReader) -> Pubkey | None:
    raw = r.read_option_pubkey_raw()
    return None if raw is None else Pubkey.from_bytes(raw)


def _open(data: bytes, name: str, min_size: int) -> IncrementalReader:
    if len(data) < min_size:
        raise BufferTooShortError(name, 0, min_size, len(data))
    return IncrementalReader(data)


def _read_padding(r: IncrementalReader) -> Reserved:
    return Reserved(r.read_bytes(ACCOUNT_PADDING_SIZE))


def _finish(r: IncrementalReader, strict: bool) -> None:
    if strict:
        r.expect_end()


# ---------------------------------------------------------------------------
# Farm program
# ---------------------------------------------------------------------------


@dataclass
class FarmAccount:
    base: Pubkey
    bump: int  # u8
    state_mint: Pubkey
    farm_stake_token_account: Pubkey
    crop_accounts: list[Pubkey | None]  # [Option<Pubkey>; 4]
    authority: Pubkey
    padding: Reserved = Reserved.zeroed()

    # Size depends on how many crop slots are populated.
    MIN_SIZE = 8 + 32 + 1 + 32 + 32 + 4 * 1 + 32
    MAX_SIZE = 8 + 32 + 1 + 32 + 32 + 4 * 33 + 32

    @classmethod
    def from_bytes(cls, data: bytes, strict: bool = False) -> FarmAccount:
        r = _open(data, "FarmAccount", cls.MIN_SIZE)
        padding = _read_padding(r)
        base = _read_pubkey(r)
        bump = r.read_u8()
        state_mint = _read_pubkey(r)
        stake_ta = _read_pubkey(r)
        crops = [_read_option_pubkey(r) for _ in range(MAX_CROPS_PER_FARM)]
        authority = _read_pubkey(r)
        _finish(r, strict)
        return cls(
            base=base,
            bump=bump,
            state_mint=state_mint,
            farm_stake_token_account=stake_ta,
            crop_accounts=crops,
            authority=authority,
            padding=padding,
        )

    def to_bytes(self) -> bytes:
        if len(self.crop_accounts) != MAX_CROPS_PER_FARM:
            raise ValueError(
                f"crop_accounts must have {MAX_CROPS_PER_FARM} slots, "
                f"got {len(self.crop_accounts)}"
            )
        w = IncrementalWriter()
        w.write_bytes(self.padding, ACCOUNT_PADDING_SIZE)
        w.write_pubkey_raw(bytes(self.base))
        w.write_u8(self.bump)
        w.write_pubkey_raw(bytes(self.state_mint))
        w.write_pubkey_raw(bytes(self.farm_stake_token_account))
        for crop in self.crop_accounts:
            w.write_option_pubkey_raw(None if crop is None else bytes(crop))
        w.write_pubkey_raw(bytes(self.authority))
        return w.to_bytes()

    @property
    def active_crops(self) -> list[Pubkey]:
        return [c for c in self.crop_accounts if c is not None]


@dataclass
class CropAccount:
    bump: int  # u8
    authority: Pubkey
    farm_account: Pubkey
    reward_mint: Pubkey
    reward_amount_per_day: int  # u64
    rewards_locked: bool
    crop_reward_token_account: Pubkey
    accrued_reward_per_stake: int  # u128 fixed-point accumulator
    last_reward_timestamp: int  # i64 unix seconds
    padding: Reserved = Reserved.zeroed()

    STRUCT_SIZE = 170

    @classmethod
    def from_bytes(cls, data: bytes, strict: bool = False) -> CropAccount:
        r = _open(data, "CropAccount", cls.STRUCT_SIZE)
        padding = _read_padding(r)
        bump = r.read_u8()
        authority = _read_pubkey(r)
        farm = _read_pubkey(r)
        reward_mint = _read_pubkey(r)
        per_day = r.read_u64()
        locked = r.read_bool()
        reward_ta = _read_pubkey(r)
        accrued = r.read_u128()
        last_ts = r.read_i64()
        assert r.offset == cls.STRUCT_SIZE, f"CropAccount byte coverage: {r.offset} != {cls.STRUCT_SIZE}"
        _finish(r, strict)
        return cls(
            bump=bump,
            authority=authority,
            farm_account=farm,
            reward_mint=reward_mint,
            reward_amount_per_day=per_day,
            rewards_locked=locked,
            crop_reward_token_account=reward_ta,
            accrued_reward_per_stake=accrued,
            last_reward_timestamp=last_ts,
            padding=padding,
        )

    def to_bytes(self) -> bytes:
        w = IncrementalWriter()
        w.write_bytes(self.padding, ACCOUNT_PADDING_SIZE)
        w.write_u8(self.bump)
        w.write_pubkey_raw(bytes(self.authority))
        w.write_pubkey_raw(bytes(self.farm_account))
        w.write_pubkey_raw(bytes(self.reward_mint))
        w.write_u64(self.reward_amount_per_day)
        w.write_bool(self.rewards_locked)
        w.write_pubkey_raw(bytes(self.crop_reward_token_account))
        w.write_u128(self.accrued_reward_per_stake)
        w.write_i64(self.last_reward_timestamp)
        return w.to_bytes()


@dataclass
class StakerAccount:
    bump: int  # u8
    farm_account: Pubkey
    authority: Pubkey
    staked_amount: int  # u64
    padding: Reserved = Reserved.zeroed()

    STRUCT_SIZE = 81

    @classmethod
    def from_bytes(cls, data: bytes, strict: bool = False) -> StakerAccount:
        r = _open(data, "StakerAccount", cls.STRUCT_SIZE)
        padding = _read_padding(r)
        bump = r.read_u8()
        farm = _read_pubkey(r)
        authority = _read_pubkey(r)
        staked = r.read_u64()
        assert r.offset == cls.STRUCT_SIZE, f"StakerAccount byte coverage: {r.offset} != {cls.STRUCT_SIZE}"
        _finish(r, strict)
        return cls(
            bump=bump,
            farm_account=farm,
            authority=authority,
            staked_amount=staked,
            padding=padding,
        )

    def to_bytes(self) -> bytes:
        w = IncrementalWriter()
        w.write_bytes(self.padding, ACCOUNT_PADDING_SIZE)
        w.write_u8(self.bump)
        w.write_pubkey_raw(bytes(self.farm_account))
        w.write_pubkey_raw(bytes(self.authority))
        w.write_u64(self.staked_amount)
        return w.to_bytes()


@dataclass
class HarvesterAccount:
    bump: int  # u8
    crop_account: Pubkey
    reward_debt: int  # u128
    earned_rewards: int  # u64
    authority: Pubkey
    padding: Reserved = Reserved.zeroed()

    STRUCT_SIZE = 97

    @classmethod
    def from_bytes(cls, data: bytes, strict: bool = False) -> HarvesterAccount:
        r = _open(data, "HarvesterAccount", cls.STRUCT_SIZE)
        padding = _read_padding(r)
        bump = r.read_u8()
        crop = _read_pubkey(r)
        debt = r.read_u128()
        earned = r.read_u64()
        authority = _read_pubkey(r)
        assert r.offset == cls.STRUCT_SIZE, f"HarvesterAccount byte coverage: {r.offset} != {cls.STRUCT_SIZE}"
        _finish(r, strict)
        return cls(
            bump=bump,
            crop_account=crop,
            reward_debt=debt,
            earned_rewards=earned,
            authority=authority,
            padding=padding,
        )

    def to_bytes(self) -> bytes:
        w = IncrementalWriter()
        w.write_bytes(self.padding, ACCOUNT_PADDING_SIZE)
        w.write_u8(self.bump)
        w.write_pubkey_raw(bytes(self.crop_account))
        w.write_u128(self.reward_debt)
        w.write_u64(self.earned_rewards)
        w.write_pubkey_raw(bytes(self.authority))
        return w.to_bytes()


# ---------------------------------------------------------------------------
# Pool program
# ---------------------------------------------------------------------------


@dataclass
class ProtocolAccount:
    authority: Pubkey
    bump: int  # u8
    lp_fee_numerator: int  # u16
    protocol_fee_numerator: int  # u16
    fee_denominator: int  # u16
    max_cancel_per_ix: int  # u8
    max_place_per_ix: int  # u8
    max_place_post_liq: int  # u8
    order_proportion_numerators: list[int]  # [u16; 12]
    order_proportion_len: int  # u8
    order_proportion_denominator: int  # u16
    crank_sol_account: Pubkey
    pool_init_crank_fee: int  # u64
    sol_bond: int  # u64
    padding: Reserved = Reserved.zeroed()

    STRUCT_SIZE = 125

    @classmethod
    def from_bytes(cls, data: bytes, strict: bool = False) -> ProtocolAccount:
        r = _open(data, "ProtocolAccount", cls.STRUCT_SIZE)
        padding = _read_padding(r)
        authority = _read_pubkey(r)
        bump = r.read_u8()
        lp_fee = r.read_u16()
        protocol_fee = r.read_u16()
        fee_denom = r.read_u16()
        max_cancel = r.read_u8()
        max_place = r.read_u8()
        max_post_liq = r.read_u8()
        proportions = r.read_u16_array(ORDER_PROPORTION_LEN)
        proportion_len = r.read_u8()
        proportion_denom = r.read_u16()
        crank = _read_pubkey(r)
        crank_fee = r.read_u64()
        sol_bond = r.read_u64()
        assert r.offset == cls.STRUCT_SIZE, f"ProtocolAccount byte coverage: {r.offset} != {cls.STRUCT_SIZE}"
        _finish(r, strict)
        return cls(
            authority=authority,
            bump=bump,
            lp_fee_numerator=lp_fee,
            protocol_fee_numerator=protocol_fee,
            fee_denominator=fee_denom,
            max_cancel_per_ix=max_cancel,
            max_place_per_ix=max_place,
            max_place_post_liq=max_post_liq,
            order_proportion_numerators=proportions,
            order_proportion_len=proportion_len,
            order_proportion_denominator=proportion_denom,
            crank_sol_account=crank,
            pool_init_crank_fee=crank_fee,
            sol_bond=sol_bond,
            padding=padding,
        )

    def to_bytes(self) -> bytes:
        w = IncrementalWriter()
        w.write_bytes(self.padding, ACCOUNT_PADDING_SIZE)
        w.write_pubkey_raw(bytes(self.authority))
        w.write_u8(self.bump)
        w.write_u16(self.lp_fee_numerator)
        w.write_u16(self.protocol_fee_numerator)
        w.write_u16(self.fee_denominator)
        w.write_u8(self.max_cancel_per_ix)
        w.write_u8(self.max_place_per_ix)
        w.write_u8(self.max_place_post_liq)
        w.write_u16_array(self.order_proportion_numerators, ORDER_PROPORTION_LEN)
        w.write_u8(self.order_proportion_len)
        w.write_u16(self.order_proportion_denominator)
        w.write_pubkey_raw(bytes(self.crank_sol_account))
        w.write_u64(self.pool_init_crank_fee)
        w.write_u64(self.sol_bond)
        return w.to_bytes()


@dataclass
class PlacedOrder:
    limit_price: int  # u64
    coin_qty: int  # u64
    max_native_pc_qty_including_fees: int  # u64
    client_order_id: int  # u64

    STRUCT_SIZE = 32

    @classmethod
    def read(cls, r: IncrementalReader) -> PlacedOrder:
        return cls(r.read_u64(), r.read_u64(), r.read_u64(), r.read_u64())

    def write(self, w: IncrementalWriter) -> None:
        w.write_u64(self.limit_price)
        w.write_u64(self.coin_qty)
        w.write_u64(self.max_native_pc_qty_including_fees)
        w.write_u64(self.client_order_id)


def _empty_orders() -> list[PlacedOrder]:
    return [PlacedOrder(0, 0, 0, 0) for _ in range(MAX_PLACED_ORDERS)]


@dataclass
class PoolAccount:
    coin_mint: Pubkey
    pc_mint: Pubkey
    market: Pubkey
    open_orders: Pubkey
    pool_coin_account: Pubkey
    pool_pc_account: Pubkey
    pool_lp_account: Pubkey
    lp_mint: Pubkey
    first_placed: bool = False
    order_index: int = 0  # u8
    coin_current_protocol_fees: int = 0  # u64
    pc_current_protocol_fees: int = 0  # u64
    ixi: int = 0  # u8
    icx: int = 0  # u8
    client_order_id: int = 0  # u64
    order_proportion_numerators: list[int] = field(
        default_factory=lambda: [0] * ORDER_PROPORTION_LEN
    )  # [u16; 12]
    pool_type: int = 0  # u8
    stable_swap_amp_coef: int = 0  # u64
    coin_decimals: int = 0  # u8
    pc_decimals: int = 0  # u8
    last_ask_coin: int = 0  # u64
    last_ask_pc: int = 0  # u64
    last_bid_coin: int = 0  # u64
    last_bid_pc: int = 0  # u64
    version: int = 0  # u64
    placed_asks: list[PlacedOrder] = field(default_factory=_empty_orders)
    placed_bids: list[PlacedOrder] = field(default_factory=_empty_orders)
    pool_coin_amt: int = 0  # u64
    pool_pc_amt: int = 0  # u64
    mm_active: bool = False
    padding: Reserved = Reserved.zeroed()

    STRUCT_SIZE = 1152

    @classmethod
    def from_bytes(cls, data: bytes, strict: bool = False) -> PoolAccount:
        r = _open(data, "PoolAccount", cls.STRUCT_SIZE)
        padding = _read_padding(r)
        keys = [_read_pubkey(r) for _ in range(8)]
        first_placed = r.read_bool()
        order_index = r.read_u8()
        coin_fees = r.read_u64()
        pc_fees = r.read_u64()
        ixi = r.read_u8()
        icx = r.read_u8()
        client_order_id = r.read_u64()
        proportions = r.read_u16_array(ORDER_PROPORTION_LEN)
        pool_type = r.read_u8()
        amp = r.read_u64()
        coin_decimals = r.read_u8()
        pc_decimals = r.read_u8()
        ask_coin = r.read_u64()
        ask_pc = r.read_u64()
        bid_coin = r.read_u64()
        bid_pc = r.read_u64()
        version = r.read_u64()
        asks = [PlacedOrder.read(r) for _ in range(MAX_PLACED_ORDERS)]
        bids = [PlacedOrder.read(r) for _ in range(MAX_PLACED_ORDERS)]
        coin_amt = r.read_u64()
        pc_amt = r.read_u64()
        mm_active = r.read_bool()
        assert r.offset == cls.STRUCT_SIZE, f"PoolAccount byte coverage: {r.offset} != {cls.STRUCT_SIZE}"
        _finish(r, strict)
        return cls(
            *keys,
            first_placed=first_placed,
            order_index=order_index,
            coin_current_protocol_fees=coin_fees,
            pc_current_protocol_fees=pc_fees,
            ixi=ixi,
            icx=icx,
            client_order_id=client_order_id,
            order_proportion_numerators=proportions,
            pool_type=pool_type,
            stable_swap_amp_coef=amp,
            coin_decimals=coin_decimals,
            pc_decimals=pc_decimals,
            last_ask_coin=ask_coin,
            last_ask_pc=ask_pc,
            last_bid_coin=bid_coin,
            last_bid_pc=bid_pc,
            version=version,
            placed_asks=asks,
            placed_bids=bids,
            pool_coin_amt=coin_amt,
            pool_pc_amt=pc_amt,
            mm_active=mm_active,
            padding=padding,
        )

    def to_bytes(self) -> bytes:
        for side, orders in (("placed_asks", self.placed_asks), ("placed_bids", self.placed_bids)):
            if len(orders) != MAX_PLACED_ORDERS:
                raise ValueError(
                    f"{side} must have {MAX_PLACED_ORDERS} entries, got {len(orders)}"
                )
        w = IncrementalWriter()
        w.write_bytes(self.padding, ACCOUNT_PADDING_SIZE)
        for key in (
            self.coin_mint,
            self.pc_mint,
            self.market,
            self.open_orders,
            self.pool_coin_account,
            self.pool_pc_account,
            self.pool_lp_account,
            self.lp_mint,
        ):
            w.write_pubkey_raw(bytes(key))
        w.write_bool(self.first_placed)
        w.write_u8(self.order_index)
        w.write_u64(self.coin_current_protocol_fees)
        w.write_u64(self.pc_current_protocol_fees)
        w.write_u8(self.ixi)
        w.write_u8(self.icx)
        w.write_u64(self.client_order_id)
        w.write_u16_array(self.order_proportion_numerators, ORDER_PROPORTION_LEN)
        w.write_u8(self.pool_type)
        w.write_u64(self.stable_swap_amp_coef)
        w.write_u8(self.coin_decimals)
        w.write_u8(self.pc_decimals)
        w.write_u64(self.last_ask_coin)
        w.write_u64(self.last_ask_pc)
        w.write_u64(self.last_bid_coin)
        w.write_u64(self.last_bid_pc)
        w.write_u64(self.version)
        for order in self.placed_asks:
            order.write(w)
        for order in self.placed_bids:
            order.write(w)
        w.write_u64(self.pool_coin_amt)
        w.write_u64(self.pool_pc_amt)
        w.write_bool(self.mm_active)
        return w.to_bytes()


# ---------------------------------------------------------------------------
# Clock sysvar
# ---------------------------------------------------------------------------


@dataclass
class Clock:
    slot: int  # u64
    epoch_start_timestamp: int  # i64
    epoch: int  # u64
    leader_schedule_epoch: int  # u64
    unix_timestamp: int  # i64

    STRUCT_SIZE = 40

    @classmethod
    def from_bytes(cls, data: bytes) -> Clock:
        r = _open(data, "Clock", cls.STRUCT_SIZE)
        clock = cls(
            slot=r.read_u64(),
            epoch_start_timestamp=r.read_i64(),
            epoch=r.read_u64(),
            leader_schedule_epoch=r.read_u64(),
            unix_timestamp=r.read_i64(),
        )
        assert r.offset == cls.STRUCT_SIZE, f"Clock byte coverage: {r.offset} != {cls.STRUCT_SIZE}"
        return clock


# ---------------------------------------------------------------------------
# Lookup by kind
# ---------------------------------------------------------------------------

LAYOUTS = MappingProxyType(
    {
        "farm": FarmAccount,
        "crop": CropAccount,
        "staker": StakerAccount,
        "harvester": HarvesterAccount,
        "protocol": ProtocolAccount,
        "pool": PoolAccount,
    }
)


def layout_for(kind: str) -> type:
    try:
        return LAYOUTS[kind]
    except KeyError:
        raise UnknownLayoutError(
            f"unknown account layout {kind!r}, expected one of {sorted(LAYOUTS)}"
        ) from None


def decode(kind: str, data: bytes, strict: bool = False):
    """Decode raw account data using the layout registered under kind."""
    return layout_for(kind).from_bytes(data, strict=strict)


def layout_discriminator(kind: str) -> bytes:
    """The Anchor account prefix for a layout, e.g. for memcmp filters."""
    return account_discriminator(layout_for(kind).__name__)
