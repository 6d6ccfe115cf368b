"""Account layout tests built from synthetic account bytes."""

import struct

import pytest
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from atrix.errors import (
    BufferTooShortError,
    InvalidTagError,
    TrailingBytesError,
    UnknownLayoutError,
)
from atrix.reserved import Reserved
from atrix.state import (
    Clock,
    CropAccount,
    FarmAccount,
    HarvesterAccount,
    PlacedOrder,
    PoolAccount,
    ProtocolAccount,
    StakerAccount,
    decode,
    layout_discriminator,
)


def _key(n: int) -> Pubkey:
    return Pubkey.from_bytes(bytes([n]) * 32)


PADDING = Reserved(bytes(range(1, 9)))


def _farm(crops=None) -> FarmAccount:
    return FarmAccount(
        base=_key(1),
        bump=254,
        state_mint=_key(2),
        farm_stake_token_account=_key(3),
        crop_accounts=crops if crops is not None else [_key(4), None, _key(5), None],
        authority=_key(6),
        padding=PADDING,
    )


def _crop() -> CropAccount:
    return CropAccount(
        bump=255,
        authority=_key(1),
        farm_account=_key(2),
        reward_mint=_key(3),
        reward_amount_per_day=86_400_000_000,
        rewards_locked=True,
        crop_reward_token_account=_key(4),
        accrued_reward_per_stake=(1 << 100) + 12345,
        last_reward_timestamp=1_650_000_000,
        padding=PADDING,
    )


def _staker() -> StakerAccount:
    return StakerAccount(
        bump=253, farm_account=_key(1), authority=_key(2),
        staked_amount=2**64 - 1, padding=PADDING,
    )


def _harvester() -> HarvesterAccount:
    return HarvesterAccount(
        bump=255, crop_account=_key(7), reward_debt=2**127 + 1,
        earned_rewards=42, authority=_key(8), padding=PADDING,
    )


def _protocol() -> ProtocolAccount:
    return ProtocolAccount(
        authority=_key(1),
        bump=250,
        lp_fee_numerator=25,
        protocol_fee_numerator=5,
        fee_denominator=10_000,
        max_cancel_per_ix=4,
        max_place_per_ix=6,
        max_place_post_liq=2,
        order_proportion_numerators=list(range(1, 13)),
        order_proportion_len=12,
        order_proportion_denominator=1000,
        crank_sol_account=_key(2),
        pool_init_crank_fee=5_000_000,
        sol_bond=1_000_000_000,
        padding=PADDING,
    )


def _pool() -> PoolAccount:
    return PoolAccount(
        *[_key(i) for i in range(10, 18)],
        first_placed=True,
        order_index=3,
        coin_current_protocol_fees=11,
        pc_current_protocol_fees=12,
        ixi=1,
        icx=2,
        client_order_id=99,
        order_proportion_numerators=[7] * 12,
        pool_type=1,
        stable_swap_amp_coef=100,
        coin_decimals=9,
        pc_decimals=6,
        last_ask_coin=1,
        last_ask_pc=2,
        last_bid_coin=3,
        last_bid_pc=4,
        version=2,
        placed_asks=[PlacedOrder(i, i + 1, i + 2, i + 3) for i in range(12)],
        placed_bids=[PlacedOrder(0, 0, 0, i) for i in range(12)],
        pool_coin_amt=123_456,
        pool_pc_amt=654_321,
        mm_active=True,
        padding=PADDING,
    )


SAMPLES = {
    "farm": _farm,
    "crop": _crop,
    "staker": _staker,
    "harvester": _harvester,
    "protocol": _protocol,
    "pool": _pool,
}

SIZES = {
    "crop": CropAccount.STRUCT_SIZE,
    "staker": StakerAccount.STRUCT_SIZE,
    "harvester": HarvesterAccount.STRUCT_SIZE,
    "protocol": ProtocolAccount.STRUCT_SIZE,
    "pool": PoolAccount.STRUCT_SIZE,
}


class TestSizes:
    def test_declared_sizes(self):
        assert CropAccount.STRUCT_SIZE == 170
        assert StakerAccount.STRUCT_SIZE == 81
        assert HarvesterAccount.STRUCT_SIZE == 97
        assert ProtocolAccount.STRUCT_SIZE == 125
        assert PoolAccount.STRUCT_SIZE == 1152
        assert FarmAccount.MIN_SIZE == 141
        assert FarmAccount.MAX_SIZE == 269

    @pytest.mark.parametrize("kind", sorted(SIZES))
    def test_encoded_size(self, kind):
        assert len(SAMPLES[kind]().to_bytes()) == SIZES[kind]

    def test_farm_size_follows_populated_crops(self):
        assert len(_farm([None] * 4).to_bytes()) == FarmAccount.MIN_SIZE
        assert len(_farm([_key(9)] * 4).to_bytes()) == FarmAccount.MAX_SIZE
        assert len(_farm().to_bytes()) == FarmAccount.MIN_SIZE + 2 * 32


class TestRoundTrip:
    @pytest.mark.parametrize("kind", sorted(SAMPLES))
    def test_decode_encode(self, kind):
        value = SAMPLES[kind]()
        data = value.to_bytes()
        decoded = decode(kind, data)
        assert decoded == value
        assert decoded.to_bytes() == data

    @pytest.mark.parametrize("kind", sorted(SAMPLES))
    def test_padding_preserved(self, kind):
        data = SAMPLES[kind]().to_bytes()
        assert data[:8] == bytes(range(1, 9))
        assert decode(kind, data).padding == PADDING

    def test_fresh_padding_is_zero(self):
        staker = StakerAccount(bump=1, farm_account=_key(1), authority=_key(2), staked_amount=0)
        assert staker.to_bytes()[:8] == bytes(8)

    def test_empty_farm(self):
        farm = _farm([None] * 4)
        decoded = FarmAccount.from_bytes(farm.to_bytes())
        assert decoded.crop_accounts == [None] * 4
        assert decoded.active_crops == []


class TestFieldOffsets:
    def test_staker(self):
        data = _staker().to_bytes()
        assert data[8] == 253
        assert data[9:41] == bytes(_key(1))
        assert data[41:73] == bytes(_key(2))
        assert struct.unpack_from("<Q", data, 73)[0] == 2**64 - 1

    def test_crop_u128_and_timestamp(self):
        data = _crop().to_bytes()
        low, high = struct.unpack_from("<QQ", data, 146)
        assert low | (high << 64) == (1 << 100) + 12345
        assert struct.unpack_from("<q", data, 162)[0] == 1_650_000_000

    def test_crop_negative_timestamp(self):
        crop = _crop()
        crop.last_reward_timestamp = -1
        assert CropAccount.from_bytes(crop.to_bytes()).last_reward_timestamp == -1

    def test_farm_option_tags(self):
        data = _farm().to_bytes()
        # crops start after padding, base, bump, state mint and stake account
        off = 8 + 32 + 1 + 32 + 32
        assert data[off] == 1
        assert data[off + 1 : off + 33] == bytes(_key(4))
        assert data[off + 33] == 0
        assert data[off + 34] == 1

    def test_pool_tail(self):
        data = _pool().to_bytes()
        assert struct.unpack_from("<2Q", data, 1135) == (123_456, 654_321)
        assert data[1151] == 1


class TestBounds:
    def test_ten_bytes_for_harvester(self):
        with pytest.raises(BufferTooShortError):
            HarvesterAccount.from_bytes(bytes(10))

    @pytest.mark.parametrize("kind", sorted(SAMPLES))
    def test_one_byte_short(self, kind):
        data = SAMPLES[kind]().to_bytes()
        with pytest.raises(BufferTooShortError):
            decode(kind, data[:-1])

    def test_farm_short_after_populated_tag(self):
        data = _farm([_key(4), _key(5), _key(6), _key(7)]).to_bytes()
        with pytest.raises(BufferTooShortError):
            FarmAccount.from_bytes(data[: FarmAccount.MAX_SIZE - 40])

    def test_farm_bad_option_tag(self):
        data = bytearray(_farm([None] * 4).to_bytes())
        data[8 + 32 + 1 + 32 + 32] = 7
        with pytest.raises(InvalidTagError):
            FarmAccount.from_bytes(bytes(data))

    def test_empty(self):
        with pytest.raises(BufferTooShortError):
            decode("pool", b"")


class TestTrailingBytes:
    @pytest.mark.parametrize("kind", sorted(SAMPLES))
    def test_lenient_by_default(self, kind):
        value = SAMPLES[kind]()
        assert decode(kind, value.to_bytes() + bytes(16)) == value

    @pytest.mark.parametrize("kind", sorted(SAMPLES))
    def test_strict_rejects(self, kind):
        with pytest.raises(TrailingBytesError):
            decode(kind, SAMPLES[kind]().to_bytes() + b"\x00", strict=True)

    @pytest.mark.parametrize("kind", sorted(SAMPLES))
    def test_strict_exact(self, kind):
        value = SAMPLES[kind]()
        assert decode(kind, value.to_bytes(), strict=True) == value


class TestEncodeErrors:
    def test_farm_wrong_slot_count(self):
        with pytest.raises(ValueError):
            _farm([None] * 3).to_bytes()

    def test_pool_wrong_order_count(self):
        pool = _pool()
        pool.placed_bids = pool.placed_bids[:11]
        with pytest.raises(ValueError):
            pool.to_bytes()

    def test_staker_amount_out_of_range(self):
        staker = _staker()
        staker.staked_amount = -1
        with pytest.raises(ValueError):
            staker.to_bytes()


def test_unknown_layout():
    with pytest.raises(UnknownLayoutError):
        decode("vault", bytes(200))
    with pytest.raises(KeyError):
        decode("vault", bytes(200))


def test_layout_discriminator():
    assert layout_discriminator("farm").hex() == "41b983c632d98f46"
    assert layout_discriminator("pool").hex() == "74d2bb77c4c43489"


def test_clock():
    data = struct.pack("<QqQQq", 150_000_000, 1_650_000_000, 350, 351, 1_650_100_000)
    clock = Clock.from_bytes(data)
    assert clock.slot == 150_000_000
    assert clock.epoch == 350
    assert clock.unix_timestamp == 1_650_100_000
    with pytest.raises(BufferTooShortError):
        Clock.from_bytes(data[:39])


@pytest.mark.parametrize(
    "layout",
    [CropAccount, StakerAccount, HarvesterAccount, ProtocolAccount, PoolAccount],
)
def test_fixed_layout_reads_exactly_struct_size(layout):
    data = bytes(layout.STRUCT_SIZE)
    decoded = layout.from_bytes(data, strict=True)
    assert decoded.to_bytes() == data
