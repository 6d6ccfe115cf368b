"""Pyth price feed decoding.

Decodes the Borsh form of a pyth-sdk ``PriceFeed`` and pairs its EMA price
with a staleness reading taken against the cluster clock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from enum import IntEnum
from typing import Union

from borsh_incremental import BorshError, IncrementalReader, InvalidTagError

from atrix.errors import MalformedFeedError
from atrix.state import Clock

logger = logging.getLogger(__name__)

PRICE_FEED_SIZE = 32 + 1 + 8 + 4 + 4 + 4 + 32 + 8 * 7


class PriceStatus(IntEnum):
    UNKNOWN = 0
    TRADING = 1
    HALTED = 2
    AUCTION = 3


@dataclass(frozen=True)
class Price:
    price: int  # i64
    conf: int  # u64
    expo: int  # i32

    def as_float(self) -> float:
        return self.price * 10.0**self.expo


@dataclass
class PriceFeed:
    id: bytes  # 32 bytes
    status: PriceStatus
    publish_time: int  # i64 unix seconds
    expo: int  # i32
    max_num_publishers: int  # u32
    num_publishers: int  # u32
    product_id: bytes  # 32 bytes
    price: int  # i64
    conf: int  # u64
    ema_price: int  # i64
    ema_conf: int  # u64
    prev_price: int  # i64
    prev_conf: int  # u64
    prev_publish_time: int  # i64

    @classmethod
    def from_bytes(cls, data: bytes) -> PriceFeed:
        r = IncrementalReader(data)
        feed_id = r.read_bytes(32)
        status_offset = r.offset
        raw_status = r.read_u8()
        try:
            status = PriceStatus(raw_status)
        except ValueError:
            raise InvalidTagError("price status", raw_status, status_offset) from None
        return cls(
            id=feed_id,
            status=status,
            publish_time=r.read_i64(),
            expo=r.read_i32(),
            max_num_publishers=r.read_u32(),
            num_publishers=r.read_u32(),
            product_id=r.read_bytes(32),
            price=r.read_i64(),
            conf=r.read_u64(),
            ema_price=r.read_i64(),
            ema_conf=r.read_u64(),
            prev_price=r.read_i64(),
            prev_conf=r.read_u64(),
            prev_publish_time=r.read_i64(),
        )

    def get_current_price(self) -> Price | None:
        """Aggregate price, or None when the feed is not trading."""
        if self.status != PriceStatus.TRADING:
            return None
        return Price(self.price, self.conf, self.expo)

    def get_ema_price(self) -> Price:
        return Price(self.ema_price, self.ema_conf, self.expo)


@dataclass
class PriceFeedSnapshot:
    feed: PriceFeed
    status: PriceStatus
    price: Price  # EMA price
    publish_time: int
    staleness: timedelta | None = None
    clock_skew: timedelta | None = None

    @property
    def is_future_dated(self) -> bool:
        return self.clock_skew is not None


def extract(
    data: bytes, clock: Union[Clock, int, None] = None
) -> PriceFeedSnapshot:
    """Decode a price feed and measure its age against clock.

    clock may be a decoded Clock sysvar or a unix timestamp. When the clock
    reads earlier than the publish time the gap is reported as clock_skew and
    staleness stays None.
    """
    try:
        feed = PriceFeed.from_bytes(data)
    except BorshError as exc:
        raise MalformedFeedError(f"malformed price feed: {exc}") from exc

    snapshot = PriceFeedSnapshot(
        feed=feed,
        status=feed.status,
        price=feed.get_ema_price(),
        publish_time=feed.publish_time,
    )
    if clock is None:
        return snapshot

    now = clock.unix_timestamp if isinstance(clock, Clock) else clock
    diff = now - feed.publish_time
    if diff >= 0:
        snapshot.staleness = timedelta(seconds=diff)
        logger.debug("price feed %s is %ss old", feed.id.hex(), diff)
    else:
        snapshot.clock_skew = timedelta(seconds=-diff)
        logger.warning(
            "price feed %s published %ss after reference clock %s",
            feed.id.hex(),
            -diff,
            now,
        )
    return snapshot
