"""RPC client for fetching Atrix farm and pool program accounts."""

from __future__ import annotations

import logging
from typing import Protocol

from solana.rpc.api import Client as SolanaHTTPClient  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from solders.rpc.responses import GetAccountInfoResp  # type: ignore[import-untyped]

from atrix.accessor import TOKEN_ACCOUNT_AMOUNT_OFFSET, FieldKind, read_field, to_u64
from atrix.config import (
    FARM_PROGRAM_ID,
    POOL_PROGRAM_ID,
    SOLANA_RPC_URLS,
    SYSVAR_CLOCK_ID,
)
from atrix.pda import (
    derive_crop_pda,
    derive_farm_pda,
    derive_harvester_pda,
    derive_staker_pda,
)
from atrix.pyth import PriceFeedSnapshot, extract
from atrix.state import (
    Clock,
    CropAccount,
    FarmAccount,
    HarvesterAccount,
    PoolAccount,
    ProtocolAccount,
    StakerAccount,
    layout_discriminator,
)

logger = logging.getLogger(__name__)


class SolanaClient(Protocol):
    def get_account_info(self, pubkey: Pubkey) -> GetAccountInfoResp: ...


class Client:
    """Read-only client for Atrix program accounts."""

    def __init__(
        self,
        solana_rpc: SolanaClient,
        farm_program_id: Pubkey,
        pool_program_id: Pubkey,
    ) -> None:
        self._solana_rpc = solana_rpc
        self._farm_program_id = farm_program_id
        self._pool_program_id = pool_program_id

    @classmethod
    def for_cluster(cls, cluster: str, timeout: float = 30) -> Client:
        """Create a client for one of the clusters in SOLANA_RPC_URLS."""
        return cls(
            SolanaHTTPClient(SOLANA_RPC_URLS[cluster], timeout=timeout),
            Pubkey.from_string(FARM_PROGRAM_ID),
            Pubkey.from_string(POOL_PROGRAM_ID),
        )

    @classmethod
    def mainnet_beta(cls) -> Client:
        """Create a client configured for mainnet-beta."""
        return cls.for_cluster("mainnet-beta")

    # -- Farm program --

    def fetch_farm(self, base: Pubkey) -> FarmAccount:
        addr, _ = derive_farm_pda(base, self._farm_program_id)
        return self.fetch_farm_account(addr)

    def fetch_farm_account(self, addr: Pubkey) -> FarmAccount:
        return FarmAccount.from_bytes(self._fetch_account_data(addr))

    def fetch_crop(self, farm_key: Pubkey, reward_mint: Pubkey) -> CropAccount:
        addr, _ = derive_crop_pda(farm_key, reward_mint, self._farm_program_id)
        return CropAccount.from_bytes(self._fetch_account_data(addr))

    def fetch_farm_crops(self, farm: FarmAccount) -> dict[Pubkey, CropAccount]:
        """Fetch every crop a farm references, keyed by crop address."""
        return {
            key: CropAccount.from_bytes(self._fetch_account_data(key))
            for key in farm.active_crops
        }

    def fetch_staker(self, farm_key: Pubkey, authority: Pubkey) -> StakerAccount:
        addr, _ = derive_staker_pda(farm_key, authority, self._farm_program_id)
        return StakerAccount.from_bytes(self._fetch_account_data(addr))

    def fetch_harvester(
        self, crop_key: Pubkey, authority: Pubkey
    ) -> HarvesterAccount:
        addr, _ = derive_harvester_pda(crop_key, authority, self._farm_program_id)
        return HarvesterAccount.from_bytes(self._fetch_account_data(addr))

    def fetch_all_farms(self) -> dict[Pubkey, FarmAccount]:
        return {
            addr: FarmAccount.from_bytes(data)
            for addr, data in self._fetch_all_by_discriminator(
                self._farm_program_id, layout_discriminator("farm")
            )
        }

    # -- Pool program --

    def fetch_pool(self, addr: Pubkey) -> PoolAccount:
        return PoolAccount.from_bytes(self._fetch_account_data(addr))

    def fetch_protocol(self, addr: Pubkey) -> ProtocolAccount:
        return ProtocolAccount.from_bytes(self._fetch_account_data(addr))

    # -- Oracles, sysvars and token accounts --

    def fetch_clock(self) -> Clock:
        return Clock.from_bytes(
            self._fetch_account_data(Pubkey.from_string(SYSVAR_CLOCK_ID))
        )

    def fetch_price_feed(
        self, addr: Pubkey, with_clock: bool = True
    ) -> PriceFeedSnapshot:
        data = self._fetch_account_data(addr)
        clock = self.fetch_clock() if with_clock else None
        return extract(data, clock)

    def fetch_token_amount(self, token_account: Pubkey) -> int:
        data = self._fetch_account_data(token_account)
        return to_u64(read_field(data, FieldKind.U64, TOKEN_ACCOUNT_AMOUNT_OFFSET))

    # -- Internal helpers --

    def _fetch_account_data(self, addr: Pubkey) -> bytes:
        logger.debug("fetching account %s", addr)
        resp = self._solana_rpc.get_account_info(addr)
        if resp.value is None:
            raise ValueError(f"account not found: {addr}")
        return bytes(resp.value.data)

    def _fetch_all_by_discriminator(
        self,
        program_id: Pubkey,
        disc: bytes,
    ) -> list[tuple[Pubkey, bytes]]:
        from solana.rpc.types import MemcmpOpts  # type: ignore[import-untyped]

        import base58  # type: ignore[import-untyped]

        filters = [MemcmpOpts(offset=0, bytes=base58.b58encode(disc).decode())]
        resp = self._solana_rpc.get_program_accounts(  # type: ignore[attr-defined]
            program_id,
            encoding="base64",
            filters=filters,
        )
        logger.debug(
            "program %s returned %d accounts for %s",
            program_id,
            len(resp.value),
            disc.hex(),
        )
        return [(acct.pubkey, bytes(acct.account.data)) for acct in resp.value]
