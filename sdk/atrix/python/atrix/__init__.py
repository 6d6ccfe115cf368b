from atrix.accessor import (
    Accessor,
    FieldKind,
    pubkey_from_serum_slice,
    read_field,
    to_pubkey,
    to_u64,
)
from atrix.client import Client
from atrix.config import FARM_PROGRAM_ID, POOL_PROGRAM_ID, SOLANA_RPC_URLS
from atrix.discriminator import (
    DISCRIMINATORS,
    account_discriminator,
    instruction_discriminator,
    lookup_discriminator,
)
from atrix.errors import (
    AtrixError,
    BufferTooShortError,
    InvalidSeedsError,
    MalformedFeedError,
    NoValidBumpFoundError,
    OutOfBoundsError,
    TrailingBytesError,
    UnknownInstructionNameError,
    UnknownLayoutError,
)
from atrix.instructions import INSTRUCTION_LAYOUTS, build_instruction
from atrix.pda import (
    derive_crop_pda,
    derive_farm_pda,
    derive_harvester_pda,
    derive_staker_pda,
    find_program_address,
)
from atrix.pyth import Price, PriceFeed, PriceFeedSnapshot, PriceStatus, extract
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
)

__all__ = [
    "Accessor",
    "Client",
    "FARM_PROGRAM_ID",
    "FieldKind",
    "POOL_PROGRAM_ID",
    "SOLANA_RPC_URLS",
    "DISCRIMINATORS",
    "INSTRUCTION_LAYOUTS",
    "AtrixError",
    "BufferTooShortError",
    "InvalidSeedsError",
    "MalformedFeedError",
    "NoValidBumpFoundError",
    "OutOfBoundsError",
    "TrailingBytesError",
    "UnknownInstructionNameError",
    "UnknownLayoutError",
    "Clock",
    "CropAccount",
    "FarmAccount",
    "HarvesterAccount",
    "PlacedOrder",
    "PoolAccount",
    "ProtocolAccount",
    "StakerAccount",
    "Price",
    "PriceFeed",
    "PriceFeedSnapshot",
    "PriceStatus",
    "account_discriminator",
    "build_instruction",
    "decode",
    "derive_crop_pda",
    "derive_farm_pda",
    "derive_harvester_pda",
    "derive_staker_pda",
    "extract",
    "find_program_address",
    "instruction_discriminator",
    "lookup_discriminator",
    "pubkey_from_serum_slice",
    "read_field",
    "to_pubkey",
    "to_u64",
]
