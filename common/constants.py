"""Project-wide constants (chunk size, confirmation depth, network presets)."""

CHUNK_SIZE_BYTES: int = 32_000  # onchfs chunk size
CID_PREFIX: bytes = b"\x01"  # file inode marker in the CID preimage
ARTIFACT_URI_SCHEME: str = "onchfs://"

CONFIRMATIONS: int = 1
SUBMISSION_INTERVAL_SECONDS: float = 1.0
CONFIRMATION_POLL_INTERVAL_SECONDS: float = 2.0
CONFIRMATION_TIMEOUT_SECONDS: float = 180.0

# Views are simulated, the caller only has to be a well-formed address.
VIEW_CALLER_ADDRESS: str = "tz1burnburnburnburnburnburnburjAYjjX"

ROYALTY_DECIMALS: int = 4
DEFAULT_ROYALTY_PERCENT: int = 10
DEFAULT_LICENSE: str = "No License / All Rights Reserved"

STORAGE_COST_PER_CHUNK_TEZ: float = 8.06

NETWORKS = {
    "mainnet": {
        "onchfs_contract": "KT1Ae7dT1gsLw2tRnUMXSCmEyF74KVkM6LUo",
        "marketplace_url": "https://objkt.com",
    },
    "ghostnet": {
        "onchfs_contract": "KT1FA8AGGcJha6S6MqfBUiibwTaYhK8u7s9Q",
        "marketplace_url": "https://ghostnet.objkt.com",
    },
}
DEFAULT_NETWORK: str = "mainnet"
