"""Configuration types for gift_storage_frame."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


# Settlement side: Farcaster storage registry on Optimism
SETTLEMENT_CHAIN_ID = "eip155:10"
STORAGE_REGISTRY_ADDRESS = "0x00000000fcCe7f938e7aE6D3c335bD6a1a7c593D"
EXPLORER_TX_URL = "https://optimistic.etherscan.io/tx/{tx_hash}"

# Payer side: USDC on Base is the only accepted payment currency
PAYMENT_CHAIN_ID = "eip155:8453"
USDC_BASE_ADDRESS = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
PAYMENT_CURRENCY = f"{PAYMENT_CHAIN_ID}/erc20:{USDC_BASE_ADDRESS}"

XMTP_PROTOCOL_MARKER = "xmtp"


class OpenFramesConfig(BaseModel):
    """OpenFrames meta tags advertised on every frame."""
    client: str = XMTP_PROTOCOL_MARKER
    version: str = "vNext"
    of_version: str = "vNext"


class PaymentConfig(BaseModel):
    """Fixed chain/currency pairing for storage gifts."""
    settlement_chain_id: str = SETTLEMENT_CHAIN_ID
    storage_registry_address: str = STORAGE_REGISTRY_ADDRESS
    payment_chain_id: str = PAYMENT_CHAIN_ID
    payment_currency: str = PAYMENT_CURRENCY
    explorer_tx_url: str = EXPLORER_TX_URL
    storage_units: int = Field(default=1, ge=1)


class FrameServerConfig(BaseModel):
    """Configuration for the frame server and its external services"""
    base_url: str = "http://localhost:5173"
    base_path: str = "/api/frame"
    glide_project_id: Optional[str] = None
    glide_api_url: str = "https://api.paywithglide.xyz"
    neynar_api_url: str = "https://api.neynar.com"
    neynar_api_key: Optional[str] = None
    optimism_rpc_url: str = "https://mainnet.optimism.io"
    provider_timeout_seconds: float = 120.0
    payment: PaymentConfig = Field(default_factory=PaymentConfig)
    open_frames: OpenFramesConfig = Field(default_factory=OpenFramesConfig)

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "FrameServerConfig":
        """Build configuration from environment variables and an optional .env file.

        A missing NEYNAR_API_KEY is accepted here; identity lookups fail when
        they are attempted instead.
        """
        load_dotenv(dotenv_path)
        defaults = cls()
        return cls(
            base_url=os.getenv("FRAME_BASE_URL", defaults.base_url),
            base_path=os.getenv("FRAME_BASE_PATH", defaults.base_path),
            glide_project_id=os.getenv("GLIDE_PROJECT_ID"),
            glide_api_url=os.getenv("GLIDE_API_URL", defaults.glide_api_url),
            neynar_api_url=os.getenv("NEYNAR_API_URL", defaults.neynar_api_url),
            neynar_api_key=os.getenv("NEYNAR_API_KEY"),
            optimism_rpc_url=os.getenv("OPTIMISM_RPC_URL", defaults.optimism_rpc_url),
            provider_timeout_seconds=float(
                os.getenv("PROVIDER_TIMEOUT_SECONDS", defaults.provider_timeout_seconds)
            ),
        )

    @property
    def frame_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.base_path}"
