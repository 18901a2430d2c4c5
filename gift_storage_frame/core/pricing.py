"""Storage unit pricing read from the on-chain storage registry."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from web3 import AsyncHTTPProvider, AsyncWeb3

from ..types import STORAGE_REGISTRY_ADDRESS


logger = logging.getLogger(__name__)


# Subset of the Farcaster StorageRegistry ABI used by this frame
STORAGE_REGISTRY_ABI = [
    {
        "inputs": [],
        "name": "unitPrice",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [
            {"name": "fid", "type": "uint256"},
            {"name": "units", "type": "uint256"}
        ],
        "name": "rent",
        "outputs": [{"name": "overpayment", "type": "uint256"}],
        "stateMutability": "payable",
        "type": "function"
    }
]


class PricingOracle(ABC):
    """Reports the price of one storage unit in wei."""

    @abstractmethod
    async def unit_price(self) -> int:
        ...

    async def aclose(self):
        pass


class StorageRegistryPricingOracle(PricingOracle):
    """Calls ``unitPrice()`` on the storage registry contract."""

    def __init__(
        self,
        rpc_url: str,
        registry_address: str = STORAGE_REGISTRY_ADDRESS,
        w3: Optional[AsyncWeb3] = None
    ):
        self.w3 = w3 or AsyncWeb3(AsyncHTTPProvider(rpc_url))
        self.registry = self.w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(registry_address),
            abi=STORAGE_REGISTRY_ABI
        )

    async def unit_price(self) -> int:
        price = await self.registry.functions.unitPrice().call()
        logger.info(f"Storage registry unit price: {price} wei")
        return int(price)

    async def aclose(self):
        await self.w3.provider.disconnect()
