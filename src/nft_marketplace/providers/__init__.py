"""External collaborators consumed by the controllers.

- ObjectStorageABC / MoralisIpfsStorage: image upload, URL resolution
- ContractRegistryABC / StaticContractRegistry: contract address per token standard
"""
from nft_marketplace.providers.contracts import (ContractRegistryABC,
                                                 StaticContractRegistry)
from nft_marketplace.providers.storage import (MoralisIpfsStorage,
                                               ObjectStorageABC)

__all__ = [
    "ContractRegistryABC",
    "MoralisIpfsStorage",
    "ObjectStorageABC",
    "StaticContractRegistry",
]
