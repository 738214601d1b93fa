"""Contract address assignment for newly created collections."""
from abc import ABC, abstractmethod

from nft_marketplace.core.exceptions import ValidationFailedError


class ContractRegistryABC(ABC):
    """Resolves the contract a new collection is minted under."""

    @abstractmethod
    async def assign_contract(self, blockchain: str) -> str:
        """Return the contract address for a collection on `blockchain`.

        Raises:
            ValidationFailedError: the token standard is not supported.
        """


class StaticContractRegistry(ContractRegistryABC):
    """Shared marketplace contracts, one per token standard.

    Every collection of a standard gets the same address; there is no
    per-collection deployment.
    """

    DEFAULT_CONTRACTS = {
        "ERC721": "0x8113901EEd7d41Db3c9D327484be1870605e4144",
        "ERC1155": "0xaf8fC965cF9572e5178ae95733b1631440e7f5C8",
    }

    def __init__(self, contracts: dict[str, str] | None = None) -> None:
        self._contracts = dict(contracts or self.DEFAULT_CONTRACTS)

    async def assign_contract(self, blockchain: str) -> str:
        contract = self._contracts.get(blockchain)
        if contract is None:
            supported = ", ".join(sorted(self._contracts))
            raise ValidationFailedError(
                f"blockchain '{blockchain}' is not supported. Available: {supported}"
            )
        return contract
