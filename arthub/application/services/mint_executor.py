"""Mint executor: factory call construction, submission and CollectionCreated decoding."""

import logging

from arthub.application.dtos.chain import ContractCall, TxReceipt
from arthub.application.dtos.settlement import ArtworkMetadata, MintResult
from arthub.application.interfaces.services import (
    BroadcastCallback,
    IChainGateway,
    ISignerQueue,
)
from arthub.domain.enums import SettlementStep
from arthub.domain.exceptions import MintDecodeException, TransactionRevertedException

logger = logging.getLogger(__name__)

FACTORY_ABI = "factory"
COLLECTION_CREATED = "CollectionCreated"


class MintExecutor:
    """Creates the collector's NFT collection through the factory (IMintExecutor).

    The minted collection is identified from the typed CollectionCreated
    event whose recipient is the collector, never from log position.
    """

    def __init__(
        self,
        gateway: IChainGateway,
        signer_queue: ISignerQueue,
        royalty_bps: int,
        symbol: str,
    ) -> None:
        self.gateway = gateway
        self.signer_queue = signer_queue
        self.royalty_bps = royalty_bps
        self.symbol = symbol

    def build_call(self, metadata: ArtworkMetadata, artist: str, recipient: str) -> ContractCall:
        """createCollection(name, symbol, baseURI, artist, royaltyBps, recipient)."""
        return ContractCall(
            address=self.gateway.factory_address,
            abi_name=FACTORY_ABI,
            function="createCollection",
            args=(
                metadata.name,
                self.symbol,
                metadata.token_uri,
                artist,
                self.royalty_bps,
                recipient,
            ),
            label=SettlementStep.MINT.value,
        )

    def decode(self, receipt: TxReceipt, recipient: str) -> MintResult:
        """Extract the minted collection from a successful mint receipt.

        Raises:
            MintDecodeException: No CollectionCreated event for this recipient.
        """
        events = self.gateway.decode_events(receipt, FACTORY_ABI, COLLECTION_CREATED)
        wanted = recipient.lower()
        for args in events:
            if str(args.get("recipient", "")).lower() == wanted:
                return MintResult(
                    collection_address=str(args["collection"]),
                    token_id=int(args["tokenId"]),
                    tx_hash=receipt.tx_hash,
                )
        raise MintDecodeException(
            receipt.tx_hash,
            f"{len(events)} {COLLECTION_CREATED} event(s), none for recipient {recipient}",
        )

    async def mint(
        self,
        metadata: ArtworkMetadata,
        recipient: str,
        artist: str,
        on_broadcast: BroadcastCallback | None = None,
    ) -> MintResult:
        """Submit the factory call through the signer queue and decode the result.

        Raises:
            TransactionRevertedException: Mint mined but reverted.
            MintDecodeException: Receipt carries no matching event.
        """
        call = self.build_call(metadata, artist=artist, recipient=recipient)
        receipt = await self.signer_queue.enqueue(call, on_broadcast=on_broadcast)
        if not receipt.success:
            raise TransactionRevertedException(SettlementStep.MINT.value, receipt.tx_hash)
        result = self.decode(receipt, recipient)
        logger.info(
            "Minted collection %s token %s for %s (tx %s)",
            result.collection_address,
            result.token_id,
            recipient,
            result.tx_hash,
        )
        return result
