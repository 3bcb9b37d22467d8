"""Chain access: ABIs, web3 gateway, and the signer queue."""

from arthub.infrastructure.chain.gateway import Web3ChainGateway
from arthub.infrastructure.chain.signer_queue import SignerQueue

__all__ = ["SignerQueue", "Web3ChainGateway"]
