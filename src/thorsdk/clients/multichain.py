"""Multi-chain client: wallet identity, swap submission and explorer links.

MultiChain owns the Midgard/THORNode clients, the HD wallet derived from the
active seed phrase and one ChainClient per chain that can submit swaps.
EVM chain clients are created automatically from the wallet; other chains can
be plugged in with register_client().
"""

import logging
from typing import Optional

import httpx

from thorsdk.chains import (
    Chain,
    Network,
    get_evm_chains,
    get_explorer_address_url,
    get_explorer_tx_url,
)
from thorsdk.clients.base import ChainClient
from thorsdk.clients.evm import EVMChainClient
from thorsdk.clients.midgard import MidgardClient, ThornodeClient
from thorsdk.config import Settings, get_settings
from thorsdk.entities import Swap
from thorsdk.errors import InvalidPhraseError, SubmissionError
from thorsdk.wallet import Wallet

logger = logging.getLogger(__name__)


def build_swap_memo(swap: Swap, recipient: str) -> str:
    """Build a THORChain swap memo: =:ASSET:DESTADDR:LIMIT."""
    limit = swap.min_output_amount.to_thor_units().base_amount
    return f"=:{swap.output_asset}:{recipient}:{limit}"


class MultiChain:
    """Facade over the THORChain APIs and per-chain signing clients."""

    def __init__(
        self,
        network: Optional[Network] = None,
        phrase: Optional[str] = None,
        settings: Optional[Settings] = None,
        midgard: Optional[MidgardClient] = None,
        thornode: Optional[ThornodeClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the multi-chain client.

        Args:
            network: THORChain network (defaults to settings.network)
            phrase: BIP39 seed phrase (defaults to settings.wallet_seed_phrase);
                empty for read-only use
            settings: Settings override (defaults to get_settings())
            midgard: Midgard client override
            thornode: THORNode client override
            transport: Optional httpx transport shared by all default clients

        Raises:
            InvalidPhraseError: If a non-empty phrase is rejected
        """
        self.settings = settings or get_settings()
        self.network = Network(network if network is not None else self.settings.network)
        self._transport = transport

        self.midgard = midgard or MidgardClient(
            self.settings.get_midgard_url(self.network),
            timeout=self.settings.http_timeout,
            transport=transport,
        )
        self.thornode = thornode or ThornodeClient(
            self.settings.get_thornode_url(self.network),
            timeout=self.settings.http_timeout,
            transport=transport,
        )

        self.wallet: Optional[Wallet] = None
        self._clients: dict[Chain, ChainClient] = {}
        self._custom_clients: dict[Chain, ChainClient] = {}

        if phrase is None:
            phrase = self.settings.wallet_seed_phrase
        if phrase:
            self.set_phrase(phrase)

    @property
    def has_wallet(self) -> bool:
        return self.wallet is not None

    def set_phrase(self, phrase: str) -> None:
        """Replace the active wallet identity.

        Must not be called while a swap is in flight.

        Raises:
            InvalidPhraseError: If the phrase is not a valid mnemonic
        """
        try:
            wallet = Wallet(phrase, self.network)
        except InvalidPhraseError:
            raise
        except Exception as e:
            raise InvalidPhraseError(f"Wallet derivation failed: {e}", cause=e) from e

        self.wallet = wallet
        self._clients = self._build_evm_clients(wallet)
        logger.info(f"Wallet identity updated on {self.network.value}")

    def _build_evm_clients(self, wallet: Wallet) -> dict[Chain, ChainClient]:
        clients: dict[Chain, ChainClient] = {}
        for chain in get_evm_chains():
            rpc_url = self.settings.get_rpc_url(chain, self.network)
            if not rpc_url:
                continue
            clients[chain] = EVMChainClient(
                chain=chain,
                rpc_url=rpc_url,
                private_key=wallet.get_private_key(chain),
                network=self.network,
                timeout=self.settings.http_timeout,
                expiry_seconds=self.settings.deposit_expiry_seconds,
                transport=self._transport,
            )
        return clients

    def register_client(self, client: ChainClient) -> None:
        """Use a custom client for a chain (takes priority over built-ins)."""
        self._custom_clients[client.chain] = client

    def get_client(self, chain: Chain) -> Optional[ChainClient]:
        chain = Chain(chain)
        return self._custom_clients.get(chain) or self._clients.get(chain)

    def get_address(self, chain: Chain) -> str:
        """Get the wallet address on a chain.

        Raises:
            RuntimeError: If no phrase is set
        """
        if self.wallet is None:
            raise RuntimeError("No wallet configured; call set_phrase() first")
        return self.wallet.get_address(chain)

    async def swap(self, swap: Swap) -> str:
        """Submit a swap plan.

        Returns:
            Hash of the inbound transaction

        Raises:
            SubmissionError: On any failure; the original exception is the cause
        """
        try:
            return await self._submit(swap)
        except SubmissionError:
            raise
        except Exception as e:
            logger.error(f"Swap submission failed: {type(e).__name__}: {e}")
            raise SubmissionError(f"Swap submission failed: {e}", cause=e) from e

    async def _submit(self, swap: Swap) -> str:
        if self.wallet is None:
            raise SubmissionError("No wallet configured; call set_phrase() first")

        input_chain = swap.input_asset.chain
        client = self.get_client(input_chain)
        if client is None:
            raise SubmissionError(f"No chain client for {input_chain.value}")

        inbound_addresses = await self.thornode.get_inbound_addresses()
        inbound = inbound_addresses.get(input_chain.value)
        if inbound is None or not inbound.address:
            raise SubmissionError(f"No inbound address for {input_chain.value}")
        if inbound.halted:
            raise SubmissionError(f"Trading is halted on {input_chain.value}")

        recipient = self.get_address(swap.output_asset.chain)
        memo = build_swap_memo(swap, recipient)

        logger.info(
            f"Submitting swap {swap.input_amount} -> {swap.output_asset} "
            f"(min out {swap.min_output_amount.amount.to_fixed()})"
        )
        tx_hash = await client.deposit(swap.input_amount, inbound, memo)
        logger.info(f"Swap submitted: {input_chain.value} tx {tx_hash}")
        return tx_hash

    def get_explorer_tx_url(self, chain: Chain, tx_hash: str) -> str:
        """Build a block explorer link for a transaction.

        Raises:
            SubmissionError: If the chain has no explorer or the hash is empty
        """
        if not tx_hash:
            raise SubmissionError(f"No transaction hash to link for {chain}")
        try:
            return get_explorer_tx_url(Chain(chain), self.network, tx_hash)
        except ValueError as e:
            raise SubmissionError(f"Cannot build explorer URL for {chain}: {e}", cause=e) from e

    def get_explorer_address_url(self, chain: Chain, address: str) -> str:
        """Build a block explorer link for an address."""
        return get_explorer_address_url(Chain(chain), self.network, address)
