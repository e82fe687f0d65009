"""EVM chain client (ETH, BSC, AVAX).

EVM swaps go through the THORChain router contract:

    depositWithExpiry(address vault, address asset, uint256 amount,
                      string memo, uint256 expiration)

Native assets are sent as the call value with asset = 0x0. Transactions are
signed locally with eth_account and broadcast over JSON-RPC.
"""

import logging
import time
from typing import Any, Optional

import httpx
from eth_abi import encode
from eth_account import Account
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from thorsdk.chains import Chain, Network, get_chain_config
from thorsdk.clients.base import ChainClient, InboundAddress
from thorsdk.entities import AssetAmount

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
DEPOSIT_SIGNATURE = "depositWithExpiry(address,address,uint256,string,uint256)"

# Router deposits with a memo use well over the 21000 of a plain transfer
DEPOSIT_GAS_LIMIT = 120000


class RPCError(Exception):
    """Raised when the JSON-RPC node returns an error."""


class EVMChainClient(ChainClient):
    """Router-deposit client for EVM chains.

    Only native-asset deposits are supported; token deposits need an ERC20
    approval of the router first.
    """

    def __init__(
        self,
        chain: Chain,
        rpc_url: str,
        private_key: str,
        network: Network = Network.TESTNET,
        timeout: float = 30.0,
        expiry_seconds: int = 15 * 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        config = get_chain_config(chain)
        if not config.is_evm:
            raise ValueError(f"{chain.value} is not an EVM chain")

        self._chain = Chain(chain)
        self._config = config
        self.network = Network(network)
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.expiry_seconds = expiry_seconds
        self._account = Account.from_key(private_key)
        self._transport = transport

    @property
    def chain(self) -> Chain:
        return self._chain

    @property
    def address(self) -> str:
        return self._account.address

    async def _rpc(self, method: str, params: list) -> Any:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                self.rpc_url,
                json={
                    "jsonrpc": "2.0",
                    "method": method,
                    "params": params,
                    "id": 1,
                },
            )
            response.raise_for_status()
            data = response.json()

        if "error" in data:
            raise RPCError(f"{method} failed: {data['error']}")
        return data.get("result")

    async def get_gas_price(self) -> int:
        """Get current gas price in wei."""
        return int(await self._rpc("eth_gasPrice", []), 16)

    async def get_nonce(self) -> int:
        """Get transaction count (nonce) for the wallet address."""
        return int(await self._rpc("eth_getTransactionCount", [self.address, "pending"]), 16)

    def build_deposit_data(self, vault: str, amount: int, memo: str, expiration: int) -> bytes:
        """ABI-encode a router depositWithExpiry call."""
        selector = function_signature_to_4byte_selector(DEPOSIT_SIGNATURE)
        args = encode(
            ["address", "address", "uint256", "string", "uint256"],
            [to_checksum_address(vault), ZERO_ADDRESS, amount, memo, expiration],
        )
        return selector + args

    async def deposit(
        self,
        asset_amount: AssetAmount,
        inbound: InboundAddress,
        memo: str,
    ) -> str:
        """Deposit the native asset into the vault through the router."""
        asset = asset_amount.asset
        if asset.chain != self._chain:
            raise ValueError(f"{asset} cannot be sent by the {self._chain.value} client")
        if asset.symbol != self._config.symbol:
            raise ValueError(f"Token deposits are not supported ({asset}); approve the router first")
        if not inbound.router:
            raise ValueError(f"No router address for {self._chain.value} inbound vault")

        amount = asset_amount.amount.to_decimal(self._config.decimals).base_amount
        expiration = int(time.time()) + self.expiry_seconds

        nonce = await self.get_nonce()
        gas_price = await self.get_gas_price()

        tx = {
            "nonce": nonce,
            "gasPrice": gas_price,
            "gas": DEPOSIT_GAS_LIMIT,
            "to": to_checksum_address(inbound.router),
            "value": amount,
            "data": self.build_deposit_data(inbound.address, amount, memo, expiration),
            "chainId": self._config.chain_id(self.network),
        }

        signed_tx = self._account.sign_transaction(tx)
        raw_tx = "0x" + bytes(signed_tx.raw_transaction).hex()

        tx_hash = await self._rpc("eth_sendRawTransaction", [raw_tx])
        if not tx_hash:
            raise RPCError("eth_sendRawTransaction returned no transaction hash")

        logger.info(f"{self._chain.value} router deposit broadcast: {tx_hash}")
        return tx_hash
