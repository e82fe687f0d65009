"""BIP39 seed phrase handling and per-chain address derivation.

All chains derive from one mnemonic, using the same paths as common
multi-chain wallets:

    BTC, LTC      m/84'/coin'/0'/0/0   (native SegWit)
    BCH, DOGE     m/44'/coin'/0'/0/0   (P2PKH)
    ETH/BSC/AVAX  m/44'/60'/0'/0/0
    GAIA          m/44'/118'/0'/0/0
    THOR          m/44'/931'/0'/0/0
    BNB           m/44'/714'/0'/0/0

Non-mainnet networks use testnet coin types and address prefixes.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from bip_utils import (
    AtomAddrEncoder,
    Bip32Secp256k1,
    Bip39MnemonicValidator,
    Bip39SeedGenerator,
    EthAddrEncoder,
    P2PKHAddrEncoder,
    P2WPKHAddrEncoder,
)

from thorsdk.chains import Chain, Network, get_chain_config
from thorsdk.errors import InvalidPhraseError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Derivation:
    purpose: int
    coin_type: int
    testnet_coin_type: int
    encoding: str  # p2wpkh, p2pkh, eth, bech32
    hrp: Optional[str] = None
    testnet_hrp: Optional[str] = None
    net_ver: bytes = b""
    testnet_net_ver: bytes = b""


DERIVATIONS: dict[Chain, _Derivation] = {
    Chain.BTC: _Derivation(84, 0, 1, "p2wpkh", hrp="bc", testnet_hrp="tb"),
    Chain.LTC: _Derivation(84, 2, 1, "p2wpkh", hrp="ltc", testnet_hrp="tltc"),
    Chain.BCH: _Derivation(44, 145, 1, "p2pkh", net_ver=b"\x00", testnet_net_ver=b"\x6f"),
    Chain.DOGE: _Derivation(44, 3, 1, "p2pkh", net_ver=b"\x1e", testnet_net_ver=b"\x71"),
    Chain.ETH: _Derivation(44, 60, 60, "eth"),
    Chain.BSC: _Derivation(44, 60, 60, "eth"),
    Chain.AVAX: _Derivation(44, 60, 60, "eth"),
    Chain.GAIA: _Derivation(44, 118, 118, "bech32", hrp="cosmos", testnet_hrp="cosmos"),
    Chain.THOR: _Derivation(44, 931, 931, "bech32", hrp="thor", testnet_hrp="tthor"),
    Chain.BNB: _Derivation(44, 714, 714, "bech32", hrp="bnb", testnet_hrp="tbnb"),
}


def validate_phrase(phrase: str) -> bool:
    """Check that a phrase is a valid BIP39 mnemonic (words and checksum)."""
    if not isinstance(phrase, str) or not phrase.strip():
        return False
    try:
        return bool(Bip39MnemonicValidator().IsValid(" ".join(phrase.split())))
    except Exception as e:
        logger.debug(f"Phrase validation failed: {type(e).__name__}")
        return False


class Wallet:
    """HD wallet derived from a BIP39 mnemonic.

    Security: the phrase and derived private keys only live in memory and are
    never logged.
    """

    def __init__(self, phrase: str, network: Network = Network.TESTNET):
        if not validate_phrase(phrase):
            raise InvalidPhraseError()

        self.network = Network(network)
        seed = Bip39SeedGenerator(" ".join(phrase.split())).Generate()
        self._root = Bip32Secp256k1.FromSeed(seed)
        self._address_cache: dict[Chain, str] = {}

    @property
    def testnet(self) -> bool:
        return self.network != Network.MAINNET

    def get_derivation_path(self, chain: Chain) -> str:
        derivation = self._get_derivation(chain)
        coin_type = derivation.testnet_coin_type if self.testnet else derivation.coin_type
        return f"m/{derivation.purpose}'/{coin_type}'/0'/0/0"

    def get_address(self, chain: Chain) -> str:
        """Get the wallet's receiving address on a chain."""
        chain = Chain(chain)
        if chain not in self._address_cache:
            self._address_cache[chain] = self._derive_address(chain)
        return self._address_cache[chain]

    def get_private_key(self, chain: Chain) -> str:
        """Get the hex private key for an EVM chain."""
        chain = Chain(chain)
        if not get_chain_config(chain).is_evm:
            raise ValueError(f"Private key export is only supported for EVM chains, not {chain.value}")
        node = self._root.DerivePath(self.get_derivation_path(chain))
        return "0x" + node.PrivateKey().Raw().ToHex()

    def _get_derivation(self, chain: Chain) -> _Derivation:
        derivation = DERIVATIONS.get(Chain(chain))
        if derivation is None:
            raise ValueError(f"No derivation for chain: {chain}")
        return derivation

    def _derive_address(self, chain: Chain) -> str:
        derivation = self._get_derivation(chain)
        public_key = self._root.DerivePath(self.get_derivation_path(chain)).PublicKey().KeyObject()

        if derivation.encoding == "p2wpkh":
            hrp = derivation.testnet_hrp if self.testnet else derivation.hrp
            return P2WPKHAddrEncoder.EncodeKey(public_key, hrp=hrp, wit_ver=0)

        if derivation.encoding == "p2pkh":
            net_ver = derivation.testnet_net_ver if self.testnet else derivation.net_ver
            return P2PKHAddrEncoder.EncodeKey(public_key, net_ver=net_ver)

        if derivation.encoding == "eth":
            return EthAddrEncoder.EncodeKey(public_key)

        hrp = derivation.testnet_hrp if self.testnet else derivation.hrp
        return AtomAddrEncoder.EncodeKey(public_key, hrp=hrp)
