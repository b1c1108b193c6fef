"""
Signing identity derivation.

Two deterministic schemes, one per backend:

- sr25519 (Substrate / Aleph Zero) via substrate-interface ``Keypair``.
  Accepts a BIP-39 mnemonic, a derivation URI (``//Alice``,
  ``<mnemonic>//hard/soft``) or a 0x-prefixed hex seed.
- secp256k1 (EVM) via eth-account. Accepts a BIP-39 mnemonic, derived
  along a BIP-44 path, or a 0x-prefixed hex private key.

The same input always yields the same address.
"""

from __future__ import annotations

import re

from eth_account import Account
from substrateinterface import Keypair, KeypairType

from ..config import DEFAULT_DERIVATION_PATH, DEFAULT_SS58_FORMAT
from ..errors import InvalidSecretError
from ..models import SigningIdentity


SR25519 = "sr25519"
SECP256K1 = "secp256k1"

MNEMONIC_WORD_COUNTS = (12, 15, 18, 21, 24)

_HEX_SECRET = re.compile(r"^0x[0-9a-fA-F]{64}$")

Account.enable_unaudited_hdwallet_features()


def _check_phrase(secret_phrase: str) -> str:
    phrase = " ".join(secret_phrase.split())
    if not phrase:
        raise InvalidSecretError(
            "Secret phrase is empty. Set COOKIECHAIN_SECRET_PHRASE or run 'cookiechain init'."
        )
    return phrase


def _check_word_count(mnemonic: str) -> None:
    words = mnemonic.split(" ")
    if len(words) not in MNEMONIC_WORD_COUNTS:
        raise InvalidSecretError(
            f"Mnemonic must have {', '.join(map(str, MNEMONIC_WORD_COUNTS))} words, got {len(words)}"
        )


def derive_sr25519(secret_phrase: str, ss58_format: int = DEFAULT_SS58_FORMAT) -> SigningIdentity:
    """
    Derive a Substrate account.

    Args:
        secret_phrase: Mnemonic, derivation URI or 0x hex seed
        ss58_format: SS58 address prefix (42 = generic Substrate)

    Returns:
        SigningIdentity with an SS58 address and the Keypair as signer

    Raises:
        InvalidSecretError: If the phrase is empty or rejected by the scheme
    """
    phrase = _check_phrase(secret_phrase)

    try:
        if "/" in phrase or _HEX_SECRET.match(phrase):
            mnemonic = phrase.split("/", 1)[0].strip()
            if mnemonic and not mnemonic.startswith("0x"):
                _check_word_count(mnemonic)
            keypair = Keypair.create_from_uri(
                phrase, ss58_format=ss58_format, crypto_type=KeypairType.SR25519
            )
        else:
            _check_word_count(phrase)
            keypair = Keypair.create_from_mnemonic(
                phrase, ss58_format=ss58_format, crypto_type=KeypairType.SR25519
            )
    except InvalidSecretError:
        raise
    except (ValueError, TypeError) as exc:
        raise InvalidSecretError(f"Invalid secret phrase: {exc}") from exc

    return SigningIdentity(address=keypair.ss58_address, scheme=SR25519, signer=keypair)


def derive_secp256k1(
    secret_phrase: str,
    derivation_path: str = DEFAULT_DERIVATION_PATH,
) -> SigningIdentity:
    """
    Derive an EVM account.

    Args:
        secret_phrase: Mnemonic or 0x-prefixed hex private key
        derivation_path: BIP-44 path used for mnemonics

    Returns:
        SigningIdentity with a checksummed 0x address and the LocalAccount as signer

    Raises:
        InvalidSecretError: If the phrase is empty or rejected by the scheme
    """
    phrase = _check_phrase(secret_phrase)

    try:
        if _HEX_SECRET.match(phrase):
            account = Account.from_key(phrase)
        else:
            _check_word_count(phrase)
            account = Account.from_mnemonic(phrase, account_path=derivation_path)
    except InvalidSecretError:
        raise
    except Exception as exc:
        # eth-account reports bad mnemonics with eth_utils.ValidationError
        raise InvalidSecretError(f"Invalid secret phrase: {exc}") from exc

    return SigningIdentity(address=account.address, scheme=SECP256K1, signer=account)
