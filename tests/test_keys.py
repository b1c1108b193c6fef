"""Unit tests for sigil/keys.py."""

from __future__ import annotations

import pytest

from conftest import ALICE_ADDRESS, ALICE_URI, TEST_ADDRESS, TEST_MNEMONIC, TEST_PRIVATE_KEY
from cookiechain.errors import InvalidSecretError
from cookiechain.sigil.keys import SECP256K1, SR25519, derive_secp256k1, derive_sr25519


class TestSr25519:

    def test_dev_uri(self) -> None:
        identity = derive_sr25519(ALICE_URI)
        assert identity.address == ALICE_ADDRESS
        assert identity.scheme == SR25519

    def test_mnemonic_is_deterministic(self) -> None:
        first = derive_sr25519(TEST_MNEMONIC)
        second = derive_sr25519(TEST_MNEMONIC)
        assert first.address == second.address
        assert first == second

    def test_whitespace_is_normalised(self) -> None:
        padded = "  " + TEST_MNEMONIC.replace(" ", "   ") + "\n"
        assert derive_sr25519(padded).address == derive_sr25519(TEST_MNEMONIC).address

    def test_hard_derivation_changes_address(self) -> None:
        root = derive_sr25519(TEST_MNEMONIC)
        child = derive_sr25519(TEST_MNEMONIC + "//cookies")
        assert root.address != child.address

    def test_ss58_format_changes_encoding(self) -> None:
        generic = derive_sr25519(ALICE_URI, ss58_format=42)
        polkadot = derive_sr25519(ALICE_URI, ss58_format=0)
        assert generic.address != polkadot.address
        assert generic.signer.public_key == polkadot.signer.public_key

    def test_empty_phrase(self) -> None:
        with pytest.raises(InvalidSecretError, match="empty"):
            derive_sr25519("   ")

    def test_wrong_word_count(self) -> None:
        with pytest.raises(InvalidSecretError, match="words"):
            derive_sr25519("resist oak face crash bean")

    def test_wrong_word_count_with_path(self) -> None:
        with pytest.raises(InvalidSecretError, match="words"):
            derive_sr25519("resist oak face//hard")

    def test_signer_not_in_repr(self) -> None:
        identity = derive_sr25519(ALICE_URI)
        assert "signer" not in repr(identity)


class TestSecp256k1:

    def test_mnemonic_account_zero(self) -> None:
        identity = derive_secp256k1(TEST_MNEMONIC)
        assert identity.address == TEST_ADDRESS
        assert identity.scheme == SECP256K1

    def test_private_key(self) -> None:
        assert derive_secp256k1(TEST_PRIVATE_KEY).address == TEST_ADDRESS

    def test_derivation_path(self) -> None:
        other = derive_secp256k1(TEST_MNEMONIC, derivation_path="m/44'/60'/0'/0/1")
        assert other.address == "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"

    def test_mnemonic_is_deterministic(self) -> None:
        assert derive_secp256k1(TEST_MNEMONIC) == derive_secp256k1(TEST_MNEMONIC)

    def test_unknown_word(self) -> None:
        phrase = " ".join(["cookiemonster"] * 12)
        with pytest.raises(InvalidSecretError):
            derive_secp256k1(phrase)

    def test_empty_phrase(self) -> None:
        with pytest.raises(InvalidSecretError):
            derive_secp256k1("")

    def test_wrong_word_count(self) -> None:
        with pytest.raises(InvalidSecretError, match="words"):
            derive_secp256k1("one two three")
