"""Unit tests for Ethereum address and token validation."""

import pytest

from faucet.chains.ethereum.validator import normalize_address, validate_address, validate_token
from faucet.chains.exceptions import (
    EmptyAddressError,
    MalformedAddressError,
    MissingPrefixError,
    UnsupportedTokenError,
)


class TestEthereumAddressValidation:
    """Tests for Ethereum address validation."""

    def test_empty_address_invalid(self):
        with pytest.raises(EmptyAddressError):
            validate_address("")

    def test_no_0x_prefix_invalid(self):
        with pytest.raises(MissingPrefixError):
            validate_address("1" * 40)

    def test_short_address_invalid(self):
        with pytest.raises(MalformedAddressError):
            validate_address("0x1234")

    def test_starknet_length_invalid(self):
        with pytest.raises(MalformedAddressError):
            validate_address("0x" + "a" * 64)

    @pytest.mark.parametrize(
        "address",
        [
            "0x742d35Cc6634C0532925a3b844Bc9e7595f0bEb0",
            "0x0000000000000000000000000000000000000000",
            "0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF",
        ],
    )
    def test_valid_addresses(self, address):
        validate_address(address)


class TestEthereumNormalization:
    def test_checksum_form(self):
        assert (
            normalize_address("0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
            == "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        )


class TestEthereumTokenValidation:
    def test_eth_supported(self):
        validate_token("eth")

    def test_strk_unsupported(self):
        with pytest.raises(UnsupportedTokenError):
            validate_token("STRK")
