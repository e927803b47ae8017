"""Tests for address helpers and uint256 validation."""

import pytest
from pydantic import ValidationError

from simpledex.constants import UINT256_MAX
from simpledex.models.api import SwapRequest, TransferRequest
from simpledex.models.types import is_valid_address, normalize_address, short, validate_uint256
from tests.helpers import TOKEN_A, TOKEN_B, USER1


class TestValidateUint256:
    def test_int_to_string(self):
        assert validate_uint256(42) == "42"

    def test_string_normalized(self):
        assert validate_uint256("0042") == "42"

    def test_max(self):
        assert validate_uint256(str(UINT256_MAX)) == str(UINT256_MAX)

    @pytest.mark.parametrize("value", [-1, "-1", UINT256_MAX + 1, "1.5", "abc", True, 1.0])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            validate_uint256(value)


class TestAddresses:
    def test_normalize(self):
        assert normalize_address(TOKEN_A.upper()) == TOKEN_A
        assert normalize_address(TOKEN_A[2:]) == TOKEN_A

    def test_normalize_validates_on_request(self):
        with pytest.raises(ValueError, match="Invalid address"):
            normalize_address("0x1234", validate=True)

    def test_is_valid_address(self):
        assert is_valid_address(TOKEN_A)
        assert not is_valid_address(TOKEN_A[2:])
        assert not is_valid_address("0x" + "g" * 40)
        assert not is_valid_address(None)  # type: ignore[arg-type]

    def test_short(self):
        assert short(TOKEN_B) == "bbbbbbbb"


class TestRequestModels:
    def test_swap_request_aliases(self):
        req = SwapRequest.model_validate(
            {"trader": USER1, "tokenIn": TOKEN_A, "tokenOut": TOKEN_B, "amountIn": 10}
        )
        assert req.amount_in == "10"
        assert req.min_amount_out == "0"

    def test_swap_request_rejects_bad_address(self):
        with pytest.raises(ValidationError):
            SwapRequest.model_validate(
                {"trader": "nobody", "tokenIn": TOKEN_A, "tokenOut": TOKEN_B, "amountIn": "10"}
            )

    def test_swap_request_rejects_negative_amount(self):
        with pytest.raises(ValidationError):
            SwapRequest.model_validate(
                {"trader": USER1, "tokenIn": TOKEN_A, "tokenOut": TOKEN_B, "amountIn": "-10"}
            )

    def test_transfer_request_from_to(self):
        req = TransferRequest.model_validate({"token": TOKEN_A, "from": USER1, "to": TOKEN_B, "amount": "1"})
        assert req.sender == USER1
        assert req.recipient == TOKEN_B
