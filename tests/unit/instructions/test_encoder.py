"""Tests for the instruction encoder."""

import struct

import pytest
from solders.instruction import AccountMeta, Instruction

from amm_client.config import ProgramConfig
from amm_client.errors import (
    DecodeError,
    EncodeError,
    FieldOverflow,
    InvalidAccount,
    MissingAccount,
    MissingField,
    Truncated,
)
from amm_client.instructions.encoder import check_fields, decode_instruction_data, encode
from amm_client.models.types import U64_MAX
from tests.helpers import MINT_A, MINT_B, MINT_C, POOL_AB, POOL_BC, USER, key

VAULT_A = key(0x41)
VAULT_B = key(0x42)
USER_IN = key(0x51)
USER_OUT = key(0x52)
TOKEN_PROGRAM = key(0x61)


def swap_accounts(**overrides):
    accounts = {
        "pool": POOL_AB,
        "token_a": MINT_A,
        "token_b": MINT_B,
        "vault_a": VAULT_A,
        "vault_b": VAULT_B,
        "user_in": USER_IN,
        "user_out": USER_OUT,
        "user": USER,
        "token_program": TOKEN_PROGRAM,
    }
    accounts.update(overrides)
    return accounts


def hop_accounts(pool, token_a, token_b, intermediate, output):
    return {
        "pool": pool,
        "token_a": token_a,
        "token_b": token_b,
        "vault_a": VAULT_A,
        "vault_b": VAULT_B,
        "intermediate": intermediate,
        "output": output,
    }


class TestEncodeData:
    """Tests for payload bytes."""

    def test_swap_bytes(self):
        """Swap: tag 3, u64 amount, one-byte direction flag."""
        payload = encode(
            "Swap", {"amount_in": 1_000_000, "direction_a_to_b": True}, swap_accounts()
        )

        assert payload.data == bytes([3]) + (1_000_000).to_bytes(8, "little") + b"\x01"
        assert payload.tag == 3
        assert payload.operation == "Swap"

    def test_swap_direction_false(self):
        payload = encode("Swap", {"amount_in": 5, "direction_a_to_b": False}, swap_accounts())
        assert payload.data[-1] == 0

    def test_add_liquidity_bytes(self):
        accounts = {
            "pool": POOL_AB,
            "token_a": MINT_A,
            "token_b": MINT_B,
            "vault_a": VAULT_A,
            "vault_b": VAULT_B,
            "lp_mint": key(0x43),
            "user_token_a": USER_IN,
            "user_token_b": USER_OUT,
            "user_lp": key(0x53),
            "user": USER,
            "token_program": TOKEN_PROGRAM,
        }
        payload = encode("AddLiquidity", {"amount_a": 7, "amount_b": 2**40}, accounts)
        assert payload.data == bytes([1]) + struct.pack("<QQ", 7, 2**40)
        assert len(payload.accounts) == 11

    def test_extra_fields_are_ignored(self):
        payload = encode(
            "Swap",
            {"amount_in": 1, "direction_a_to_b": True, "memo": "unused"},
            swap_accounts(),
        )
        assert len(payload.data) == 10

    def test_get_pool_info_is_tag_only(self):
        payload = encode("GetPoolInfo", {}, {"pool": POOL_AB})
        assert payload.data == bytes([6])
        assert payload.accounts == (AccountMeta(POOL_AB, False, False),)

    def test_find_pools_by_token(self):
        payload = encode("FindPoolsByToken", {"token": MINT_C}, {})
        assert payload.data == bytes([8]) + bytes(MINT_C)
        assert payload.accounts == ()

    def test_pubkey_field_accepts_base58(self):
        payload = encode("FindPoolsByToken", {"token": str(MINT_C)}, {})
        assert payload.data[1:] == bytes(MINT_C)


class TestEncodeAccounts:
    """Tests for account ordering and flags."""

    def test_swap_account_order_and_flags(self):
        payload = encode("Swap", {"amount_in": 1, "direction_a_to_b": True}, swap_accounts())

        assert payload.accounts == (
            AccountMeta(POOL_AB, False, True),
            AccountMeta(MINT_A, False, False),
            AccountMeta(MINT_B, False, False),
            AccountMeta(VAULT_A, False, True),
            AccountMeta(VAULT_B, False, True),
            AccountMeta(USER_IN, False, True),
            AccountMeta(USER_OUT, False, True),
            AccountMeta(USER, True, False),
            AccountMeta(TOKEN_PROGRAM, False, False),
        )

    def test_accounts_accept_base58(self):
        payload = encode(
            "Swap",
            {"amount_in": 1, "direction_a_to_b": True},
            swap_accounts(user=str(USER)),
        )
        assert payload.account_keys[7] == USER

    def test_missing_account(self):
        accounts = swap_accounts()
        del accounts["vault_b"]

        with pytest.raises(MissingAccount) as exc_info:
            encode("Swap", {"amount_in": 1, "direction_a_to_b": True}, accounts)

        assert exc_info.value.role == "vault_b"
        assert exc_info.value.hop is None

    def test_none_account_is_missing(self):
        with pytest.raises(MissingAccount):
            encode("Swap", {"amount_in": 1, "direction_a_to_b": True}, swap_accounts(user=None))

    def test_program_id_from_config(self):
        program = key(0x99)
        payload = encode(
            "GetPoolInfo", {}, {"pool": POOL_AB}, config=ProgramConfig(program_id=program)
        )
        assert payload.program_id == program

    def test_to_instruction(self):
        payload = encode("Swap", {"amount_in": 1, "direction_a_to_b": True}, swap_accounts())

        ix = payload.to_instruction()

        assert isinstance(ix, Instruction)
        assert ix.program_id == payload.program_id
        assert bytes(ix.data) == payload.data
        assert list(ix.accounts) == list(payload.accounts)


class TestEncodeMultihop:
    """Tests for MultihopSwap and MultihopSwapWithPath."""

    HEAD = {"user": USER, "token_program": TOKEN_PROGRAM, "user_input": USER_IN}

    def test_multihop_layout(self):
        """Three head slots, then seven slots per hop in pool order."""
        hops = [
            hop_accounts(POOL_AB, MINT_A, MINT_B, USER_OUT, USER_OUT),
            hop_accounts(POOL_BC, MINT_B, MINT_C, USER_OUT, key(0x54)),
        ]

        payload = encode(
            "MultihopSwap",
            {"amount_in": 100, "minimum_amount_out": 90},
            self.HEAD,
            hops=hops,
        )

        assert payload.data == bytes([4]) + struct.pack("<QQ", 100, 90)
        assert len(payload.accounts) == 3 + 7 * 2
        assert payload.accounts[0] == AccountMeta(USER, True, False)
        assert payload.accounts[2] == AccountMeta(USER_IN, False, True)
        assert payload.account_keys[3] == POOL_AB
        assert payload.account_keys[10] == POOL_BC
        assert payload.account_keys[16] == key(0x54)

    def test_multihop_without_hops(self):
        with pytest.raises(MissingAccount) as exc_info:
            encode("MultihopSwap", {"amount_in": 1, "minimum_amount_out": 0}, self.HEAD)
        assert exc_info.value.role == "pool"
        assert exc_info.value.hop == 0

    def test_multihop_missing_hop_account(self):
        incomplete = hop_accounts(POOL_BC, MINT_B, MINT_C, USER_OUT, USER_OUT)
        del incomplete["output"]
        hops = [hop_accounts(POOL_AB, MINT_A, MINT_B, USER_OUT, USER_OUT), incomplete]

        with pytest.raises(MissingAccount) as exc_info:
            encode(
                "MultihopSwap",
                {"amount_in": 1, "minimum_amount_out": 0},
                self.HEAD,
                hops=hops,
            )

        assert exc_info.value.role == "output"
        assert exc_info.value.hop == 1

    def test_hops_on_single_pool_instruction(self):
        with pytest.raises(ValueError):
            encode(
                "Swap",
                {"amount_in": 1, "direction_a_to_b": True},
                swap_accounts(),
                hops=[hop_accounts(POOL_AB, MINT_A, MINT_B, USER_OUT, USER_OUT)],
            )

    def test_with_path_prefix(self):
        """The token path is a u32 count followed by 32-byte keys."""
        payload = encode(
            "MultihopSwapWithPath",
            {
                "amount_in": 100,
                "minimum_amount_out": 90,
                "token_path": [MINT_A, MINT_B, MINT_C],
            },
            self.HEAD,
            hops=[
                hop_accounts(POOL_AB, MINT_A, MINT_B, USER_OUT, USER_OUT),
                hop_accounts(POOL_BC, MINT_B, MINT_C, USER_OUT, key(0x54)),
            ],
        )

        assert payload.data[0] == 5
        assert payload.data[17:21] == (3).to_bytes(4, "little")
        assert payload.data[21:] == bytes(MINT_A) + bytes(MINT_B) + bytes(MINT_C)
        assert len(payload.data) == 1 + 8 + 8 + 4 + 3 * 32


class TestEncodeErrors:
    """Tests for encoder input validation."""

    def test_unknown_operation(self):
        with pytest.raises(KeyError):
            encode("CollectFees", {}, {})

    def test_missing_field(self):
        with pytest.raises(MissingField) as exc_info:
            encode("Swap", {"amount_in": 1}, swap_accounts())
        assert exc_info.value.field == "direction_a_to_b"

    @pytest.mark.parametrize("value", [-1, U64_MAX + 1, 1.5, "10", True])
    def test_u64_overflow(self, value):
        with pytest.raises(FieldOverflow) as exc_info:
            encode("Swap", {"amount_in": value, "direction_a_to_b": True}, swap_accounts())
        assert exc_info.value.field == "amount_in"

    def test_u64_max_fits(self):
        payload = encode("Swap", {"amount_in": U64_MAX, "direction_a_to_b": True}, swap_accounts())
        assert payload.data[1:9] == b"\xff" * 8

    def test_bool_field_rejects_int(self):
        with pytest.raises(FieldOverflow):
            encode("Swap", {"amount_in": 1, "direction_a_to_b": 1}, swap_accounts())

    def test_bad_pubkey_field(self):
        with pytest.raises(FieldOverflow):
            encode("FindPoolsByToken", {"token": "not-a-key"}, {})

    def test_bad_account_address(self):
        with pytest.raises(InvalidAccount) as exc_info:
            encode(
                "Swap",
                {"amount_in": 1, "direction_a_to_b": True},
                swap_accounts(vault_a="not-a-key"),
            )
        assert exc_info.value.role == "vault_a"
        assert exc_info.value.address == "not-a-key"

    def test_check_fields_skips_absent(self):
        check_fields("MultihopSwap", {"amount_in": U64_MAX})
        with pytest.raises(FieldOverflow) as exc_info:
            check_fields("MultihopSwap", {"minimum_amount_out": -1})
        assert exc_info.value.field == "minimum_amount_out"

    def test_errors_share_base(self):
        for error in (MissingAccount, MissingField, FieldOverflow, InvalidAccount):
            assert issubclass(error, EncodeError)


class TestDecodeInstructionData:
    """Tests for parsing payloads back into fields."""

    def test_decode_swap(self):
        payload = encode("Swap", {"amount_in": 42, "direction_a_to_b": False}, swap_accounts())

        decoded = decode_instruction_data(payload.data)

        assert decoded.operation == "Swap"
        assert decoded.fields == {"amount_in": 42, "direction_a_to_b": False}

    def test_decode_with_path(self):
        data = (
            bytes([5])
            + struct.pack("<QQI", 10, 9, 2)
            + bytes(MINT_A)
            + bytes(MINT_B)
        )
        decoded = decode_instruction_data(data)
        assert decoded.fields["token_path"] == [MINT_A, MINT_B]
        assert decoded.fields["minimum_amount_out"] == 9

    def test_decode_empty(self):
        with pytest.raises(Truncated) as exc_info:
            decode_instruction_data(b"")
        assert exc_info.value.field == "tag"

    def test_decode_unknown_tag(self):
        with pytest.raises(DecodeError):
            decode_instruction_data(bytes([7]))

    def test_decode_truncated(self):
        with pytest.raises(Truncated) as exc_info:
            decode_instruction_data(bytes([3]) + b"\x00" * 4)
        assert exc_info.value.field == "amount_in"

    def test_decode_short_path(self):
        """A path count larger than the keys present is malformed."""
        data = bytes([5]) + struct.pack("<QQI", 10, 9, 3) + bytes(MINT_A)
        with pytest.raises(DecodeError):
            decode_instruction_data(data)
