"""Tests for the layout registry."""

import pytest

from amm_client.errors import UnrecognizedSchema
from amm_client.layouts.registry import (
    INSTRUCTION_LAYOUTS,
    POOL_SCHEMAS,
    FieldKind,
    PoolKind,
    instruction_layout_for,
    instruction_layout_for_tag,
    pool_schema_for,
    pool_schema_for_kind,
)


class TestPoolSchemas:
    """Tests for pool account schema lookup."""

    @pytest.mark.parametrize(
        "length,kind,fee_bps",
        [
            (57, PoolKind.NATIVE_NO_FEE, 0),
            (89, PoolKind.REGULAR_NO_FEE, 0),
            (137, PoolKind.REGULAR_WITH_FEE, 30),
            (169, PoolKind.NATIVE_WITH_FEE, 30),
        ],
    )
    def test_schema_selected_by_length(self, length, kind, fee_bps):
        schema = pool_schema_for(length)
        assert schema.kind is kind
        assert schema.length == length
        assert schema.fee_bps == fee_bps

    @pytest.mark.parametrize("length", [0, 32, 56, 58, 88, 90, 136, 168, 170, 1024])
    def test_unknown_length_raises(self, length):
        with pytest.raises(UnrecognizedSchema) as exc_info:
            pool_schema_for(length)
        assert exc_info.value.length == length

    def test_only_four_schemas(self):
        assert sorted(POOL_SCHEMAS) == [57, 89, 137, 169]

    def test_regular_offsets(self):
        """Regular pool fields sit where the program writes them."""
        schema = pool_schema_for(89)
        offsets = {f.name: (f.offset, f.width) for f in schema.fields}
        assert offsets == {
            "token_a": (0, 32),
            "token_b": (32, 32),
            "bump": (64, 1),
            "reserve_a": (65, 8),
            "reserve_b": (73, 8),
            "total_lp_supply": (81, 8),
        }

    def test_regular_fee_offsets(self):
        schema = pool_schema_for(137)
        assert schema.get_field("fee_collected_a").offset == 89
        assert schema.get_field("fee_collected_b").offset == 97
        assert schema.get_field("fee_treasury").offset == 105

    def test_native_no_fee_offsets(self):
        schema = pool_schema_for(57)
        offsets = {f.name: f.offset for f in schema.fields}
        assert offsets == {
            "token_mint": 0,
            "bump": 32,
            "sol_reserve": 33,
            "token_reserve": 41,
            "total_lp_supply": 49,
        }

    def test_native_with_fee_offsets(self):
        schema = pool_schema_for(169)
        offsets = {f.name: f.offset for f in schema.fields}
        assert offsets["native_mint"] == 0
        assert offsets["token_mint"] == 32
        assert offsets["sol_reserve"] == 65
        assert offsets["fee_treasury"] == 105
        assert offsets["token_mint_repeat"] == 137

    def test_fields_are_contiguous(self):
        """Every schema is packed with no gaps and ends at its length."""
        for schema in POOL_SCHEMAS.values():
            position = 0
            for spec in schema.fields:
                assert spec.offset == position
                position += spec.width
            assert position == schema.length

    def test_lookup_by_kind(self):
        assert pool_schema_for_kind(PoolKind.REGULAR_WITH_FEE).length == 137

    def test_unknown_field_raises(self):
        with pytest.raises(KeyError):
            pool_schema_for(89).get_field("fee_treasury")


class TestInstructionLayouts:
    """Tests for instruction layout lookup."""

    def test_tags(self):
        tags = {name: layout.tag for name, layout in INSTRUCTION_LAYOUTS.items()}
        assert tags == {
            "InitPool": 0,
            "AddLiquidity": 1,
            "RemoveLiquidity": 2,
            "Swap": 3,
            "MultihopSwap": 4,
            "MultihopSwapWithPath": 5,
            "GetPoolInfo": 6,
            "FindPoolsByToken": 8,
            "GetSwapQuote": 9,
            "InitNativeSOLPool": 11,
            "SwapNativeSOLToToken": 12,
            "SwapTokenToNativeSOL": 13,
            "AddLiquidityNativeSOL": 14,
            "RemoveLiquidityNativeSOL": 15,
        }

    def test_unknown_operation_is_key_error(self):
        with pytest.raises(KeyError):
            instruction_layout_for("CollectFees")

    def test_reverse_lookup(self):
        assert instruction_layout_for_tag(4).name == "MultihopSwap"
        with pytest.raises(KeyError):
            instruction_layout_for_tag(7)

    def test_swap_layout(self):
        layout = instruction_layout_for("Swap")
        assert [(f.name, f.kind, f.offset) for f in layout.fields] == [
            ("amount_in", FieldKind.U64, 1),
            ("direction_a_to_b", FieldKind.BOOL, 9),
        ]
        assert layout.fixed_size == 10
        roles = [slot.role for slot in layout.account_slots]
        assert roles == [
            "pool",
            "token_a",
            "token_b",
            "vault_a",
            "vault_b",
            "user_in",
            "user_out",
            "user",
            "token_program",
        ]

    def test_multihop_fields_and_slots(self):
        layout = instruction_layout_for("MultihopSwap")
        assert [(f.name, f.offset) for f in layout.fields] == [
            ("amount_in", 1),
            ("minimum_amount_out", 9),
        ]
        assert layout.fixed_size == 17
        assert layout.is_multihop
        assert [s.role for s in layout.account_slots] == ["user", "token_program", "user_input"]
        assert len(layout.hop_slots) == 7
        assert layout.account_count(hop_count=3) == 3 + 21

    def test_multihop_with_path_is_variable_width(self):
        layout = instruction_layout_for("MultihopSwapWithPath")
        assert layout.fields[-1].kind is FieldKind.PUBKEY_VEC
        assert layout.fixed_size is None
        assert layout.hop_slots == instruction_layout_for("MultihopSwap").hop_slots

    def test_signer_flags(self):
        """Only the user slot signs in every instruction."""
        for layout in INSTRUCTION_LAYOUTS.values():
            for slot in layout.account_slots + layout.hop_slots:
                assert slot.is_signer == (slot.role == "user")

    def test_read_only_queries(self):
        assert instruction_layout_for("GetPoolInfo").fixed_size == 1
        pool_slot = instruction_layout_for("GetSwapQuote").account_slots[0]
        assert pool_slot.role == "pool"
        assert not pool_slot.is_writable
        assert instruction_layout_for("FindPoolsByToken").account_slots == ()
