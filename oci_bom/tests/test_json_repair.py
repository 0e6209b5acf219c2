"""
Tests: JSON recovery for completion responses.

Run with:
    pytest oci_bom/tests/test_json_repair.py -v
"""

import pytest

from oci_bom.errors import DraftParseError
from oci_bom.services.json_repair import (
    extract_json_block,
    parse_llm_json,
    quote_bare_keys,
    remove_trailing_commas,
    strip_code_fences,
)

CLEAN = '{"items": [{"sku": "B88317", "description": "Compute OCPU", "quantity": 4, "unitPrice": 0.0255}]}'


class TestParseLlmJson:
    def test_clean_response(self):
        assert parse_llm_json(CLEAN)["items"][0]["sku"] == "B88317"

    def test_fenced_trailing_commas_and_bare_keys(self):
        messy = (
            "Here is the BOM you asked for:\n"
            "```json\n"
            "{items: [{sku: \"B88317\", description: \"Compute OCPU\", quantity: 4, unitPrice: 0.0255,},],}\n"
            "```\n"
            "Let me know if you need changes."
        )
        assert parse_llm_json(messy) == parse_llm_json(CLEAN)

    def test_prose_around_unfenced_json(self):
        raw = "Sure! " + CLEAN + " Hope this helps."
        assert parse_llm_json(raw) == parse_llm_json(CLEAN)

    def test_single_quotes(self):
        assert parse_llm_json("{'items': [{'sku': 'B1'}]}") == {"items": [{"sku": "B1"}]}

    def test_top_level_list(self):
        assert parse_llm_json('[{"sku": "B1"}]') == [{"sku": "B1"}]

    def test_unrecoverable_raises(self):
        with pytest.raises(DraftParseError) as exc_info:
            parse_llm_json("I cannot produce a bill of materials for that.")
        assert exc_info.value.raw_response.startswith("I cannot")
        assert exc_info.value.last_error

    def test_empty_raises(self):
        with pytest.raises(DraftParseError):
            parse_llm_json("   ")


class TestHelpers:
    def test_strip_unterminated_fence(self):
        assert strip_code_fences('```json\n{"a": 1}') == '{"a": 1}'

    def test_block_ignores_brackets_in_strings(self):
        text = 'x {"note": "use } carefully", "n": [1, 2]} trailing }'
        assert extract_json_block(text) == '{"note": "use } carefully", "n": [1, 2]}'

    def test_trailing_commas(self):
        assert remove_trailing_commas('{"a": [1, 2,], }') == '{"a": [1, 2]}'

    def test_bare_keys(self):
        assert quote_bare_keys('{a: 1, b_2: "x"}') == '{"a": 1, "b_2": "x"}'
