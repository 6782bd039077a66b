"""
Unit tests for parsing model output into a reply and an extraction result.
"""

import json

from maintlog.agents.response_parser import parse_model_reply
from maintlog.models import ExtractedInfo

from conftest import reply_json


class TestParseModelReply:
    """Tests for parse_model_reply."""

    def test_valid_complete_reply(self):
        raw = reply_json(
            "Shall I save the record with this content?",
            symptom="Conveyor stops intermittently",
            cause="Worn drive belt",
            solution="Replaced the drive belt",
        )

        reply = parse_model_reply(raw)

        assert reply.message == "Shall I save the record with this content?"
        info = reply.extracted_info
        assert info.symptom == "Conveyor stops intermittently"
        assert info.cause == "Worn drive belt"
        assert info.solution == "Replaced the drive belt"
        assert info.is_complete is True
        assert info.missing_fields == []

    def test_valid_partial_reply_is_identity(self):
        raw = reply_json("What caused it?", symptom="Oil leak")
        reply = parse_model_reply(raw)
        assert reply.extracted_info == ExtractedInfo.from_fields(symptom="Oil leak")
        assert reply.extracted_info.missing_fields == ["cause", "solution"]

    def test_surrounding_whitespace_is_accepted(self):
        raw = "\n  " + reply_json("Hi") + "\n"
        assert parse_model_reply(raw).message == "Hi"

    def test_prose_falls_back_to_raw_text(self):
        raw = "Sure! Could you tell me what happened?"
        reply = parse_model_reply(raw)
        assert reply.message == raw
        assert reply.extracted_info == ExtractedInfo.empty()
        assert reply.extracted_info.missing_fields == ["symptom", "cause", "solution"]
        assert reply.extracted_info.is_complete is False

    def test_json_inside_code_fence_falls_back(self):
        raw = "```json\n" + reply_json("Hi") + "\n```"
        reply = parse_model_reply(raw)
        assert reply.message == raw
        assert reply.extracted_info.is_complete is False

    def test_missing_extracted_info_falls_back(self):
        raw = json.dumps({"message": "Hello"})
        assert parse_model_reply(raw).message == raw

    def test_wrong_field_types_fall_back(self):
        raw = json.dumps({
            "message": "Hello",
            "extractedInfo": {
                "symptom": None, "cause": None, "solution": None,
                "isComplete": "false", "missingFields": ["symptom", "cause", "solution"],
            },
        })
        assert parse_model_reply(raw).message == raw

    def test_non_object_top_level_falls_back(self):
        assert parse_model_reply("[1, 2, 3]").message == "[1, 2, 3]"

    def test_empty_output_falls_back(self):
        reply = parse_model_reply("")
        assert reply.message == ""
        assert reply.extracted_info == ExtractedInfo.empty()

    def test_inconsistent_completeness_is_rederived(self):
        raw = reply_json(
            "Shall I save it?",
            symptom="Noise", cause="", solution="Tightened bolts",
            is_complete=True, missing_fields=[],
        )
        info = parse_model_reply(raw).extracted_info
        assert info.cause is None
        assert info.is_complete is False
        assert info.missing_fields == ["cause"]

    def test_serializes_with_contract_keys(self):
        info = parse_model_reply(reply_json("ok", symptom="Noise")).extracted_info
        dumped = info.model_dump(by_alias=True)
        assert dumped["isComplete"] is False
        assert dumped["missingFields"] == ["cause", "solution"]

    def test_empty_extracted_info_falls_back(self):
        raw = json.dumps({"message": "Hello", "extractedInfo": {}})
        reply = parse_model_reply(raw)
        assert reply.message == raw
        assert reply.extracted_info == ExtractedInfo.empty()

    def test_missing_extracted_info_key_falls_back(self):
        raw = json.dumps({
            "message": "Hello",
            "extractedInfo": {
                "symptom": "Noise", "cause": None, "solution": None,
                "isComplete": False,
            },
        })
        assert parse_model_reply(raw).message == raw

    def test_snake_case_keys_fall_back(self):
        raw = json.dumps({
            "message": "Hello",
            "extracted_info": {
                "symptom": None, "cause": None, "solution": None,
                "is_complete": False, "missing_fields": [],
            },
        })
        reply = parse_model_reply(raw)
        assert reply.message == raw
        assert reply.extracted_info.missing_fields == ["symptom", "cause", "solution"]

    def test_snake_case_inner_keys_fall_back(self):
        raw = json.dumps({
            "message": "Hello",
            "extractedInfo": {
                "symptom": None, "cause": None, "solution": None,
                "is_complete": False, "missing_fields": ["symptom", "cause", "solution"],
            },
        })
        assert parse_model_reply(raw).message == raw

    def test_consistent_reply_in_other_order_is_unchanged(self):
        raw = json.dumps({
            "message": "What caused it, and what was the symptom?",
            "extractedInfo": {
                "symptom": None, "cause": None, "solution": "Replaced the seal",
                "isComplete": False, "missingFields": ["cause", "symptom"],
            },
        })

        reply = parse_model_reply(raw)

        assert reply.message == "What caused it, and what was the symptom?"
        assert reply.extracted_info.missing_fields == ["cause", "symptom"]
        assert reply.extracted_info.model_dump(by_alias=True) == json.loads(raw)["extractedInfo"]
