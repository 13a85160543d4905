"""Unit tests for chat text helpers."""

import pytest

from stackit_assistant.utils.text import clean_reply, log_preview


class TestCleanReply:

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "reply,expected",
        [
            ("  Human   Resources\n", "Human Resources"),
            ("\t\n ", ""),
            (None, ""),
        ],
    )
    def test_clean_reply(self, reply, expected):
        assert clean_reply(reply) == expected


class TestLogPreview:

    @pytest.mark.unit
    def test_short_message_unchanged(self):
        assert log_preview("printer jammed") == "printer jammed"

    @pytest.mark.unit
    def test_long_message_flattened_and_cut(self):
        text = "my laptop\nwill not boot " + "after the update " * 10

        preview = log_preview(text, limit=30)

        assert len(preview) <= 30
        assert preview.endswith("...")
        assert "\n" not in preview
