"""Unit tests for the ticket intake state machine."""

import random
import re

import pytest
from unittest.mock import AsyncMock

from stackit_assistant.errors import AuthenticationRequiredError, TicketSubmissionError
from stackit_assistant.intake.state_machine import (
    AUTH_REQUIRED_MESSAGE,
    DEPARTMENT_PROMPT,
    FAILURE_MESSAGE,
    PRIORITY_PROMPT,
    REPROMPT_PREFIX,
    SCOPE_PROMPT,
    IntakeStateMachine,
    IntakeStep,
    derive_priority,
    generate_fallback_ticket_number,
)
from stackit_assistant.models import Priority

FALLBACK_PATTERN = re.compile(r"^INC\d{6}$")


@pytest.fixture
def machine(ticket_client):
    return IntakeStateMachine(ticket_client)


async def run_to_scope(machine, department="Engineering", priority="high"):
    machine.start("My laptop will not boot")
    await machine.advance(department)
    await machine.advance(priority)


class TestPriorityDerivation:

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "reply, expected",
        [
            ("2", Priority.MEDIUM),
            ("medium please", Priority.MEDIUM),
            ("I guess high", Priority.HIGH),
            ("3", Priority.HIGH),
            ("HIGH", Priority.HIGH),
            ("not sure", Priority.LOW),
            ("1", Priority.LOW),
            ("low", Priority.LOW),
        ],
    )
    def test_derive_priority(self, reply, expected):
        assert derive_priority(reply) == expected

    @pytest.mark.unit
    def test_medium_checked_before_high(self):
        assert derive_priority("2 or 3, medium-high") == Priority.MEDIUM


class TestFallbackTicketNumber:

    @pytest.mark.unit
    def test_format_and_range(self):
        rng = random.Random(7)
        for _ in range(200):
            number = generate_fallback_ticket_number(rng)
            assert FALLBACK_PATTERN.match(number)
            assert 100000 <= int(number[3:]) <= 999999


class TestIntakeStateMachine:
    """Walks the 0 -> 1 -> 2 -> 3 -> 0 dialogue."""

    @pytest.mark.unit
    def test_starts_idle(self, machine):
        assert machine.step == IntakeStep.IDLE
        assert machine.in_progress is False
        assert machine.record is None

    @pytest.mark.unit
    def test_start_stores_description(self, machine):
        prompt = machine.start("create ticket please")

        assert prompt == DEPARTMENT_PROMPT
        assert machine.step == IntakeStep.AWAIT_DEPARTMENT
        assert machine.in_progress is True
        assert machine.record.description == "create ticket please"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_full_dialogue_uses_server_ticket_number(self, machine, ticket_client):
        machine.start("create ticket please")

        assert await machine.advance("Engineering") == [PRIORITY_PROMPT]
        assert machine.step == IntakeStep.AWAIT_PRIORITY
        assert await machine.advance("high") == [SCOPE_PROMPT]
        assert machine.step == IntakeStep.AWAIT_SCOPE

        replies = await machine.advance("just me", auth_token="user-token")

        assert machine.step == IntakeStep.IDLE
        assert machine.record is None
        assert len(replies) == 1
        assert "INC424242" in replies[0]

        submitted, token = ticket_client.submit.await_args.args
        assert token == "user-token"
        assert submitted.description == "create ticket please"
        assert submitted.department == "Engineering"
        assert submitted.priority == Priority.HIGH
        assert submitted.scope == "just me"
        assert machine.last_record.ticket_number == "INC424242"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unreachable_backend_confirms_with_fallback(self, machine, ticket_client):
        ticket_client.submit = AsyncMock(side_effect=TicketSubmissionError("Error creating support ticket"))
        await run_to_scope(machine)

        replies = await machine.advance("the whole office", auth_token="user-token")

        assert machine.step == IntakeStep.IDLE
        number = machine.last_record.ticket_number
        assert FALLBACK_PATTERN.match(number)
        assert len(replies) == 1
        assert number in replies[0]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_server_number_falls_back(self, machine, ticket_client):
        ticket_client.submit.return_value.ticket_number = None
        await run_to_scope(machine)

        await machine.advance("my team", auth_token="user-token")

        assert FALLBACK_PATTERN.match(machine.last_record.ticket_number)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_token_apologises_and_resets(self, machine, ticket_client):
        ticket_client.submit = AsyncMock(
            side_effect=AuthenticationRequiredError("Authentication required to create a support ticket")
        )
        await run_to_scope(machine)

        replies = await machine.advance("just me", auth_token=None)

        assert replies == [AUTH_REQUIRED_MESSAGE]
        assert machine.step == IntakeStep.IDLE
        assert machine.record is None
        assert machine.last_record is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("blank", ["", "   ", "\n\t"])
    async def test_blank_reply_reprompts_same_step(self, machine, blank):
        machine.start("create ticket please")

        replies = await machine.advance(blank)

        assert replies == [REPROMPT_PREFIX + DEPARTMENT_PROMPT]
        assert machine.step == IntakeStep.AWAIT_DEPARTMENT
        assert machine.record.department is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_reply_whitespace_is_normalised(self, machine):
        machine.start("create ticket please")

        await machine.advance("  Human   Resources ")

        assert machine.record.department == "Human Resources"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unexpected_step_resets_with_apology(self, machine):
        machine.start("create ticket please")
        machine.step = 7

        replies = await machine.advance("anything")

        assert replies == [FAILURE_MESSAGE]
        assert machine.step == IntakeStep.IDLE
        assert machine.record is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_advance_while_idle_is_unexpected(self, machine, ticket_client):
        replies = await machine.advance("Engineering")

        assert replies == [FAILURE_MESSAGE]
        ticket_client.submit.assert_not_awaited()

    @pytest.mark.unit
    def test_reset_clears_record(self, machine):
        machine.start("create ticket please")

        machine.reset()

        assert machine.step == IntakeStep.IDLE
        assert machine.record is None
