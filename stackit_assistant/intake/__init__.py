from stackit_assistant.intake.state_machine import (
    IntakeStateMachine,
    IntakeStep,
    derive_priority,
    generate_fallback_ticket_number,
)

__all__ = [
    "IntakeStateMachine",
    "IntakeStep",
    "derive_priority",
    "generate_fallback_ticket_number",
]
