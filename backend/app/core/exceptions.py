"""
Errors raised by the settlement engine.
"""


class SettlementError(ValueError):
    """Base class for settlement input errors."""


class UnknownParticipantError(SettlementError):
    """An expense references a participant that is not in the settlement."""
    def __init__(self, expense_id: str, participant_id: str, role: str = "participant"):
        self.expense_id = expense_id
        self.participant_id = participant_id
        self.role = role
        super().__init__(
            f"Expense '{expense_id}' references unknown {role} '{participant_id}'"
        )


class MalformedSplitDataError(SettlementError):
    """An individual/ratio expense has no row for one of its members."""
    def __init__(self, expense_id: str, participant_id: str, method: str):
        self.expense_id = expense_id
        self.participant_id = participant_id
        self.method = method
        super().__init__(
            f"Expense '{expense_id}' has no {method} entry for participant '{participant_id}'"
        )
