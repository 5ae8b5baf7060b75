"""Engine error taxonomy: data-integrity, invalid-operation, finalize-save."""


class EngineError(Exception):
    """Base class for all scenario engine errors."""


# ---------- data integrity (content-load time) ----------

class DataIntegrityError(EngineError):
    """Authored scenario content is broken; fatal to the affected scenario."""

    def __init__(self, message: str, scenario_id: str | None = None):
        super().__init__(message)
        self.scenario_id = scenario_id


class InvalidScenario(DataIntegrityError):
    pass


class EmptyChoiceSet(DataIntegrityError):
    pass


class NonContiguousOrder(DataIntegrityError):
    pass


class DanglingNextNode(DataIntegrityError):
    pass


class UnknownCultureValue(DataIntegrityError):
    pass


# ---------- invalid operations (caller errors) ----------

class InvalidOperationError(EngineError):
    """The caller asked for a transition the session does not allow."""


class OutOfOrderNode(InvalidOperationError):
    pass


class WrongNodeType(InvalidOperationError):
    pass


class InvalidChoice(InvalidOperationError):
    pass


class EmptyReflection(InvalidOperationError):
    pass


class SessionFinalized(InvalidOperationError):
    pass


class SessionNotComplete(InvalidOperationError):
    pass


class CoachingInProgress(InvalidOperationError):
    pass


class CoachingClosed(InvalidOperationError):
    pass


# ---------- persistence ----------

class FinalizeSaveError(EngineError):
    """The completed-session save failed; unlike checkpoints this one is surfaced."""
