# apps/goals/domain/exceptions.py


class GoalProgressError(Exception):
    """Bazowy wyjątek silnika postępu celów."""


class NotFound(GoalProgressError, LookupError):
    entity = "Object"

    def __init__(self, object_id):
        self.object_id = object_id
        super().__init__(f"{self.entity} {object_id} not found")


class ObjectiveNotFound(NotFound):
    entity = "Objective"


class KeyResultNotFound(NotFound):
    entity = "KeyResult"


class StoreFailure(GoalProgressError):
    """Błąd odczytu/zapisu w bazie (opakowuje DatabaseError)."""


class ProgressCycleError(GoalProgressError):
    def __init__(self, path):
        self.path = list(path)
        chain = " -> ".join(str(i) for i in self.path)
        super().__init__(f"Cycle in objective hierarchy: {chain}")
