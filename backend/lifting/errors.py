# lifting/errors.py
"""
Typed failures raised by the progression core and the workout/mesocycle
services. None of them are retryable; main.py maps each one to a 4xx.
"""


class LiftingError(Exception):
    status_code: int = 400
    code: str = "lifting_error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.__class__.__doc__ or self.code)


class InvalidConfiguration(LiftingError):
    """Malformed rep range, increment or starting values."""
    status_code = 422
    code = "invalid_configuration"


class InvalidSetValues(LiftingError):
    """Logged weight and reps must be non-negative."""
    status_code = 422
    code = "invalid_set_values"


class NoPlanConfiguration(LiftingError):
    """Exercise has no plan configuration for this mesocycle."""
    status_code = 409
    code = "no_plan_configuration"


class InvalidTransition(LiftingError):
    status_code = 409
    code = "invalid_transition"


class IncompleteSets(LiftingError):
    """Finish or skip all sets before completing this workout."""
    status_code = 409
    code = "incomplete_sets"


class ActiveMesocycleExists(LiftingError):
    """Complete or cancel the active mesocycle before starting a new one."""
    status_code = 409
    code = "active_mesocycle_exists"


class SetNotFound(LiftingError):
    status_code = 404
    code = "set_not_found"


class NotFound(LiftingError):
    status_code = 404
    code = "not_found"

    def __init__(self, entity: str, entity_id: int | str | None = None):
        self.entity = entity
        self.entity_id = entity_id
        if entity_id is None:
            super().__init__(f"{entity} not found")
        else:
            super().__init__(f"{entity} {entity_id} not found")


class ResourceInUse(LiftingError):
    """Still referenced by training history; remove those references first."""
    status_code = 409
    code = "resource_in_use"
