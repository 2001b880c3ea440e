# backend/services/exceptions.py


class NotFoundError(LookupError):
    """The targeted row does not exist (an update touched zero rows)."""

    def __init__(self, entity: str, entity_id: int):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class InvalidTransitionError(ValueError):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change order status from {current} to {requested}")
