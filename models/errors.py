"""Domain exceptions raised by the layout engine.

HTTP translation of these lives in api/exceptions.py; the engine itself
never catches them.
"""


class InvalidTimeZoneError(ValueError):
    """Raised when a time zone identifier cannot be resolved.

    Args:
        time_zone: The identifier that failed to resolve.
    """

    def __init__(self, time_zone: str):
        self.time_zone = time_zone
        super().__init__(f"Unknown time zone '{time_zone}'")


class UnsupportedDateValueError(TypeError):
    """Raised when an event boundary is not a date, instant or zoned datetime.

    Args:
        value: The offending value.
    """

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"Unsupported event date value {value!r} ({type(value).__name__}); "
            "expected a date or a timezone-aware datetime"
        )


class MutationNotFoundError(KeyError):
    """Raised when confirming or rolling back a mutation that is not pending.

    Args:
        mutation_id: The mutation identifier that was requested.
    """

    def __init__(self, mutation_id: str):
        self.mutation_id = mutation_id
        super().__init__(mutation_id)

    def __str__(self) -> str:
        return f"Mutation {self.mutation_id} is not pending"
