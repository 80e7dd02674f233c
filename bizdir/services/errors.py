"""Domain errors raised by the service layer.

Expected business outcomes (quota exhausted, duplicate payment notification)
are returned as outcome enums instead; these exceptions cover bad input and
missing rows.
"""


class NotFoundError(LookupError):
    """Referenced business, payment, advert or product does not exist."""

    def __init__(self, entity: str) -> None:
        super().__init__(f"{entity} not found")
        self.entity = entity


class InvalidStatusError(ValueError):
    """A status value outside the closed set allowed for the operation."""
