class NotFoundError(LookupError):
    """A survey or response id that does not exist."""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class InvalidInputError(ValueError):
    """Input the schemas accept but the stored survey does not, e.g. an answer
    for a question the survey does not have."""
