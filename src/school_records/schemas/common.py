from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for request/response bodies: snake_case in Python, camelCase on the wire
    (`full_name` <-> "fullName"). Responses are built straight from ORM objects.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UpdateModel(CamelModel):
    """Partial update body: unknown keys are rejected, omitted or null keys stay untouched."""

    model_config = ConfigDict(extra="forbid")

    def changes(self) -> dict:
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}
