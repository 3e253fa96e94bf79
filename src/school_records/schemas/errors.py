from pydantic import BaseModel, ConfigDict, Field


class ValidationErrorItem(BaseModel):
    field: str
    messages: list[str]


class ErrorDetails(BaseModel):
    errors: list[ValidationErrorItem] = Field(default_factory=list)


class ErrorEnvelope(BaseModel):
    """
    Body of every non-2xx response.

        {"statusCode": 404, "message": "Student ... not found", "error": "Not Found", "traceId": "..."}

    `traceId` and `details` are omitted (not null) when absent; use `to_content()`.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    status_code: int = Field(alias="statusCode")
    message: str | list[str]
    error: str
    trace_id: str | None = Field(default=None, alias="traceId")
    details: ErrorDetails | None = None

    def to_content(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
