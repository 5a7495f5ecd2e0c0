"""
RFC 7807 Problem Details error response schemas.

Implements standard error response format for the API.
"""

from pydantic import BaseModel, ConfigDict, Field


class ProblemDetails(BaseModel):
    """
    RFC 7807 Problem Details for HTTP APIs.

    Standard error response format that provides machine-readable details
    about errors in a consistent structure.
    """

    type: str = Field(
        ...,
        description="URI reference that identifies the problem type",
    )
    title: str = Field(..., description="Short, human-readable summary of the problem")
    status: int = Field(..., description="HTTP status code", ge=100, le=599)
    detail: str = Field(
        ..., description="Human-readable explanation specific to this occurrence"
    )
    instance: str = Field(
        ..., description="URI reference that identifies the specific occurrence"
    )
    correlation_id: str | None = Field(
        None, description="Correlation ID for request tracing"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "type": "about:blank",
                    "title": "Bad Request",
                    "status": 400,
                    "detail": "Invalid SLA tier 'platinum'. Must be one of: gold, silver, bronze",
                    "instance": "/api/v1/sla/platinum",
                },
                {
                    "type": "https://httpstatuses.com/500",
                    "title": "Internal Server Error",
                    "status": 500,
                    "detail": "An unexpected error occurred",
                    "instance": "/api/v1/sla/summary",
                },
            ]
        }
    )


STATUS_TEXTS = {
    400: "Bad Request",
    404: "Not Found",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


def get_status_text(status_code: int) -> str:
    """Get human-readable status text for an HTTP status code."""
    return STATUS_TEXTS.get(status_code, "Error")
