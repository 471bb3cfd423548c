# This project was developed with assistance from AI tools.
"""RFC 7807 problem details returned by every failing endpoint."""

from pydantic import BaseModel, Field

_HTTP_STATUS_TITLES: dict[int, str] = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


class ErrorResponse(BaseModel):
    """Problem details body (https://datatracker.ietf.org/doc/html/rfc7807)."""

    type: str = Field(default="about:blank", description="URI identifying the problem type.")
    title: str = Field(description="Short summary of the problem class.")
    status: int = Field(description="HTTP status code.")
    detail: str = Field(default="", description="Explanation of this occurrence.")
    request_id: str = Field(default="", description="Correlation ID for log lookup.")
    instance: str = Field(default="", description="Request path that produced the problem.")

    @classmethod
    def build(
        cls,
        status_code: int,
        detail: str,
        request_id: str,
        *,
        title: str | None = None,
        instance: str = "",
    ) -> "ErrorResponse":
        return cls(
            title=title or _HTTP_STATUS_TITLES.get(status_code, "Error"),
            status=status_code,
            detail=detail,
            request_id=request_id,
            instance=instance,
        )
