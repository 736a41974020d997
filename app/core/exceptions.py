from fastapi import HTTPException, status


class MissingParameterError(HTTPException):
    """Raised when a required request parameter is absent."""

    def __init__(self, parameter: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Missing required parameter: {parameter}",
        )
