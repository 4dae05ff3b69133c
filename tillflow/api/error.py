from typing import Dict, Optional

from fastapi import status
from libs.result import Error


class ClientError(Exception):
    def __init__(
        self,
        base_error: Error,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.base_error = base_error
        self.status_code = status_code
        self.headers = headers
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


class AccessDenied(ClientError):
    """
    Guard denial. Rendered as a JSON 401/403 or as a redirect to
    ``redirect_to``, depending on DENIAL_MODE and the request path.
    """

    def __init__(self, base_error: Error, status_code: int, redirect_to: Optional[str]):
        super().__init__(base_error, status_code=status_code)
        self.redirect_to = redirect_to
