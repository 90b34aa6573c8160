from typing import Optional


class TransportException(Exception):
    def __init__(self, url: str, status_code: Optional[int] = None, reason: str = "") -> None:
        self.url = url
        self.status_code = status_code

        if status_code is not None:
            message = f"HTTP {status_code}"
            if reason:
                message += f": {reason}"
        else:
            message = reason or "request failed"

        super().__init__(message)
