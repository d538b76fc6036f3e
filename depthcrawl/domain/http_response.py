from typing import NamedTuple, Optional


class HttpResponse(NamedTuple):
    """Status, decoded body and Content-Type of one GET."""
    status_code: int
    text: str
    content_type: Optional[str] = None

    @property
    def is_error(self) -> bool:
        """True for 4xx/5xx answers, which the crawler treats as failed fetches."""
        return int(self.status_code) >= 400
