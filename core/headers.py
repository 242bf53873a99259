"""Header construction for upstream requests."""


class HeaderBuilder:
    """Build the fixed header set attached to every upstream request.

    Inbound headers are never copied; only the configured credential and
    the JSON content type go upstream.
    """

    def __init__(self, authorization: str) -> None:
        self._headers = {
            "Authorization": authorization,
            "Content-Type": "application/json",
        }

    def build_upstream_headers(self) -> dict[str, str]:
        """Return a fresh copy of the injected headers."""
        return dict(self._headers)
