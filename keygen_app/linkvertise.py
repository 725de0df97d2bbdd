import requests
import structlog

log = structlog.get_logger(__name__)


class LinkvertiseClient:
    """Checks completion hashes against the Linkvertise anti-bypassing API.

    Every failure mode (bad status, network error, timeout, unparseable or
    non-object body) is reported as ``False``. The reason only shows up in
    the logs.
    """

    def __init__(self, token: str, api_url: str, timeout: float = 10.0, session=None):
        self.token = token
        self.api_url = api_url
        self.timeout = timeout
        self.http = session or requests

    def verify(self, completion_hash: str) -> bool:
        try:
            res = self.http.post(
                self.api_url,
                params={"token": self.token, "hash": completion_hash},
                timeout=self.timeout,
            )
        except requests.Timeout:
            log.warning("linkvertise_verify_failed", hash=completion_hash, reason="timeout")
            return False
        except requests.RequestException as exc:
            log.warning("linkvertise_verify_failed", hash=completion_hash,
                        reason="transport", error=type(exc).__name__)
            return False

        if not 200 <= res.status_code < 300:
            log.warning("linkvertise_verify_failed", hash=completion_hash,
                        reason="status", status=res.status_code)
            return False

        try:
            data = res.json()
        except ValueError:
            log.warning("linkvertise_verify_failed", hash=completion_hash, reason="malformed_body")
            return False

        if not isinstance(data, dict):
            log.warning("linkvertise_verify_failed", hash=completion_hash, reason="unexpected_body")
            return False

        log.info("linkvertise_verified", hash=completion_hash)
        return True
