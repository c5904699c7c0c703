"""Common classes for Httpx"""

# I change return type of HTTPX client to domainsuite Result
# mypy: disable-error-code="override, return-value"
from typing import Iterable

import backoff
from httpx import Client, RequestError, USE_CLIENT_DEFAULT


class Result:
    """Result from HTTP request"""

    def __init__(self, retry_codes, response=None, error=None):
        self.response = response
        self.error = error
        self.retry_codes = retry_codes

    def should_backoff(self):
        """True, if the Result can be considered an instability and should be retried"""
        return (
            self.has_dns_error()
            or (self.error is None and self.status_code in self.retry_codes)
            or self.has_error("Server disconnected without sending a response.")
            or self.has_error("timed out")
        )

    def has_error(self, error_msg: str) -> bool:
        """True, if the request failed and an error with message was returned"""
        return self.error is not None and len(self.error.args) > 0 and any(error_msg in arg for arg in self.error.args)

    def has_dns_error(self):
        """True, if the result failed due to DNS failure"""
        return (
            self.has_error("nodename nor servname provided, or not known")
            or self.has_error("Name or service not known")
            or self.has_error("No address associated with hostname")
        )

    def has_connection_refused(self):
        """True, if nothing listens on the node port (yet)"""
        return self.has_error("Connection refused")

    def __getattr__(self, item):
        """For backwards compatibility"""
        if self.response is not None:
            return getattr(self.response, item)
        raise self.error

    def __str__(self):
        if self.error is None:
            return f"Result[status_code={self.response.status_code}]"
        return f"Result[error={self.error}]"


class DomainClient(Client):
    """Httpx client which retries unstable requests"""

    def __init__(self, *, retry_codes: Iterable[int] = None, **kwargs):
        self.retry_codes = set(retry_codes or {503})
        super().__init__(**kwargs)

    @classmethod
    def through_ingress(cls, address: str, port: int, host: str, timeout: float = 30, **kwargs) -> "DomainClient":
        """
        Client for an application exposed on the ingress controller node port.
        Requests go to `address:port` with `Host` header set to the ingress rule host.
        """
        return cls(base_url=f"http://{address}:{port}", headers={"Host": host}, timeout=timeout, **kwargs)

    # pylint: disable=too-many-locals
    @backoff.on_predicate(backoff.fibo, lambda result: result.should_backoff(), max_tries=8, jitter=None)
    def request(
        self,
        method: str,
        url,
        *,
        content=None,
        data=None,
        files=None,
        json=None,
        params=None,
        headers=None,
        cookies=None,
        auth=USE_CLIENT_DEFAULT,
        follow_redirects=USE_CLIENT_DEFAULT,
        timeout=USE_CLIENT_DEFAULT,
        extensions=None,
    ) -> Result:
        try:
            response = super().request(
                method,
                url,
                content=content,
                data=data,
                files=files,
                json=json,
                params=params,
                headers=headers,
                cookies=cookies,
                auth=auth,
                follow_redirects=follow_redirects,
                timeout=timeout,
                extensions=extensions,
            )
            return Result(self.retry_codes, response=response)
        except RequestError as e:
            return Result(self.retry_codes, error=e)

    def get(self, *args, **kwargs) -> Result:
        return super().get(*args, **kwargs)
