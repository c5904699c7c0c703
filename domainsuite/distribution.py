"""Verification that a load balancer eventually routes traffic to every backend"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

import backoff

from domainsuite.polling import TRANSIENT_ERRORS

logger = logging.getLogger(__name__)

NetworkRequest = Callable[[], object]
Matcher = Callable[[str, str], bool]


def contains_backend(body: str, backend: str) -> bool:
    """
    True, if backend name is present in the body as a whole token.
    `managed-server1` does not match `managed-server10`
    """
    return re.search(rf"(?<![\w-]){re.escape(backend)}(?![\w-])", body) is not None


def marker_matcher(template: str) -> Matcher:
    """Returns matcher looking for backend embedded in a marker, e.g. `ServerName:{}`"""

    def _match(body, backend):
        return template.format(backend) in body

    return _match


def response_body(response) -> Optional[str]:
    """Returns text of the response, or None if the request did not get any response"""
    if response is None or isinstance(response, str):
        return response
    if getattr(response, "error", None) is not None:
        return None
    return response.text


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a single traffic distribution verification"""

    expected: frozenset[str]
    observed: frozenset[str]
    iterations: int

    @property
    def missing(self) -> frozenset[str]:
        """Backends which never responded"""
        return self.expected - self.observed

    @property
    def success(self) -> bool:
        """True, if all expected backends responded"""
        return not self.missing

    def __bool__(self):
        return self.success

    def __str__(self):
        if self.success:
            return f"All backends {sorted(self.expected)} responded within {self.iterations} requests"
        return (
            f"Backends {sorted(self.missing)} did not respond within {self.iterations} requests, "
            f"responded: {sorted(self.observed)}"
        )


def verify_distribution(
    request: NetworkRequest,
    expected_backends: Iterable[str],
    max_iterations: int,
    interval: float = 0,
    match: Matcher = contains_backend,
    transient: tuple[type[BaseException], ...] = TRANSIENT_ERRORS,
) -> VerificationResult:
    """
    Sends request repeatedly until every expected backend was seen in a response body
    :param request: Zero-argument callable returning str, httpx Response or domainsuite Result
    :param expected_backends: Names of the backends which should all respond
    :param max_iterations: Maximum number of requests to send
    :param interval: Sleep between requests in seconds
    :param match: Decides whether response body came from backend
    :param transient: Exception types of failed requests which are counted as non-matching iterations
    """
    if max_iterations < 1:
        raise ValueError(f"At least one request has to be sent, got max_iterations={max_iterations}")

    expected = frozenset(expected_backends)
    observed: set[str] = set()
    iterations = 0

    if not expected:
        return VerificationResult(expected, frozenset(), 0)

    @backoff.on_predicate(
        backoff.constant,
        lambda _: not expected <= observed,
        max_tries=max_iterations,
        interval=interval,
        jitter=None,
        logger=None,
    )
    def _probe():
        nonlocal iterations
        iterations += 1
        try:
            body = response_body(request())
        except transient as error:  # pylint: disable=catching-non-exception
            logger.info("Request %d/%d failed: %s", iterations, max_iterations, error)
            return
        if body is None:
            logger.info("Request %d/%d did not get a response", iterations, max_iterations)
            return

        for backend in expected - observed:
            if match(body, backend):
                logger.info("Backend %s responded to request %d/%d", backend, iterations, max_iterations)
                observed.add(backend)

    _probe()

    result = VerificationResult(expected, frozenset(observed), iterations)
    if result:
        logger.info("%s", result)
    else:
        logger.warning("%s", result)
    return result
