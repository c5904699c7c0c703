"""
Bounded polling of eventually consistent cluster state.

Everything the suite waits for (pods, services, Helm releases, custom resources) is checked
through `wait_for`, so the delay/interval/timeout arithmetic lives only here:

    policy = RetryPolicy(initial_delay=2, interval=10, timeout=300)
    outcome = wait_for(pod_ready(cluster, "domain1-admin-server"), policy, "pod domain1-admin-server to be ready")
    assert outcome, outcome

Conditions are passed un-evaluated; the first evaluation happens inside the loop and gets
the same transient error tolerance as every following one.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from subprocess import TimeoutExpired
from time import monotonic, sleep
from typing import Any, Callable, Optional

from httpx import TransportError
from openshift_client import OpenShiftPythonException

logger = logging.getLogger(__name__)

Condition = Callable[[], Any]

# Errors which mean "not yet", e.g. API server hiccup or object not created yet
TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (OpenShiftPythonException, TransportError, TimeoutExpired)


@dataclass(frozen=True)
class RetryPolicy:
    """Immutable polling configuration, all values are in seconds"""

    initial_delay: float = 2
    interval: float = 10
    timeout: float = 300

    def __post_init__(self):
        if self.interval <= 0:
            raise ValueError(f"Poll interval has to be positive, got {self.interval}")
        if self.initial_delay < 0:
            raise ValueError(f"Initial delay can't be negative, got {self.initial_delay}")
        if self.timeout < self.initial_delay:
            raise ValueError(f"Timeout {self.timeout}s is shorter than initial delay {self.initial_delay}s")

    @classmethod
    def from_settings(cls, section) -> "RetryPolicy":
        """Creates policy from `retry` section of the settings"""
        return cls(
            initial_delay=float(section["initial_delay"]),
            interval=float(section["interval"]),
            timeout=float(section["timeout"]),
        )

    def until(self, condition: Condition, description: str, transient=TRANSIENT_ERRORS) -> "PollOutcome":
        """Shortcut for `wait_for` with this policy"""
        return wait_for(condition, self, description, transient)


@dataclass(frozen=True)
class PollOutcome(ABC):
    """Result of a single `wait_for` call"""

    description: str
    elapsed: float
    evaluations: int

    @abstractmethod
    def __bool__(self):
        """True, if the condition was satisfied"""


@dataclass(frozen=True)
class Satisfied(PollOutcome):
    """Condition became true within the budget"""

    def __bool__(self):
        return True

    def __str__(self):
        return f"{self.description}: satisfied after {self.elapsed:.1f}s ({self.evaluations} checks)"


@dataclass(frozen=True)
class TimedOut(PollOutcome):
    """Budget was exhausted before the condition became true"""

    timeout: float
    last_result: Any = None
    last_error: Optional[BaseException] = None

    def __bool__(self):
        return False

    def __str__(self):
        if self.last_error is not None:
            last = f"last error: {self.last_error!r}"
        else:
            last = f"last result: {self.last_result!r}"
        return (
            f"{self.description}: timed out after {self.elapsed:.1f}s "
            f"(timeout {self.timeout:.0f}s, {self.evaluations} checks, {last})"
        )


def wait_for(
    condition: Condition,
    policy: RetryPolicy,
    description: str,
    transient: tuple[type[BaseException], ...] = TRANSIENT_ERRORS,
) -> PollOutcome:
    """
    Evaluates condition until it returns a truthy value or the policy timeout elapses
    :param condition: Zero-argument callable, evaluated on every tick
    :param policy: Delays and timeout to use
    :param description: What is being awaited, used in logs and in the outcome, e.g. "pod X in namespace Y to be ready"
    :param transient: Exception types which count as "not satisfied yet", anything else is propagated
    :return: Satisfied or TimedOut, TimedOut is falsy
    """
    start = monotonic()
    sleep(policy.initial_delay)

    evaluations = 0
    last_result = None
    last_error = None
    while True:
        evaluations += 1
        try:
            last_result = condition()
            last_error = None
        except transient as error:  # pylint: disable=catching-non-exception
            last_result, last_error = None, error
            logger.debug("Check for %s failed, will retry: %s", description, error)

        elapsed = monotonic() - start
        if last_error is None and last_result:
            logger.info("Done waiting for %s (elapsed time %dms)", description, elapsed * 1000)
            return Satisfied(description, elapsed, evaluations)

        remaining = policy.timeout - elapsed
        if remaining <= 0:
            logger.error(
                "Timed out waiting for %s (elapsed time %dms, remaining time 0ms, checks %d, last %s)",
                description,
                elapsed * 1000,
                evaluations,
                repr(last_error) if last_error is not None else repr(last_result),
            )
            return TimedOut(description, elapsed, evaluations, policy.timeout, last_result, last_error)

        logger.info(
            "Waiting for %s (elapsed time %dms, remaining time %dms)", description, elapsed * 1000, remaining * 1000
        )
        sleep(min(policy.interval, remaining))
