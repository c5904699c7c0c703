"""
State of a single end-to-end scenario.

Everything a scenario provisions is pushed on a stack, teardown releases it in reverse order
so that e.g. ingresses go before the controller and domains before their namespace.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable

from openshift_client import APIObject

from domainsuite.kubernetes.client import KubernetesClient
from domainsuite.kubernetes.namespace import Namespace
from domainsuite.lifecycle import LifecycleObject
from domainsuite.polling import RetryPolicy

logger = logging.getLogger(__name__)


def _describe(obj) -> str:
    if isinstance(obj, APIObject):
        return f"{obj.kind()}/{obj.name()}"
    return str(obj)


@dataclass
class ScenarioContext:
    """Namespaces, retry policy and provisioned resources of one scenario"""

    cluster: KubernetesClient
    policy: RetryPolicy
    namespaces: dict[str, str] = field(default_factory=dict)
    _cleanup: list[tuple[str, Callable]] = field(default_factory=list, init=False, repr=False)

    def namespace(self, role: str) -> KubernetesClient:
        """Client for a namespace registered under the role, e.g. `operator` or `domain`"""
        return self.cluster.change_project(self.namespaces[role])

    def create_namespace(self, role: str, name: str, labels: dict[str, str] = None) -> KubernetesClient:
        """Creates namespace, registers it under the role and returns client for it"""
        self.provision(Namespace.create_instance(self.cluster, name, labels))
        self.namespaces[role] = name
        return self.namespace(role)

    def defer(self, description: str, func: Callable):
        """Registers cleanup action, actions run in reverse order of registration"""
        self._cleanup.append((description, func))

    def track(self, obj: LifecycleObject, description: str = None):
        """Registers deletion of the object"""
        self.defer(description or _describe(obj), obj.delete)
        return obj

    def provision(self, obj: LifecycleObject, description: str = None):
        """Registers deletion of the object and commits it, deletion runs even if commit failed half-way"""
        self.track(obj, description)
        obj.commit()
        return obj

    @property
    def provisioned(self) -> list[str]:
        """Descriptions of resources which are yet to be cleaned up, most recent last"""
        return [description for description, _ in self._cleanup]

    def teardown(self):
        """
        Runs all cleanup actions, most recent first.
        Failure of one action does not prevent the rest, all failures are reported at the end.
        Calling teardown again does nothing.
        """
        failures = []
        while self._cleanup:
            description, func = self._cleanup.pop()
            logger.info("Cleaning up %s", description)
            try:
                if func() is False:
                    failures.append(f"{description}: cleanup reported failure")
            # all actions have to run even if some of them failed
            # pylint: disable=broad-except
            except Exception as error:
                logger.exception("Cleanup of %s failed", description)
                failures.append(f"{description}: {error!r}")
        assert not failures, "Teardown failed for:\n" + "\n".join(failures)
