"""Ingress controllers installed through Helm, they expose domain clusters on node ports"""

from abc import abstractmethod
from typing import Any

from domainsuite.checks import assert_eventually, assert_release_deployed, pods_ready
from domainsuite.helm import Helm, HelmParams
from domainsuite.lifecycle import LifecycleObject
from domainsuite.polling import Condition, RetryPolicy


class IngressController(LifecycleObject):
    """Ingress controller release, `cluster` is client for the namespace of the controller"""

    POD_LABELS: dict[str, str] = {}

    def __init__(self, cluster, helm: Helm, helm_params: HelmParams) -> None:
        super().__init__()
        self.cluster = cluster
        self.helm = helm
        self.helm_params = helm_params

    @property
    def namespace(self) -> str:
        """Namespace of the release"""
        return self.helm_params.namespace

    @abstractmethod
    def values(self) -> dict[str, Any]:
        """Chart values of the release"""

    def commit(self):
        assert self.helm.install(self.helm_params, self.values()), f"Unable to install {self}"

    def delete(self):
        return self.helm.uninstall(self.helm_params)

    def upgrade(self, **values):
        """Upgrades the release with additional values"""
        assert self.helm.upgrade(self.helm_params, values), f"Unable to upgrade {self}"

    @property
    def is_ready(self) -> Condition:
        """Condition: all controller pods are Ready"""
        return pods_ready(self.cluster, self.POD_LABELS)

    def wait_for_ready(self, policy: RetryPolicy):
        """Waits until the release is deployed and controller pods are Ready"""
        assert_release_deployed(self.helm, self.helm_params.release_name, self.namespace, policy)
        assert_eventually(self.is_ready, policy, f"{self} to be ready")

    @staticmethod
    def list_ingresses(cluster) -> list[str]:
        """Names of all ingresses in the namespace of the client"""
        return [ingress.name() for ingress in cluster.get_ingresses()]

    def __str__(self):
        return f"{type(self).__name__.lower()} {self.helm_params.release_name} in namespace {self.namespace}"
