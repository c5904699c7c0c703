"""Domain operator installed from its Helm chart"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from domainsuite.checks import HELM_TRANSIENT_ERRORS, assert_eventually, helm_release_deployed, operator_running
from domainsuite.helm import Helm, HelmParams
from domainsuite.lifecycle import LifecycleObject
from domainsuite.polling import Condition, RetryPolicy

logger = logging.getLogger(__name__)

OPERATOR_POD_LABELS = {"app": "weblogic-operator"}


@dataclass
class OperatorParams:
    """Chart values of the operator release"""

    helm_params: HelmParams
    image: str
    domain_namespaces: list[str] = field(default_factory=list)
    service_account: str = "default"
    image_pull_secrets: list[str] = field(default_factory=list)
    java_logging_level: Optional[str] = None

    def values(self) -> dict[str, Any]:
        """Values passed to helm as `--set` arguments"""
        return {
            "image": self.image,
            "serviceAccount": self.service_account,
            "domainNamespaces": self.domain_namespaces,
            "imagePullSecrets": [{"name": name} for name in self.image_pull_secrets] or None,
            "javaLoggingLevel": self.java_logging_level,
        }


class Operator(LifecycleObject):
    """Operator release in its own namespace, `cluster` is client for that namespace"""

    def __init__(self, cluster, helm: Helm, params: OperatorParams) -> None:
        super().__init__()
        self.cluster = cluster
        self.helm = helm
        self.params = params

    @property
    def namespace(self) -> str:
        """Namespace of the release"""
        return self.params.helm_params.namespace

    def commit(self):
        assert self.helm.install(
            self.params.helm_params, self.params.values()
        ), f"Unable to install operator into namespace {self.namespace}"

    def delete(self):
        return self.helm.uninstall(self.params.helm_params)

    def upgrade(self, domain_namespaces: list[str] = None, **values):
        """Upgrades the release, e.g. to manage additional domain namespaces"""
        if domain_namespaces is not None:
            self.params.domain_namespaces = domain_namespaces
            values["domainNamespaces"] = domain_namespaces
        assert self.helm.upgrade(self.params.helm_params, values), f"Unable to upgrade operator in {self.namespace}"

    @property
    def release_deployed(self) -> Condition:
        """Condition: operator release is deployed"""
        return helm_release_deployed(self.helm, self.params.helm_params.release_name, self.namespace)

    @property
    def is_running(self) -> Condition:
        """Condition: operator pod is Ready"""
        return operator_running(self.cluster, OPERATOR_POD_LABELS)

    def wait_for_ready(self, policy: RetryPolicy):
        """Waits until the release is deployed and the operator pod is Ready"""
        assert_eventually(
            self.release_deployed,
            policy,
            f"operator release {self.params.helm_params.release_name} in namespace {self.namespace} to be deployed",
            transient=HELM_TRANSIENT_ERRORS,
        )
        assert_eventually(self.is_running, policy, f"operator to be running in namespace {self.namespace}")
        logger.info("Operator is running in namespace %s", self.namespace)

    def __str__(self):
        return f"operator {self.params.helm_params.release_name} in namespace {self.namespace}"
