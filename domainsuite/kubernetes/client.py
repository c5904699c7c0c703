"""This module implements an KubernetesCLI interface using kubectl binary commands."""

from functools import cached_property
from typing import Optional

import openshift_client as oc
from openshift_client import Context, OpenShiftPythonException

from .ingress import Ingress
from .pod import Pod
from .service import Service

# Conditions evaluated by the poller have to return within a bounded time
CALL_TIMEOUT = 60


class KubernetesClient:
    """KubernetesClient is a helper class for invoking kubectl commands"""

    def __init__(self, project: str = None, api_url: str = None, token: str = None, kubeconfig_path: str = None):
        self._project = project
        self._api_url = api_url
        self._token = token
        self._kubeconfig_path = kubeconfig_path

    def change_project(self, project) -> "KubernetesClient":
        """Return new self with a different project"""
        return KubernetesClient(project, self._api_url, self._token, self._kubeconfig_path)

    @cached_property
    def context(self):
        """Prepare context for command execution"""
        context = Context()

        context.project_name = self._project
        context.api_server = self._api_url
        context.token = self._token
        context.kubeconfig_path = self._kubeconfig_path

        return context

    @property
    def project(self):
        """Returns real Kubernetes namespace name"""
        if self._project:
            return self._project
        with self.context, oc.timeout(CALL_TIMEOUT):
            return oc.get_project_name()

    @property
    def connected(self):
        """Returns True, if user is logged in and the project exists"""
        try:
            self.do_action("get", "ns", self._project or "default")
        except OpenShiftPythonException:
            return False
        return True

    def service_exists(self, name) -> bool:
        """Returns True if service with the given name exists"""
        with self.context, oc.timeout(CALL_TIMEOUT):
            return oc.selector(f"svc/{name}").count_existing() == 1

    def get_service(self, service_name: str) -> Service:
        """Returns dict-like structure for accessing service data"""
        with self.context, oc.timeout(CALL_TIMEOUT):
            return oc.selector(f"service/{service_name}").object(cls=Service)

    def get_pod(self, name: str) -> Optional[Pod]:
        """Returns pod with the given name or None if it does not exist"""
        with self.context, oc.timeout(CALL_TIMEOUT):
            return oc.selector(f"pod/{name}").object(cls=Pod, ignore_not_found=True)

    def get_pods(self, labels: dict[str, str]) -> list[Pod]:
        """Returns all pods matching the labels"""
        with self.context, oc.timeout(CALL_TIMEOUT):
            return oc.selector("pod", labels=labels).objects(cls=Pod)

    def resource_exists(self, kind: str, name: str) -> bool:
        """Returns True if object of any kind (custom resources included) with the given name exists"""
        with self.context, oc.timeout(CALL_TIMEOUT):
            return oc.selector(f"{kind}/{name}").count_existing() == 1

    def get_ingresses(self) -> list[Ingress]:
        """Returns all Ingresses in the project"""
        with self.context, oc.timeout(CALL_TIMEOUT):
            return oc.selector("ingress").objects(cls=Ingress)

    def do_action(self, verb: str, *args, auto_raise: bool = True):
        """Run an kubectl command."""
        with self.context, oc.timeout(CALL_TIMEOUT):
            return oc.invoke(verb, args, auto_raise=auto_raise)

