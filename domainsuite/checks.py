"""
Conditions of cluster state for `wait_for`.
Every factory returns an un-evaluated callable, nothing is queried until the poller calls it.
"""

from functools import partial
from subprocess import CalledProcessError

from domainsuite.helm import Helm
from domainsuite.image import ImageTool
from domainsuite.polling import Condition, RetryPolicy, TRANSIENT_ERRORS, wait_for

# `helm ls` fails with non-zero exit code while the namespace is still being created
HELM_TRANSIENT_ERRORS = TRANSIENT_ERRORS + (CalledProcessError,)


def _matches(pod, labels) -> bool:
    return all(pod.labels.get(key) == value for key, value in (labels or {}).items())


def pod_exists(cluster, name: str, labels: dict[str, str] = None) -> Condition:
    """Pod exists and carries all the labels"""

    def _check():
        pod = cluster.get_pod(name)
        return pod is not None and _matches(pod, labels)

    return _check


def pod_ready(cluster, name: str, labels: dict[str, str] = None) -> Condition:
    """Pod exists, carries all the labels and is Ready"""

    def _check():
        pod = cluster.get_pod(name)
        return pod is not None and _matches(pod, labels) and pod.ready

    return _check


def pods_ready(cluster, labels: dict[str, str]) -> Condition:
    """At least one pod matches the labels and all matching pods are Ready"""

    def _check():
        pods = cluster.get_pods(labels)
        return len(pods) > 0 and all(pod.ready for pod in pods)

    return _check


def service_exists(cluster, name: str) -> Condition:
    """Service exists"""
    return partial(cluster.service_exists, name)


def domain_exists(cluster, domain_uid: str) -> Condition:
    """Domain custom resource exists"""
    return partial(cluster.resource_exists, "domain", domain_uid)


def ingress_exists(cluster, name: str) -> Condition:
    """Ingress exists"""
    return partial(cluster.resource_exists, "ingress", name)


def helm_release_deployed(helm: Helm, release: str, namespace: str) -> Condition:
    """Helm release is in deployed state"""
    return partial(helm.is_release_deployed, release, namespace)


def operator_running(cluster, labels: dict[str, str]) -> Condition:
    """Operator pod is Ready"""
    return pods_ready(cluster, labels)


def image_exists(tool: ImageTool, image: str) -> Condition:
    """Image is present locally"""
    return partial(tool.exists, image)


def assert_eventually(condition: Condition, policy: RetryPolicy, description: str, transient=TRANSIENT_ERRORS):
    """Waits for the condition and fails the test with the outcome if it never becomes true"""
    outcome = wait_for(condition, policy, description, transient)
    assert outcome, f"Timed out: {outcome}"
    return outcome


def assert_release_deployed(helm: Helm, release: str, namespace: str, policy: RetryPolicy):
    """Waits until the Helm release is deployed"""
    return assert_eventually(
        helm_release_deployed(helm, release, namespace),
        policy,
        f"helm release {release} in namespace {namespace} to be deployed",
        transient=HELM_TRANSIENT_ERRORS,
    )
