"""Custom dynaconf loader for loading cluster settings and converting them to KubernetesClient"""

from domainsuite.kubernetes.client import KubernetesClient


# pylint: disable=unused-argument
def load(obj, env=None, silent=True, key=None, filename=None):
    """Creates KubernetesClient from `cluster` section, namespaces of scenarios are derived from it"""
    cluster = obj.setdefault("cluster", {})
    obj["cluster"] = KubernetesClient(
        cluster.get("project"), cluster.get("api_url"), cluster.get("token"), cluster.get("kubeconfig_path")
    )
