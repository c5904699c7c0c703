"""Service Account object for Kubernetes"""

from domainsuite.kubernetes import KubernetesObject


class ServiceAccount(KubernetesObject):
    """Kubernetest ServiceAccount"""

    @classmethod
    def create_instance(cls, cluster, name: str, labels: dict[str, str] = None):
        """Creates new instance of service account"""
        model = {
            "kind": "ServiceAccount",
            "apiVersion": "v1",
            "metadata": {
                "name": name,
                "labels": labels,
            },
        }

        return cls(model, context=cluster.context)
