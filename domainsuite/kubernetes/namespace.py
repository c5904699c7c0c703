"""Namespace object for Kubernetes"""

from openshift_client import timeout

from domainsuite.kubernetes import KubernetesObject


class Namespace(KubernetesObject):
    """Kubernetes Namespace, every scenario gets its own"""

    @classmethod
    def create_instance(cls, cluster, name: str, labels: dict[str, str] = None):
        """Creates new instance of Namespace"""
        model = {
            "kind": "Namespace",
            "apiVersion": "v1",
            "metadata": {
                "name": name,
                "labels": labels,
            },
        }

        return cls(model, context=cluster.context)

    def delete(self, ignore_not_found=True, cmd_args=None):
        """Deletes Namespace, it waits until all objects inside are finalized"""
        with timeout(10 * 60):
            return super(KubernetesObject, self).delete(ignore_not_found, cmd_args)
