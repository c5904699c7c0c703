"""Kubernetes Ingress object"""

from typing import Any, Dict, List, Optional

from domainsuite.kubernetes import KubernetesObject


class Ingress(KubernetesObject):
    """Represents Kubernetes Ingress object"""

    @classmethod
    def create_instance(
        cls,
        cluster,
        name,
        rules: Optional[List[Dict[str, Any]]] = None,
        annotations: Optional[Dict[str, str]] = None,
        ingress_class: Optional[str] = None,
    ):
        """Creates base instance"""
        if rules is None:
            rules = []

        model: Dict[str, Any] = {
            "apiVersion": "networking.k8s.io/v1",
            "kind": "Ingress",
            "metadata": {"name": name, "namespace": cluster.project},
            "spec": {"rules": rules},
        }

        if annotations:
            model["metadata"]["annotations"] = annotations

        if ingress_class is not None:
            model["spec"]["ingressClassName"] = ingress_class

        return cls(model, context=cluster.context)

    @staticmethod
    def service_rule(host, service_name, port_number, path="/", path_type="Prefix") -> Dict[str, Any]:
        """Returns rule routing all requests for the host to the service"""
        rule: Dict[str, Any] = {
            "http": {
                "paths": [
                    {
                        "backend": {"service": {"name": service_name, "port": {"number": port_number}}},
                        "path": path,
                        "pathType": path_type,
                    },
                ]
            }
        }

        if host is not None:
            rule["host"] = host

        return rule

    @property
    def rules(self):
        """Returns rules defined in the ingress"""
        return self.model.spec.rules

    @property
    def hosts(self) -> list[str]:
        """Returns hosts of all rules"""
        return [rule["host"] for rule in self.rules if "host" in rule]
