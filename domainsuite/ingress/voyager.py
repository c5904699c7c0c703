"""Voyager ingress controller"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from openshift_client import OpenShiftPythonException

from domainsuite.domain import cluster_service_name
from domainsuite.helm import Helm, HelmParams
from domainsuite.ingress import IngressController
from domainsuite.kubernetes.ingress import Ingress

logger = logging.getLogger(__name__)

INGRESS_ANNOTATIONS = {
    "ingress.appscode.com/type": "NodePort",
    "ingress.appscode.com/affinity": "cookie",
    "kubernetes.io/ingress.class": "voyager",
}


@dataclass
class VoyagerParams:
    """Chart values of the Voyager release"""

    helm_params: HelmParams
    cloud_provider: str = "baremetal"
    enable_validating_webhook: bool = False

    def values(self) -> dict[str, Any]:
        """Values passed to helm as `--set` arguments"""
        return {
            "cloudProvider": self.cloud_provider,
            "apiserver": {"enableValidatingWebhook": self.enable_validating_webhook},
        }


class Voyager(IngressController):
    """Voyager operator, every Voyager Ingress gets its own HAProxy exposed on a node port"""

    POD_LABELS = {"app.kubernetes.io/name": "voyager"}

    def __init__(self, cluster, helm: Helm, params: VoyagerParams) -> None:
        super().__init__(cluster, helm, params.helm_params)
        self.params = params

    def values(self):
        return self.params.values()

    @staticmethod
    def build_ingress(cluster, name: str, domain_uid: str, cluster_ports: dict[str, int]) -> Ingress:
        """Ingress with one rule per cluster, host is `<domain uid>.<cluster name>.org`"""
        rules = [
            Ingress.service_rule(
                f"{domain_uid}.{cluster_name}.org", cluster_service_name(domain_uid, cluster_name), port
            )
            for cluster_name, port in cluster_ports.items()
        ]
        return Ingress.create_instance(cluster, name, rules=rules, annotations=INGRESS_ANNOTATIONS)

    def create_ingress(self, cluster, name: str, domain_uid: str, cluster_ports: dict[str, int]) -> Optional[list[str]]:
        """
        Creates Voyager Ingress for the domain
        :param cluster: Client for the namespace of the domain
        :return: Hosts of the ingress or None if the API server rejected it
        """
        ingress = self.build_ingress(cluster, name, domain_uid, cluster_ports)
        try:
            ingress.commit()
        except OpenShiftPythonException as error:
            logger.error("Unable to create ingress %s in namespace %s: %s", name, cluster.project, error)
            return None
        return ingress.hosts

    @staticmethod
    def node_port(cluster, ingress_name: str) -> int:
        """Node port of the HAProxy service Voyager created for the ingress"""
        service = cluster.get_service(f"voyager-{ingress_name}")
        return int(service.model.spec.ports[0]["nodePort"])
