"""Traefik ingress controller"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from domainsuite.domain import Domain
from domainsuite.helm import Helm, HelmParams
from domainsuite.ingress import IngressController
from domainsuite.kubernetes.ingress import Ingress

logger = logging.getLogger(__name__)


@dataclass
class TraefikParams:
    """Chart values of the Traefik release"""

    helm_params: HelmParams
    namespaces: list[str] = field(default_factory=list)
    web_node_port: Optional[int] = None
    websecure_node_port: Optional[int] = None

    def values(self) -> dict[str, Any]:
        """Values passed to helm as `--set` arguments"""
        return {
            "kubernetes": {"namespaces": self.namespaces or None},
            "service": {"type": "NodePort"},
            "ports": {
                "web": {"nodePort": self.web_node_port},
                "websecure": {"nodePort": self.websecure_node_port},
            },
        }


class Traefik(IngressController):
    """Traefik watching the domain namespaces"""

    POD_LABELS = {"app.kubernetes.io/name": "traefik"}

    def __init__(self, cluster, helm: Helm, params: TraefikParams) -> None:
        super().__init__(cluster, helm, params.helm_params)
        self.params = params

    def values(self):
        return self.params.values()

    def web_node_port(self) -> int:
        """Node port of the `web` entrypoint, the one domains are reached through"""
        return self.cluster.get_service(self.helm_params.release_name).node_port("web")

    def create_ingress(self, params: HelmParams, domain_uid: str, hostname: str) -> bool:
        """Installs ingress of a domain through the sample ingress-per-domain chart"""
        values = {"wlsDomain": {"domainUID": domain_uid}, "traefik": {"hostname": hostname}}
        return self.helm.install(params, values)

    def delete_ingress(self, params: HelmParams) -> bool:
        """Uninstalls ingress created by `create_ingress`"""
        return self.helm.uninstall(params)

    @staticmethod
    def domain_host(domain: Domain, cluster_name: str) -> str:
        """Host of the ingress rule for the cluster of the domain"""
        return f"{domain.uid}.{domain.namespace()}.{cluster_name}.test"

    def create_domain_ingress(self, cluster, domain: Domain, cluster_ports: dict[str, int]) -> Ingress:
        """
        Creates Ingress routing each cluster of the domain through Traefik
        :param cluster: Client for the namespace of the domain
        :param domain: The domain
        :param cluster_ports: Cluster name to the port of the cluster service
        """
        rules = [
            Ingress.service_rule(self.domain_host(domain, name), domain.cluster_service(name), port)
            for name, port in cluster_ports.items()
        ]
        ingress = Ingress.create_instance(
            cluster, f"{domain.uid}-traefik", rules=rules, annotations={"kubernetes.io/ingress.class": "traefik"}
        )
        ingress.commit()
        logger.info("Created ingress %s for hosts %s", ingress.name(), ingress.hosts)
        return ingress
