"""Domain custom resource reconciled by the operator"""

from dataclasses import dataclass, field
from typing import Any, Optional

from domainsuite.checks import assert_eventually, domain_exists, pod_exists, pod_ready, service_exists
from domainsuite.kubernetes import CustomResource
from domainsuite.polling import RetryPolicy
from domainsuite.utils import asdict, check_condition, server_names

DOMAIN_UID_LABEL = "weblogic.domainUID"

DEFAULT_ENV = {
    "JAVA_OPTIONS": "-Dweblogic.StdoutDebugEnabled=false",
    "USER_MEM_ARGS": "-Djava.security.egd=file:/dev/./urandom ",
}


def cluster_service_name(domain_uid: str, cluster_name: str) -> str:
    """Name of the service the operator creates for a cluster, `_` is not allowed in service names"""
    return f"{domain_uid}-cluster-{cluster_name.lower().replace('_', '-')}"


@dataclass
class Channel:
    """Admin service channel, node port 0 lets Kubernetes allocate one"""

    channelName: str  # pylint: disable=invalid-name
    nodePort: int = 0  # pylint: disable=invalid-name


@dataclass
class AdminServer:
    """Admin server section of the Domain"""

    serverStartState: str = "RUNNING"  # pylint: disable=invalid-name
    channels: list[Channel] = field(default_factory=list)

    def asdict(self):
        """Custom asdict, channels are nested under adminService"""
        result: dict[str, Any] = {"serverStartState": self.serverStartState}
        if self.channels:
            result["adminService"] = {"channels": [asdict(channel) for channel in self.channels]}
        return result


@dataclass
class Cluster:
    """Cluster of managed servers"""

    clusterName: str  # pylint: disable=invalid-name
    replicas: int
    serverStartState: str = "RUNNING"  # pylint: disable=invalid-name


class Domain(CustomResource):
    """Domain with home in image, built from a model"""

    @classmethod
    def create_instance(
        cls,
        cluster,
        domain_uid: str,
        image: str,
        credentials_secret: str,
        encryption_secret: str,
        clusters: list[Cluster] = None,
        admin_server: AdminServer = None,
        pull_secrets: list[str] = None,
        env: dict[str, str] = None,
        api_version: str = "weblogic.oracle/v8",
        introspector_deadline: int = 300,
        labels: dict[str, str] = None,
    ):
        """Creates new instance of Domain"""
        clusters = clusters if clusters is not None else [Cluster("cluster-1", 2)]
        admin_server = admin_server or AdminServer()
        env = env if env is not None else DEFAULT_ENV

        model: dict[str, Any] = {
            "apiVersion": api_version,
            "kind": "Domain",
            "metadata": {
                "name": domain_uid,
                "namespace": cluster.project,
                "labels": {DOMAIN_UID_LABEL: domain_uid, **(labels or {})},
            },
            "spec": {
                "domainUID": domain_uid,
                "domainHomeSourceType": "FromModel",
                "image": image,
                "imagePullSecrets": [{"name": name} for name in pull_secrets or []],
                "webLogicCredentialsSecret": {"name": credentials_secret},
                "includeServerOutInPodLog": True,
                "serverStartPolicy": "IF_NEEDED",
                "serverPod": {"env": [{"name": key, "value": value} for key, value in env.items()]},
                "adminServer": asdict(admin_server),
                "clusters": [asdict(c) for c in clusters],
                "configuration": {
                    "model": {"domainType": "WLS", "runtimeEncryptionSecret": encryption_secret},
                    "introspectorJobActiveDeadlineSeconds": introspector_deadline,
                },
            },
        }

        return cls(model, context=cluster.context)

    @property
    def uid(self) -> str:
        """Domain UID, prefix of every pod and service of the domain"""
        return self.model.spec.domainUID

    @property
    def admin_server_pod(self) -> str:
        """Name of the admin server pod"""
        return f"{self.uid}-admin-server"

    def replicas(self, cluster_name: str) -> int:
        """Configured replicas of the cluster"""
        for cluster in self.model.spec.clusters:
            if cluster["clusterName"] == cluster_name:
                return cluster["replicas"]
        raise KeyError(f"Domain {self.uid} has no cluster {cluster_name}")

    def managed_servers(self, cluster_name: str, base: str = "managed-server") -> list[str]:
        """Names of managed servers of the cluster, these are also what the sample app responds with"""
        return server_names(base, self.replicas(cluster_name))

    def managed_server_pods(self, cluster_name: str, base: str = "managed-server") -> list[str]:
        """Names of managed server pods of the cluster"""
        return [f"{self.uid}-{server}" for server in self.managed_servers(cluster_name, base)]

    def cluster_service(self, cluster_name: str) -> str:
        """Name of the cluster service"""
        return cluster_service_name(self.uid, cluster_name)

    @property
    def cluster_names(self) -> list[str]:
        """Names of all clusters of the domain"""
        return [cluster["clusterName"] for cluster in self.model.spec.clusters]

    @property
    def server_pods(self) -> list[str]:
        """Names of all pods the operator should start for this domain"""
        pods = [self.admin_server_pod]
        for name in self.cluster_names:
            pods.extend(self.managed_server_pods(name))
        return pods

    @property
    def pull_secret(self) -> Optional[str]:
        """First image pull secret, if any"""
        secrets = self.model.spec.imagePullSecrets
        return secrets[0]["name"] if secrets else None

    def wait_for_servers(self, cluster, policy: RetryPolicy):
        """
        Waits until the operator started the whole domain:
        Domain exists, then all server pods are created, then Ready, then all server and cluster services exist
        """
        labels = {DOMAIN_UID_LABEL: self.uid}
        namespace = cluster.project
        assert_eventually(domain_exists(cluster, self.uid), policy, f"domain {self.uid} in namespace {namespace}")
        for pod in self.server_pods:
            assert_eventually(
                pod_exists(cluster, pod, labels), policy, f"pod {pod} to be created in namespace {namespace}"
            )
        for pod in self.server_pods:
            assert_eventually(
                pod_ready(cluster, pod, labels), policy, f"pod {pod} to be ready in namespace {namespace}"
            )
        for service in self.server_pods + [self.cluster_service(name) for name in self.cluster_names]:
            assert_eventually(
                service_exists(cluster, service), policy, f"service {service} to exist in namespace {namespace}"
            )

    def wait_for_available(self, policy: RetryPolicy):
        """Waits until the operator reports the domain as Available in its status"""

        def _available(obj):
            return any(check_condition(c, "Available", "True") for c in obj.model.status.conditions or [])

        outcome = self.wait_until(_available, policy, f"domain {self.uid} to be available")
        assert outcome, f"Timed out: {outcome}"
