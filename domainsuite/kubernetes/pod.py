"""Pod related objects"""

from domainsuite.kubernetes import KubernetesObject
from domainsuite.utils import check_condition


class Pod(KubernetesObject):
    """Kubernetes Pod object"""

    @property
    def labels(self) -> dict[str, str]:
        """Labels of the pod"""
        return dict(self.model.metadata.labels or {})

    @property
    def phase(self) -> str:
        """Pod phase as reported in status"""
        return self.model.status.phase

    @property
    def ready(self) -> bool:
        """True, if pod is running and has Ready condition"""
        if self.phase != "Running":
            return False
        return any(check_condition(x, "Ready", "True") for x in self.model.status.conditions or [])
