"""Kubernetes common objects"""

from openshift_client import APIObject, timeout

from domainsuite.lifecycle import LifecycleObject
from domainsuite.polling import RetryPolicy, PollOutcome, wait_for


class KubernetesObject(APIObject, LifecycleObject):
    """APIObject which is created by `commit` and removed by `delete`"""

    def commit(self):
        """
        Creates object on the server and returns created entity.
        It will be the same class but attributes might differ, due to server adding/rejecting some of them.
        """
        self.create(["--save-config=true"])
        return self.refresh()

    def delete(self, ignore_not_found=True, cmd_args=None):
        """Deletes the resource, by default ignored not found"""
        with timeout(30):
            return super().delete(ignore_not_found, cmd_args)

    def wait_until(self, test_function, policy: RetryPolicy, description: str = None) -> PollOutcome:
        """Waits until the test function succeeds for the current server-side state of this object"""

        def _check():
            with timeout(60):
                return test_function(self.refresh())

        description = description or f"{self.kind()}/{self.name()} in namespace {self.namespace()}"
        return wait_for(_check, policy, description)


class CustomResource(KubernetesObject):
    """Custom APIObjects that implements methods that improves manipulation with CR objects"""

    def __getitem__(self, name):
        return self.model.spec[name]
