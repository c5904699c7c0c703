"""Module containing Secret related classes"""

import base64
from typing import Literal

from domainsuite.kubernetes import KubernetesObject


class Secret(KubernetesObject):
    """Kubernetes Secret object"""

    @classmethod
    def create_instance(
        cls,
        cluster,
        name,
        stringData: dict[str, str] = None,  # pylint: disable=invalid-name
        data: dict[str, str] = None,
        secret_type: Literal["kubernetes.io/dockerconfigjson", "Opaque"] = "Opaque",
        labels: dict[str, str] = None,
    ):
        """Creates new Secret"""
        if not (stringData is None) ^ (data is None):
            raise AttributeError("Either `stringData` or `data` must be used for the secret creation")

        model: dict = {
            "kind": "Secret",
            "apiVersion": "v1",
            "metadata": {
                "name": name,
                "labels": labels,
            },
            "type": secret_type,
        }

        if stringData:
            model["stringData"] = stringData

        if data:
            model["data"] = data

        return cls(model, context=cluster.context)

    def __getitem__(self, name):
        return base64.b64decode(self.model.data[name]).decode("utf-8")

    def __contains__(self, name):
        return name in self.model.data

    def __setitem__(self, name, value):
        self.model.data[name] = base64.b64encode(value).decode("utf-8")


class CredentialsSecret(Secret):
    """Opaque Secret with username and password, used for domain admin credentials and encryption"""

    # pylint: disable=arguments-renamed
    @classmethod
    def create_instance(  # type: ignore[override]
        cls,
        cluster,
        name,
        username: str,
        password: str,
        labels: dict[str, str] = None,
    ):
        return super().create_instance(
            cluster, name, stringData={"username": username, "password": password}, labels=labels
        )


class DockerRegistrySecret(Secret):
    """Image pull Secret holding `.dockerconfigjson`"""

    # pylint: disable=arguments-renamed
    @classmethod
    def create_instance(  # type: ignore[override]
        cls,
        cluster,
        name,
        config_json: str,
        labels: dict[str, str] = None,
    ):
        return super().create_instance(
            cluster,
            name,
            data={".dockerconfigjson": base64.b64encode(config_json.encode("utf-8")).decode("utf-8")},
            secret_type="kubernetes.io/dockerconfigjson",
            labels=labels,
        )
