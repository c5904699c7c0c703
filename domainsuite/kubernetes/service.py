"""Service related objects"""

from domainsuite.kubernetes import KubernetesObject


class Service(KubernetesObject):
    """Kubernetes Service object"""

    def get_port(self, name):
        """Returns port definition for a port with said name"""
        for port in self.model.spec.ports:
            if port["name"] == name:
                return port
        raise KeyError(f"No port with name {name} exists")

    def node_port(self, name) -> int:
        """Returns node port allocated for a port with said name, e.g. admin server `default` channel"""
        if self.model.spec.type != "NodePort":
            raise AttributeError(f"Service {self.name()} is not a NodePort service")
        return int(self.get_port(name)["nodePort"])
