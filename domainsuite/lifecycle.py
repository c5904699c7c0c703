"""Lifecycle of everything the suite provisions"""

import abc


class LifecycleObject(abc.ABC):
    """Any object which can be created on and removed from the cluster"""

    @abc.abstractmethod
    def commit(self):
        """Creates the object"""

    @abc.abstractmethod
    def delete(self):
        """Removes the object"""
