"""Contains capability related functions"""

import functools
import shutil

from domainsuite.config import settings


@functools.cache
def has_cluster():
    """Returns True, if the cluster from settings is reachable"""
    cluster = settings["cluster"]
    if not cluster.connected:
        return False, f"Cluster is not reachable, or namespace {cluster.project} does not exist"
    return True, None


@functools.cache
def has_binary(binary: str):
    """Returns True, if the binary is on the PATH"""
    if shutil.which(binary) is None:
        return False, f"Binary {binary} was not found on the PATH"
    return True, None
