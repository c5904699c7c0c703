"""Conftest for scenarios exposing domains through Voyager"""

import pytest

from domainsuite.helm import HelmParams
from domainsuite.ingress.voyager import Voyager, VoyagerParams

log_components = ["operator", "domain", "voyager"]


@pytest.fixture(scope="module")
def voyager_namespace(scenario, blame, module_label):
    """Namespace of Voyager operator"""
    return scenario.create_namespace("voyager", blame("voyager"), labels={"testRun": module_label})


@pytest.fixture(scope="module")
def voyager(scenario, helm, validated, voyager_namespace, blame):
    """Voyager operator"""
    cnf = validated("voyager")
    helm_params = HelmParams(
        blame("voyager"),
        voyager_namespace.project,
        repo_url=cnf["repo_url"],
        repo_name=cnf["repo_name"],
        chart_name=cnf["chart_name"],
        chart_version=cnf.get("chart_version"),
    )
    voyager = Voyager(voyager_namespace, helm, VoyagerParams(helm_params, cloud_provider=cnf["cloud_provider"]))
    scenario.provision(voyager)
    voyager.wait_for_ready(scenario.policy)
    return voyager
