"""Conftest for scenarios exposing domains through Traefik"""

from functools import partial

import pytest

from domainsuite.helm import HelmParams
from domainsuite.ingress.traefik import Traefik, TraefikParams

log_components = ["operator", "domain", "traefik"]


@pytest.fixture(scope="module")
def traefik_namespace(scenario, blame, module_label):
    """Namespace of Traefik"""
    return scenario.create_namespace("traefik", blame("traefik"), labels={"testRun": module_label})


@pytest.fixture(scope="module")
def traefik_settings(validated):
    """Validated `traefik` section of settings"""
    return validated("traefik")


@pytest.fixture(scope="module")
def traefik(scenario, helm, traefik_settings, traefik_namespace, domain_namespace, blame):
    """Traefik watching its own and the domain namespace"""
    helm_params = HelmParams(
        blame("traefik"),
        traefik_namespace.project,
        repo_url=traefik_settings["repo_url"],
        repo_name=traefik_settings["repo_name"],
        chart_name=traefik_settings["chart_name"],
        chart_version=traefik_settings.get("chart_version"),
        values_file=traefik_settings.get("values_file"),
    )
    params = TraefikParams(helm_params, namespaces=[traefik_namespace.project, domain_namespace.project])
    traefik = Traefik(traefik_namespace, helm, params)
    scenario.provision(traefik)
    traefik.wait_for_ready(scenario.policy)
    return traefik


@pytest.fixture(scope="module")
def sample_ingress(scenario, traefik, traefik_settings, domain_namespace):
    """Creates ingress of the domain through the sample ingress-per-domain chart"""

    def _create(domain_uid: str, hostname: str):
        params = HelmParams(
            f"{domain_uid}-ingress", domain_namespace.project, chart_dir=traefik_settings["sample_chart_dir"]
        )
        scenario.defer(f"ingress release {params.release_name}", partial(traefik.delete_ingress, params))
        assert traefik.create_ingress(params, domain_uid, hostname), f"Unable to create ingress for {domain_uid}"
        return params

    return _create
