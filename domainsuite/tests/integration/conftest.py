"""Conftest for end-to-end scenarios, they need a cluster, helm and configured images"""

from datetime import datetime, timezone
from functools import partial

import pytest
from dynaconf import ValidationError

from domainsuite.capabilities import has_binary, has_cluster
from domainsuite.checks import assert_eventually, image_exists
from domainsuite.config import retry_policy, settings
from domainsuite.distribution import verify_distribution
from domainsuite.domain import Cluster, Domain
from domainsuite.helm import Helm, HelmParams
from domainsuite.httpx import DomainClient
from domainsuite.image import ImageTool
from domainsuite.kubernetes.secret import CredentialsSecret, DockerRegistrySecret
from domainsuite.kubernetes.service_account import ServiceAccount
from domainsuite.log_collection import collect_failure_artifacts
from domainsuite.operator import Operator, OperatorParams
from domainsuite.scenario import ScenarioContext
from domainsuite.utils import docker_config_json, image_with_tag, unique_image_tag

start_time_key = pytest.StashKey[datetime]()


def pytest_runtest_setup(item):
    """Skip or fail scenarios when the cluster or binaries they drive are not available"""
    skip_or_fail = pytest.fail if item.config.getoption("--enforce") else pytest.skip

    for available, error in (has_binary(settings["helm"]["binary"]), has_cluster()):
        if not available:
            skip_or_fail(f"Unable to run scenario: {error}")
    item.stash[start_time_key] = datetime.now(timezone.utc)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):  # pylint: disable=unused-argument
    """Collect logs of the scenario components when the test itself failed"""
    outcome = yield
    report = outcome.get_result()
    scenario = item.funcargs.get("scenario") if hasattr(item, "funcargs") else None
    if report.when == "call" and report.failed and scenario is not None:
        collect_failure_artifacts(item, scenario, item.stash.get(start_time_key, datetime.now(timezone.utc)))


@pytest.fixture(scope="session")
def validated(testconfig, skip_or_fail):
    """Returns function which validates section of the settings, tests are skipped or failed if it is missing"""

    def _validated(section: str):
        try:
            testconfig.validators.validate(only=[section])
        except (KeyError, ValidationError) as exc:
            skip_or_fail(f"{section} configuration item is missing: {exc}")
        return testconfig[section]

    return _validated


@pytest.fixture(scope="session")
def cluster(testconfig):
    """Kubernetes client without namespace, every scenario creates its own"""
    return testconfig["cluster"]


@pytest.fixture(scope="session")
def policy():
    """Retry policy for everything the scenarios wait for"""
    return retry_policy()


@pytest.fixture(scope="session")
def helm(testconfig):
    """Helm binary wrapper"""
    return Helm(testconfig["helm"]["binary"])


@pytest.fixture(scope="module")
def scenario(request, cluster, policy):
    """Scenario context, everything provisioned through it is released after the module"""
    context = ScenarioContext(cluster, policy)
    request.addfinalizer(context.teardown)
    return context


@pytest.fixture(scope="module")
def operator_namespace(scenario, blame, module_label):
    """Namespace of the operator"""
    return scenario.create_namespace("operator", blame("op"), labels={"testRun": module_label})


@pytest.fixture(scope="module")
def domain_namespace(scenario, blame, module_label):
    """Namespace of the domains"""
    return scenario.create_namespace("domain", blame("domain"), labels={"testRun": module_label})


@pytest.fixture(scope="module")
def operator(scenario, helm, validated, operator_namespace, domain_namespace, blame):
    """Operator managing the domain namespace"""
    cnf = validated("operator")
    service_account = scenario.provision(ServiceAccount.create_instance(operator_namespace, blame("sa")))
    params = OperatorParams(
        HelmParams(blame("operator"), operator_namespace.project, chart_dir=cnf["chart_dir"]),
        image=cnf["image"],
        domain_namespaces=[domain_namespace.project],
        service_account=service_account.name(),
    )
    operator = Operator(operator_namespace, helm, params)
    scenario.provision(operator)
    operator.wait_for_ready(scenario.policy)
    return operator


@pytest.fixture(scope="module")
def domain_settings(validated):
    """Validated `domain` section of settings"""
    return validated("domain")


@pytest.fixture(scope="module")
def image_tool(testconfig, skip_or_fail):
    """Docker (or compatible) binary wrapper"""
    binary = testconfig["image_tool"]["binary"]
    available, error = has_binary(binary)
    if not available:
        skip_or_fail(f"Unable to push domain image: {error}")
    return ImageTool(binary)


@pytest.fixture(scope="module")
def domain_image(scenario, image_tool, validated, domain_settings):
    """Domain image pushed to the registry under a tag unique for this run, local tag is removed after the module"""
    registry = validated("registry")
    source = domain_settings["image"]
    image = image_with_tag(source, unique_image_tag())

    if not image_tool.exists(source):
        assert image_tool.pull(source), f"Unable to pull {source}"
    scenario.defer(f"image {image}", partial(image_tool.delete, image))
    assert image_tool.tag(source, image), f"Unable to tag {source} as {image}"
    assert_eventually(image_exists(image_tool, image), scenario.policy, f"image {image} to exist locally")

    assert image_tool.login(registry["url"], registry["username"], registry["password"]), "Registry login failed"
    assert image_tool.push(image), f"Unable to push {image}"
    return image


@pytest.fixture(scope="module")
def pull_secret(scenario, validated, domain_namespace):
    """Image pull secret for the domain image in the domain namespace"""
    registry = validated("registry")
    config = docker_config_json(registry["username"], registry["password"], registry["email"], registry["url"])
    secret = DockerRegistrySecret.create_instance(domain_namespace, registry["secret_name"], config)
    return scenario.provision(secret).name()


@pytest.fixture(scope="module")
def credentials_secret(scenario, domain_settings, domain_namespace, blame):
    """Domain admin credentials"""
    secret = CredentialsSecret.create_instance(
        domain_namespace, blame("creds"), domain_settings["admin_username"], domain_settings["admin_password"]
    )
    return scenario.provision(secret).name()


@pytest.fixture(scope="module")
def encryption_secret(scenario, domain_namespace, blame):
    """Runtime encryption secret of the model"""
    secret = CredentialsSecret.create_instance(domain_namespace, blame("enc"), "weblogicenc", "weblogicenc")
    return scenario.provision(secret).name()


@pytest.fixture(scope="module")
def create_domain(
    scenario,
    operator,
    domain_settings,
    domain_image,
    domain_namespace,
    pull_secret,
    credentials_secret,
    encryption_secret,
    label,
):  # pylint: disable=unused-argument
    """Creates domain and waits until the operator starts all of its servers"""

    def _create(domain_uid: str, replicas: int = 2) -> Domain:
        domain = Domain.create_instance(
            domain_namespace,
            domain_uid,
            domain_image,
            credentials_secret,
            encryption_secret,
            clusters=[Cluster("cluster-1", replicas)],
            pull_secrets=[pull_secret],
            api_version=domain_settings["api_version"],
            labels={"testRun": label},
        )
        scenario.provision(domain)
        domain.wait_for_servers(domain_namespace, scenario.policy)
        return domain

    return _create


@pytest.fixture(scope="module")
def nodeport_host(validated):
    """Address where node ports of the cluster are reachable"""
    return validated("nodeport_host")


@pytest.fixture(scope="module")
def verify_traffic(testconfig, nodeport_host, domain_settings):
    """Verifies that all managed servers respond through the ingress controller node port"""
    max_iterations = testconfig["verification"]["max_iterations"]
    interval = testconfig["verification"]["interval"]

    def _verify(port: int, host: str, backends: list[str]):
        with DomainClient.through_ingress(nodeport_host, port, host) as client:
            result = verify_distribution(
                lambda: client.get(domain_settings["app_path"]), backends, max_iterations, interval
            )
        assert result, f"Traffic through {host} was not distributed: {result}"
        return result

    return _verify
