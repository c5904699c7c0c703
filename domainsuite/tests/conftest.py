"""Root conftest"""

import signal
from urllib.parse import urlparse

import pytest
from pytest_metadata.plugin import metadata_key  # type: ignore

from domainsuite.config import settings
from domainsuite.utils import randomize, _whoami


def pytest_addoption(parser):
    """Add options to include various kinds of tests in testrun"""
    parser.addoption(
        "--enforce",
        action="store_true",
        default=False,
        help="Fails tests instead of skip, if cluster or configuration is missing",
    )


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):  # pylint: disable=unused-argument
    """Add issue link to html report"""
    pytest_html = item.config.pluginmanager.getplugin("html")
    outcome = yield
    report = outcome.get_result()
    extra = getattr(report, "extra", [])
    if report.when == "setup" and pytest_html is not None:
        for marker in item.iter_markers(name="issue"):
            issue = marker.args[0]
            url = urlparse(issue)
            if url.hostname and "github" in url.hostname:
                label = url.path.replace("/issues/", "#")[1:]
            else:
                label = issue
            extra.append(pytest_html.extras.url(issue, name=label))
        report.extra = extra


def pytest_report_header(config):
    """Adds operator and domain images to pytest header output"""
    operator_image = settings.get("operator", {}).get("image")
    domain_image = settings.get("domain", {}).get("image")
    if metadata_key in config.stash:
        config.stash[metadata_key]["Operator"] = operator_image
        config.stash[metadata_key]["Domain"] = domain_image
    return f"Operator image: {operator_image}\nDomain image: {domain_image}"


def pytest_collection_modifyitems(session, config, items):  # pylint: disable=unused-argument
    """
    Add user properties to testcases for xml output

    This adds issue property to junit output, utilizes pytest.mark.issue marker.

    This is copied from pytest examples to record custom properties in junit
    https://docs.pytest.org/en/stable/usage.html
    """

    for item in items:
        for marker in item.iter_markers(name="issue"):
            issue = marker.args[0]
            item.user_properties.append(("issue", issue))


@pytest.fixture(scope="session")
def skip_or_fail(request):
    """Skips or fails tests depending on --enforce option"""
    return pytest.fail if request.config.getoption("--enforce") else pytest.skip


@pytest.fixture(scope="session", autouse=True)
def term_handler():
    """
    This will handle ^C, cleanup won't be skipped
    https://github.com/pytest-dev/pytest/issues/9142
    """
    orig = signal.signal(signal.SIGTERM, signal.getsignal(signal.SIGINT))
    yield
    signal.signal(signal.SIGTERM, orig)


@pytest.fixture(scope="session")
def testconfig():
    """Suite settings"""
    return settings


@pytest.fixture(scope="session")
def blame(request):
    """Returns function that will add random identifier to the name"""
    if "tester" in settings:
        user = settings["tester"]
    else:
        user = _whoami()

    def _blame(name: str, tail: int = 3) -> str:
        """Create 'scoped' name within given test

        This returns unique name for object(s) to avoid conflicts

        Args:
            :param name: Base name, e.g. 'ns'
            :param tail: length of random suffix"""

        nodename = request.node.name
        if nodename.startswith("test_"):
            nodename = nodename[5:]

        context = nodename.lower().split("_")[0]
        if len(context) > 2:
            context = context[:2] + context[2:-1].translate(str.maketrans("", "", "aiyu")) + context[-1]

        if "." in context:
            context = context.split(".")[0]

        return randomize(f"{name[:8]}-{user[:8]}-{context[:9]}", tail=tail).lower()

    return _blame


@pytest.fixture(scope="session")
def label(blame):
    """Session scope label for all resources"""
    return blame("testrun")


@pytest.fixture(scope="module")
def module_label(label):
    """Module scope label for all resources"""
    return randomize(label)
