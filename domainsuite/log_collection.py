"""
Log collection for failed scenarios

When a test which uses the `scenario` fixture fails, logs of selected components are saved into
`test-failures/<worker>/<test name>/`, parallel runs with pytest-xdist get a directory per worker.

Configuration:
--------------
Components are opt-in, add a module-level variable to the test module or conftest.py:

   log_components = ["operator", "domain", "traefik"]

Available components (namespace is looked up by the role in the scenario):
- operator: domain operator pod
- domain: admin and managed server pods
- traefik: Traefik pods
- voyager: Voyager operator pods
"""

import logging
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Optional

from openshift_client import OpenShiftPythonException, context

from domainsuite.ingress.traefik import Traefik
from domainsuite.ingress.voyager import Voyager
from domainsuite.operator import OPERATOR_POD_LABELS

logger = logging.getLogger(__name__)

# component name -> (namespace role in scenario, pod labels), None selects all pods of the namespace
COMPONENTS: dict[str, tuple[str, Optional[dict[str, str]]]] = {
    "operator": ("operator", OPERATOR_POD_LABELS),
    "domain": ("domain", None),
    "traefik": ("traefik", Traefik.POD_LABELS),
    "voyager": ("voyager", Voyager.POD_LABELS),
}


def _write_log(log_file: Path, header: dict[str, str], logs: str):
    with open(log_file, "w", encoding="utf-8") as file:
        for key, value in header.items():
            file.write(f"# {key}: {value}\n")
        file.write(f"# {'=' * 70}\n\n")
        file.write(logs)


def collect_pod_logs(cluster, label_selector: Optional[dict], log_dir: Path, start_time: datetime, component: str):
    """Saves logs of all containers of pods matching the labels, only logs since the start time are saved"""
    since_time = start_time.strftime("%Y-%m-%dT%H:%M:%SZ")
    namespace = cluster.project
    pods = cluster.get_pods(label_selector or {})
    if not pods:
        logger.warning("No %s pods found with labels %s in namespace %s", component, label_selector, namespace)
        return

    for pod in pods:
        for container in [c.name for c in pod.model.spec.containers]:
            args = [context.default_oc_path, "logs", f"pod/{pod.name()}", "-c", container, "-n", namespace]
            try:
                result = subprocess.run(
                    [*args, f"--since-time={since_time}", "--timestamps"],
                    capture_output=True,
                    text=True,
                    timeout=30,
                    check=False,
                )
            except subprocess.TimeoutExpired:
                logger.error("Timeout collecting logs from %s/%s", pod.name(), container)
                continue

            header = {
                "Component": component,
                "Pod": pod.name(),
                "Container": container,
                "Namespace": namespace,
                "Logs since": since_time,
            }
            logs = result.stdout if result.returncode == 0 else result.stderr
            _write_log(log_dir / f"{component}-{pod.name()}-{container}.log", header, logs)
            logger.info("Collected %s logs: %s/%s", component, pod.name(), container)


def get_log_components(item) -> set[str]:
    """
    Components to collect logs from, test module configuration takes precedence over conftest modules.
    Only conftest modules in directories above the test are considered, the nearest one wins.
    Empty set if nothing is configured.
    """
    if hasattr(item.module, "log_components"):
        return set(item.module.log_components)

    conftests = []
    for plugin in item.config.pluginmanager.get_plugins():
        path = Path(getattr(plugin, "__file__", None) or "")
        if path.name == "conftest.py" and hasattr(plugin, "log_components") and item.path.is_relative_to(path.parent):
            conftests.append((len(path.parent.parts), plugin))

    if not conftests:
        return set()
    _, nearest = max(conftests, key=lambda conftest: conftest[0])
    return set(nearest.log_components)


def collect_failure_artifacts(item, scenario, start_time: datetime):
    """Collects logs of configured components from namespaces of the scenario"""
    components = get_log_components(item)
    if not components:
        logger.info("No log components configured for %s - skipping log collection", item.name)
        return

    worker_id = getattr(item.config, "workerinput", {}).get("workerid", "master")
    log_dir = Path("test-failures") / worker_id / item.name
    log_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Collecting logs of %s for failed test %s into %s", ", ".join(sorted(components)), item.name, log_dir)

    for component in sorted(components):
        role, labels = COMPONENTS[component]
        if role not in scenario.namespaces:
            logger.warning("Scenario has no %s namespace, skipping %s logs", role, component)
            continue
        try:
            collect_pod_logs(scenario.namespace(role), labels, log_dir, start_time, component)
        except OpenShiftPythonException as error:
            logger.warning("Could not collect %s logs: %s", component, error)

    logger.info("Log collection complete. Logs saved to: %s", log_dir)
