"""
Wrapper around helm binary

Operator, ingress controllers and the sample ingress chart are all installed as Helm releases.
Operations which change the cluster return True on success and log the helm output otherwise,
callers assert on the result.
"""

import json
import logging
import subprocess
from dataclasses import dataclass
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass
class HelmParams:
    """Parameters shared by install, upgrade and uninstall of a single release"""

    release_name: str
    namespace: str
    chart_dir: Optional[str] = None
    repo_url: Optional[str] = None
    repo_name: Optional[str] = None
    chart_name: Optional[str] = None
    chart_version: Optional[str] = None
    values_file: Optional[str] = None

    def __post_init__(self):
        if not (self.chart_dir is None) ^ (self.chart_name is None):
            raise AttributeError("Either `chart_dir` or `chart_name` must be used for the release")
        if self.chart_name is not None and (self.repo_name is None or self.repo_url is None):
            raise AttributeError("`repo_name` and `repo_url` are required for charts from repository")

    @property
    def chart_ref(self) -> str:
        """Chart as referenced in helm commands"""
        if self.chart_dir is not None:
            return self.chart_dir
        return f"{self.repo_name}/{self.chart_name}"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (list, tuple)):
        return "{" + ",".join(_format_value(item) for item in value) + "}"
    return str(value)


def set_arguments(values: dict[str, Any], prefix: str = "") -> list[str]:
    """
    Converts chart values to `--set` arguments.
    Nested dicts are flattened to dotted keys, lists of scalars use `{a,b}` notation
    and lists of dicts use index notation, e.g. `imagePullSecrets[0].name=secret`
    """
    args = []
    for key, value in values.items():
        name = f"{prefix}{key}"
        if value is None:
            continue
        if isinstance(value, dict):
            args.extend(set_arguments(value, f"{name}."))
        elif isinstance(value, (list, tuple)) and any(isinstance(item, dict) for item in value):
            for i, item in enumerate(value):
                if isinstance(item, dict):
                    args.extend(set_arguments(item, f"{name}[{i}]."))
                else:
                    args.extend(["--set", f"{name}[{i}]={_format_value(item)}"])
        else:
            args.extend(["--set", f"{name}={_format_value(value)}"])
    return args


class Helm:
    """Wrapper on top of helm binary"""

    def __init__(self, binary="helm", timeout=10 * 60) -> None:
        super().__init__()
        self.binary = binary
        self.timeout = timeout

    def run(self, *args, **kwargs) -> subprocess.CompletedProcess:
        """Passes arguments to subprocess.run(), see that for more details"""
        args = (self.binary, *args)
        kwargs.setdefault("capture_output", True)
        kwargs.setdefault("text", True)
        kwargs.setdefault("timeout", self.timeout)
        logger.debug("Running %s", " ".join(args))
        return subprocess.run(args, **kwargs)  # pylint: disable= subprocess-run-check

    @staticmethod
    def _succeeded(result: subprocess.CompletedProcess, action: str) -> bool:
        if result.returncode != 0:
            logger.error("helm %s failed with exit code %d: %s", action, result.returncode, result.stderr.strip())
            return False
        logger.info("helm %s succeeded", action)
        return True

    def add_repo(self, name: str, url: str) -> bool:
        """Adds (or refreshes) chart repository"""
        result = self.run("repo", "add", name, url, "--force-update")
        if not self._succeeded(result, f"repo add {name}"):
            return False
        return self._succeeded(self.run("repo", "update", name), f"repo update {name}")

    def _release_args(self, params: HelmParams, values: Optional[dict[str, Any]]) -> list[str]:
        args = [params.release_name, params.chart_ref, "--namespace", params.namespace]
        if params.chart_version:
            args.extend(["--version", params.chart_version])
        if params.values_file:
            args.extend(["--values", params.values_file])
        args.extend(set_arguments(values or {}))
        return args

    def install(self, params: HelmParams, values: dict[str, Any] = None) -> bool:
        """Installs new release, repository is added first for charts from repository"""
        if params.repo_url is not None and not self.add_repo(params.repo_name, params.repo_url):
            return False
        logger.info("Installing release %s (%s) into %s", params.release_name, params.chart_ref, params.namespace)
        result = self.run("install", *self._release_args(params, values))
        return self._succeeded(result, f"install {params.release_name}")

    def upgrade(self, params: HelmParams, values: dict[str, Any] = None) -> bool:
        """Upgrades existing release, values not set are reused from the previous revision"""
        logger.info("Upgrading release %s in namespace %s", params.release_name, params.namespace)
        result = self.run("upgrade", *self._release_args(params, values), "--reuse-values")
        return self._succeeded(result, f"upgrade {params.release_name}")

    def uninstall(self, params: HelmParams) -> bool:
        """Uninstalls release"""
        logger.info("Uninstalling release %s from namespace %s", params.release_name, params.namespace)
        result = self.run("uninstall", params.release_name, "--namespace", params.namespace)
        return self._succeeded(result, f"uninstall {params.release_name}")

    def list_releases(self, namespace: str) -> list[dict[str, Any]]:
        """Returns all releases in the namespace as reported by `helm ls`"""
        result = self.run("ls", "--namespace", namespace, "--all", "--output", "json", check=True)
        return json.loads(result.stdout or "[]")

    def release_status(self, name: str, namespace: str) -> Optional[str]:
        """Returns status of the release, e.g. `deployed`, or None if it does not exist"""
        for release in self.list_releases(namespace):
            if release["name"] == name:
                return release["status"]
        return None

    def is_release_deployed(self, name: str, namespace: str) -> bool:
        """True, if release exists and is in deployed status"""
        return self.release_status(name, namespace) == "deployed"

    def get_values(self, name: str, namespace: str) -> dict[str, Any]:
        """Returns user supplied values of the release"""
        result = self.run("get", "values", name, "--namespace", namespace, "--output", "yaml", check=True)
        return yaml.safe_load(result.stdout) or {}
