"""Module which initializes Dynaconf"""

from dynaconf import Dynaconf, Validator

from domainsuite.polling import RetryPolicy

settings = Dynaconf(
    environments=True,
    lowercase_read=True,
    load_dotenv=True,
    settings_files=["config/settings.yaml", "config/secrets.yaml"],
    envvar_prefix="DOMAINSUITE",
    merge_enabled=True,
    validators=[
        Validator("retry.initial_delay", default=2, gte=0),
        Validator("retry.interval", default=10, gt=0),
        Validator("retry.timeout", default=5 * 60, gt=0),
        Validator("verification.max_iterations", default=50, gte=1),
        Validator("verification.interval", default=1, gte=0),
        Validator("helm.binary", default="helm"),
        Validator("image_tool.binary", default="docker"),
        Validator("operator.image", must_exist=True, ne=None)
        & Validator("operator.chart_dir", must_exist=True, ne=None)
        & Validator("operator.service_account", default="default"),
        Validator("domain.image", must_exist=True, ne=None)
        & Validator("domain.api_version", default="weblogic.oracle/v8")
        & Validator("domain.admin_username", default="weblogic")
        & Validator("domain.admin_password", default="welcome1")
        & Validator("domain.cluster_port", default=8001)
        & Validator("domain.app_path", default="/testwebapp/"),
        Validator("registry.url", must_exist=True, ne=None)
        & Validator("registry.username", must_exist=True, ne=None)
        & Validator("registry.password", must_exist=True, ne=None)
        & Validator("registry.email", must_exist=True, ne=None),
        Validator("traefik.repo_url", must_exist=True, ne=None)
        & Validator("traefik.chart_name", default="traefik")
        & Validator("traefik.sample_chart_dir", must_exist=True, ne=None),
        Validator("voyager.repo_url", must_exist=True, ne=None)
        & Validator("voyager.chart_name", default="voyager")
        & Validator("voyager.cloud_provider", default="baremetal"),
        Validator("nodeport_host", must_exist=True, ne=None),
    ],
    validate_only=["retry", "verification", "helm", "image_tool"],
    loaders=["dynaconf.loaders.env_loader", "domainsuite.config.cluster_loader"],
)


def retry_policy() -> RetryPolicy:
    """Suite-wide retry policy for waiting on cluster state"""
    return RetryPolicy.from_settings(settings["retry"])
