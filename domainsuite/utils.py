"""Utility functions for domainsuite"""

import base64
import enum
import json
import os
import getpass
import secrets
from copy import deepcopy
from dataclasses import is_dataclass, fields
from datetime import datetime

JSONValues = None | str | int | bool | list["JSONValues"] | dict[str, "JSONValues"]


def generate_tail(tail=5):
    """Returns random suffix"""
    return secrets.token_urlsafe(tail).translate(str.maketrans("", "", "-_")).lower()


def randomize(name, tail=5):
    "To avoid conflicts returns modified name with random suffix"
    return f"{name}-{generate_tail(tail)}"


def _whoami():
    """Returns username"""
    try:
        return getpass.getuser()
    # want to catch broad exception and fallback at any circumstance
    # pylint: disable=broad-except
    except Exception:
        return str(os.getuid())


def unique_image_tag(now: datetime = None) -> str:
    """Returns image tag unique for this run in the `yyyy-mm-dd-<epoch millis>` format"""
    now = now or datetime.now()
    return f"{now:%Y-%m-%d}-{int(now.timestamp() * 1000)}"


def image_with_tag(image: str, tag: str) -> str:
    """Returns the image reference with its tag (or digest) replaced, registry port is kept"""
    repository, slash, name = image.rpartition("/")
    name = name.split("@")[0].split(":")[0]
    return f"{repository}{slash}{name}:{tag}"


def docker_config_json(username: str, password: str, email: str, registry: str) -> str:
    """
    Returns content of `.dockerconfigjson` key for docker-registry Secret
    :param username: Registry username
    :param password: Registry password
    :param email: Email of the registry user
    :param registry: Registry hostname, e.g. `phx.ocir.io`
    """
    auth = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("utf-8")
    return json.dumps(
        {"auths": {registry: {"username": username, "password": password, "email": email, "auth": auth}}}
    )


def server_names(base: str, replicas: int) -> list[str]:
    """Returns names of numbered servers, e.g. managed-server1 .. managed-serverN"""
    return [f"{base}{i}" for i in range(1, replicas + 1)]


def asdict(obj) -> dict[str, JSONValues]:
    """
    This function converts dataclass object to dictionary.
    While it works similar to `dataclasses.asdict` a notable change is usage of
    overriding `asdict()` function if dataclass contains it.
    This function works recursively in lists, tuples and dicts. All other values are passed to copy.deepcopy function.
    """
    if not is_dataclass(obj):
        raise TypeError("asdict() should be called on dataclass instances")
    return _asdict_recurse(obj)


def _asdict_recurse(obj):
    if hasattr(obj, "asdict"):
        return obj.asdict()

    if not is_dataclass(obj):
        return deepcopy(obj)

    result = {}
    for field in fields(obj):
        value = getattr(obj, field.name)
        if value is None:
            continue  # do not include None values

        if is_dataclass(value):
            result[field.name] = _asdict_recurse(value)
        elif isinstance(value, (list, tuple)):
            result[field.name] = type(value)(_asdict_recurse(i) for i in value)
        elif isinstance(value, dict):
            result[field.name] = type(value)((_asdict_recurse(k), _asdict_recurse(v)) for k, v in value.items())
        elif isinstance(value, enum.Enum):
            result[field.name] = value.value
        else:
            result[field.name] = deepcopy(value)
    return result


def check_condition(condition, condition_type, status, reason=None, message=None):
    """Checks if condition matches expectation, won't check message and reason if they are None"""
    if (
        condition.type == condition_type
        and condition.status == status
        and (message is None or message in condition.message)
        and (reason is None or reason == condition.reason)
    ):
        return True
    return False
