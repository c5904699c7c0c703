"""Wrapper around docker binary for working with domain images"""

import logging
import subprocess

logger = logging.getLogger(__name__)


class ImageTool:
    """Wrapper on top of docker (or compatible, e.g. podman) binary"""

    def __init__(self, binary="docker", timeout=10 * 60) -> None:
        super().__init__()
        self.binary = binary
        self.timeout = timeout

    def run(self, *args, **kwargs) -> subprocess.CompletedProcess:
        """Passes arguments to subprocess.run(), see that for more details"""
        args = (self.binary, *args)
        kwargs.setdefault("capture_output", True)
        kwargs.setdefault("text", True)
        kwargs.setdefault("timeout", self.timeout)
        return subprocess.run(args, **kwargs)  # pylint: disable= subprocess-run-check

    def login(self, registry: str, username: str, password: str) -> bool:
        """Logs into the registry, password is passed through stdin"""
        result = self.run("login", registry, "--username", username, "--password-stdin", input=password)
        if result.returncode != 0:
            logger.error("Login to %s as %s failed: %s", registry, username, result.stderr.strip())
            return False
        return True

    def pull(self, image: str) -> bool:
        """Pulls image from its registry"""
        logger.info("Pulling image %s", image)
        result = self.run("pull", image)
        if result.returncode != 0:
            logger.error("Pull of %s failed: %s", image, result.stderr.strip())
            return False
        return True

    def tag(self, source: str, target: str) -> bool:
        """Creates local image target which refers to source"""
        result = self.run("tag", source, target)
        if result.returncode != 0:
            logger.error("Unable to tag %s as %s: %s", source, target, result.stderr.strip())
            return False
        return True

    def push(self, image: str) -> bool:
        """Pushes image to its registry"""
        logger.info("Pushing image %s", image)
        result = self.run("push", image)
        if result.returncode != 0:
            logger.error("Push of %s failed: %s", image, result.stderr.strip())
            return False
        return True

    def exists(self, image: str) -> bool:
        """True, if image is present locally"""
        return self.run("image", "inspect", image).returncode == 0

    def delete(self, image: str) -> bool:
        """Removes local image"""
        result = self.run("rmi", "--force", image)
        if result.returncode != 0:
            logger.warning("Unable to delete image %s: %s", image, result.stderr.strip())
            return False
        return True
