"""Monkeypatching land"""

import os

from openshift_client import context

# Domains run on plain Kubernetes clusters, use kubectl unless told otherwise
context.default_oc_path = os.getenv("OPENSHIFT_CLIENT_PYTHON_DEFAULT_OC_PATH", "kubectl")
