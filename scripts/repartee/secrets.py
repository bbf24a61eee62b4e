"""Secret reference resolution for Clever and SMTP credentials.

A credential variable may hold the literal value or a reference into a
cloud secret store, so the same job spec works on a laptop (plain ``.env``)
and in a cluster (secrets mounted by reference).
"""

from __future__ import annotations

import json
import logging
import os

logger = logging.getLogger("repartee.secrets")

AWS_SECRET_SCHEME = "aws-secret://"
GCP_SECRET_SCHEME = "gcp-secret://"


def resolve_secret(value: str) -> str:
    """Return the plaintext behind ``value``.

    Recognised forms:
      - "aws-secret://name" or "aws-secret://name#json_key"
      - "gcp-secret://name" or "gcp-secret://projects/P/secrets/N/versions/V"
      - anything else is returned unchanged
    """
    if value.startswith(AWS_SECRET_SCHEME):
        return _from_aws(value[len(AWS_SECRET_SCHEME):])
    if value.startswith(GCP_SECRET_SCHEME):
        return _from_gcp(value[len(GCP_SECRET_SCHEME):])
    return value


def _from_aws(ref: str) -> str:
    import boto3

    secret_id, _, json_key = ref.partition("#")
    client = boto3.client(
        "secretsmanager",
        region_name=os.environ.get("AWS_REGION", "us-east-1"),
    )
    logger.debug("Resolving AWS secret %s", secret_id)
    secret_string = client.get_secret_value(SecretId=secret_id)["SecretString"]
    if json_key:
        return str(json.loads(secret_string)[json_key])
    return secret_string


def _from_gcp(ref: str) -> str:
    from google.cloud import secretmanager

    if ref.startswith("projects/"):
        name = ref
    else:
        project = os.environ.get("GCP_PROJECT_ID") or _gcp_project_from_metadata()
        name = f"projects/{project}/secrets/{ref}/versions/latest"

    logger.debug("Resolving GCP secret %s", name)
    client = secretmanager.SecretManagerServiceClient()
    response = client.access_secret_version(request={"name": name})
    return response.payload.data.decode("UTF-8")


def _gcp_project_from_metadata() -> str:
    """Ask the GKE metadata server which project the job runs in."""
    import requests

    try:
        resp = requests.get(
            "http://metadata.google.internal/computeMetadata/v1/project/project-id",
            headers={"Metadata-Flavor": "Google"},
            timeout=2,
        )
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise RuntimeError(
            "Cannot determine GCP project ID. Set GCP_PROJECT_ID env var."
        ) from exc
    return resp.text
