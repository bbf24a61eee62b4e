"""Tests for secret reference resolution."""

import json
import sys
from unittest.mock import MagicMock

import pytest

from scripts.repartee.secrets import resolve_secret

pytestmark = pytest.mark.unit


class TestResolveSecret:
    def test_plain_value_unchanged(self):
        assert resolve_secret("plain-secret") == "plain-secret"
        assert resolve_secret("") == ""

    def test_aws_json_key(self, monkeypatch):
        client = MagicMock()
        client.get_secret_value.return_value = {
            "SecretString": json.dumps({"secret": "s3cr3t", "id": "abc"})
        }
        boto3 = MagicMock()
        boto3.client.return_value = client
        monkeypatch.setitem(sys.modules, "boto3", boto3)

        assert resolve_secret("aws-secret://clever/accelerator#secret") == "s3cr3t"
        client.get_secret_value.assert_called_once_with(SecretId="clever/accelerator")

    def test_aws_whole_string(self, monkeypatch):
        client = MagicMock()
        client.get_secret_value.return_value = {"SecretString": "raw-value"}
        boto3 = MagicMock()
        boto3.client.return_value = client
        monkeypatch.setitem(sys.modules, "boto3", boto3)

        assert resolve_secret("aws-secret://gmail-password") == "raw-value"
