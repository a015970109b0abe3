from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import replace
from unittest.mock import MagicMock

from botocore.exceptions import ClientError
from django.test import SimpleTestCase

from ..services.config import S3Config
from ..services.errors import StorageBackendNotConfigured, StorageError
from ..services.storage import (
    LocalStorageGateway,
    S3StorageGateway,
    StorageGateway,
    build_storage_gateway,
)
from .factories import make_config


def _s3_config(**overrides) -> S3Config:
    values = dict(
        bucket_name="screenshots",
        endpoint_url=None,
        region_name="eu-west-1",
        access_key="key",
        secret_key="secret",
    )
    values.update(overrides)
    return S3Config(**values)


class S3StorageGatewayTests(SimpleTestCase):
    def test_public_url_derivation(self):
        cases = [
            (S3StorageGateway(_s3_config(), public_base_url="https://cdn.test/"), "https://cdn.test/g/a%20b.png"),
            (
                S3StorageGateway(_s3_config(endpoint_url="http://minio:9000/")),
                "http://minio:9000/screenshots/g/a%20b.png",
            ),
            (S3StorageGateway(_s3_config()), "https://screenshots.s3.eu-west-1.amazonaws.com/g/a%20b.png"),
        ]
        for gateway, expected in cases:
            with self.subTest(expected=expected):
                self.assertEqual(gateway.get_public_url("g/a b.png"), expected)

    def test_upload_puts_object(self):
        gateway = S3StorageGateway(_s3_config())
        gateway._client = MagicMock()

        gateway.upload("g/a.png", b"data", "image/png")

        gateway._client.put_object.assert_called_once_with(
            Bucket="screenshots", Key="g/a.png", Body=b"data", ContentType="image/png"
        )

    def test_upload_error_is_wrapped(self):
        gateway = S3StorageGateway(_s3_config())
        gateway._client = MagicMock()
        gateway._client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )

        with self.assertRaises(StorageError):
            gateway.upload("g/a.png", b"data")


class LocalStorageGatewayTests(SimpleTestCase):
    def setUp(self) -> None:
        self.root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.root, ignore_errors=True)
        self.gateway = LocalStorageGateway(make_config(local_root=self.root).storage)

    def test_upload_writes_file_under_bucket(self):
        self.gateway.upload("group-1/a.png", b"png-bytes")

        with open(os.path.join(self.root, "screenshots", "group-1", "a.png"), "rb") as fh:
            self.assertEqual(fh.read(), b"png-bytes")

    def test_existing_key_is_rejected(self):
        self.gateway.upload("group-1/a.png", b"first")

        with self.assertRaises(StorageError):
            self.gateway.upload("group-1/a.png", b"second")

    def test_public_url(self):
        self.assertEqual(
            self.gateway.get_public_url("group-1/a.png"),
            "https://cdn.test/media/screenshots/group-1/a.png",
        )


class BuildStorageGatewayTests(SimpleTestCase):
    def test_backend_selection(self):
        config = make_config()
        self.assertIsInstance(build_storage_gateway(config), LocalStorageGateway)

        s3_config = replace(config, storage=replace(config.storage, backend="s3", s3=_s3_config()))
        self.assertIsInstance(build_storage_gateway(s3_config), S3StorageGateway)

    def test_s3_without_settings_is_rejected(self):
        config = make_config()
        broken = replace(config, storage=replace(config.storage, backend="s3"))

        with self.assertRaises(StorageBackendNotConfigured):
            build_storage_gateway(broken)

    def test_gateway_requires_both_operations(self):
        with self.assertRaises(TypeError):
            StorageGateway()

        class UploadOnly(StorageGateway):
            def upload(self, path, data, content_type=None):
                pass

        with self.assertRaises(TypeError):
            UploadOnly()
