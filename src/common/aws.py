"""AWS storage collaborators: S3 archive blobs and DynamoDB period summaries."""

import logging
from datetime import datetime
from pathlib import Path

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from common.config import Config, get_config
from common.errors import ConfigurationError, DecodeFailure, NotFound, TransportFailure

logger = logging.getLogger(__name__)

DAY_KEY_ATTRIBUTE = "yyyy-mm-dd"
MONTH_KEY_ATTRIBUTE = "yyyy-mm"

_MISSING_OBJECT_CODES = {"NoSuchKey", "404", "NotFound"}


def get_s3_client(config: Config | None = None):
    """Create S3 client."""
    config = config or get_config()
    return boto3.client(
        "s3",
        region_name=config.region,
        endpoint_url=config.storage.endpoint,
    )


def get_dynamodb_client(config: Config | None = None):
    """Create DynamoDB client."""
    config = config or get_config()
    return boto3.client(
        "dynamodb",
        region_name=config.region,
        endpoint_url=config.tables.endpoint,
    )


def build_archive_key(d) -> str:
    """Build the archive path for a date: ``YYYY/MM/YYYYMMDD.json``."""
    return f"{d.year:04d}/{d.month:02d}/{d.strftime('%Y%m%d')}.json"


class S3BlobStore:
    """Archive blobs kept as JSON objects in one S3 bucket."""

    def __init__(self, bucket: str, client=None):
        self.bucket = bucket
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = get_s3_client()
        return self._client

    def put(self, path: str, body: bytes) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=path,
                Body=body,
                ContentType="application/json",
            )
        except (ClientError, BotoCoreError) as exc:
            raise TransportFailure(f"Failed to write s3://{self.bucket}/{path}: {exc}") from exc
        logger.info("Saved archive to s3://%s/%s", self.bucket, path)

    def get(self, path: str) -> bytes:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=path)
            return response["Body"].read()
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _MISSING_OBJECT_CODES:
                raise NotFound(f"s3://{self.bucket}/{path} does not exist") from exc
            raise TransportFailure(f"Failed to read s3://{self.bucket}/{path}: {exc}") from exc
        except BotoCoreError as exc:
            raise TransportFailure(f"Failed to read s3://{self.bucket}/{path}: {exc}") from exc

    def describe(self, path: str) -> str:
        return f"s3://{self.bucket}/{path}"


class LocalBlobStore:
    """Archive blobs written under a local directory with the S3 key layout."""

    def __init__(self, base_path: str | Path):
        self.base_path = Path(base_path)

    def put(self, path: str, body: bytes) -> None:
        filepath = self.base_path / path
        try:
            filepath.parent.mkdir(parents=True, exist_ok=True)
            filepath.write_bytes(body)
        except OSError as exc:
            raise TransportFailure(f"Failed to write {filepath}: {exc}") from exc
        logger.info("Saved archive to %s", filepath)

    def get(self, path: str) -> bytes:
        filepath = self.base_path / path
        if not filepath.exists():
            raise NotFound(f"{filepath} does not exist")
        try:
            return filepath.read_bytes()
        except OSError as exc:
            raise TransportFailure(f"Failed to read {filepath}: {exc}") from exc

    def describe(self, path: str) -> str:
        return str(self.base_path / path)


class DynamoKeyedStore:
    """Period summaries stored as one DynamoDB item per period key.

    Items look like ``{<key_attribute>: S, contents: S (JSON), expired: N (epoch)}``.
    The table's TTL on ``expired`` handles deletion.
    """

    def __init__(self, table: str, key_attribute: str = DAY_KEY_ATTRIBUTE, client=None):
        self.table = table
        self.key_attribute = key_attribute
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = get_dynamodb_client()
        return self._client

    def put(self, key: str, payload: str, expires_at: datetime) -> None:
        item = {
            self.key_attribute: {"S": key},
            "contents": {"S": payload},
            "expired": {"N": str(int(expires_at.timestamp()))},
        }
        try:
            self.client.put_item(TableName=self.table, Item=item)
        except (ClientError, BotoCoreError) as exc:
            raise TransportFailure(f"Failed to write {key} to {self.table}: {exc}") from exc
        logger.info("Saved summary %s to DynamoDB table %s", key, self.table)

    def get(self, key: str) -> str:
        try:
            response = self.client.get_item(
                TableName=self.table,
                Key={self.key_attribute: {"S": key}},
            )
        except (ClientError, BotoCoreError) as exc:
            raise TransportFailure(f"Failed to read {key} from {self.table}: {exc}") from exc

        item = response.get("Item")
        if not item:
            raise NotFound(f"No item for {key} in {self.table}")

        contents = item.get("contents", {}).get("S")
        if not isinstance(contents, str):
            raise DecodeFailure(f"Item {key} in {self.table} has no string contents")
        return contents


def get_blob_store(config: Config | None = None):
    """Build the archive blob store for the configured backend."""
    config = config or get_config()
    if config.storage.backend == "local":
        return LocalBlobStore(config.storage.local_path)
    return S3BlobStore(config.require_bucket())


def get_keyed_store(unit: str, config: Config | None = None) -> DynamoKeyedStore:
    """Build the keyed store holding summaries for a period unit."""
    config = config or get_config()
    if unit == "day":
        return DynamoKeyedStore(config.tables.daily, DAY_KEY_ATTRIBUTE)
    if unit == "week":
        return DynamoKeyedStore(config.tables.weekly, DAY_KEY_ATTRIBUTE)
    if unit == "month":
        return DynamoKeyedStore(config.tables.monthly, MONTH_KEY_ATTRIBUTE)
    raise ConfigurationError(f"No table configured for unit: {unit}")
