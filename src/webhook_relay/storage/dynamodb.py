"""
Module: dynamodb.py
Description: DynamoDB-backed key-value store for bucket records.

Each bucket is one item in the subscriptions table. The item holds the
whole bucket record (rule name -> subscription id -> subscription) as a
JSON string, so a bucket record is always read and written as a unit.

Key Components:
- SubscriptionStore: get/put/delete/list of whole bucket records
- Error handling: ClientErrors are logged with context and re-raised

Dependencies: boto3, botocore, json, typing
"""

import json
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import ClientError

from webhook_relay.utils.logger import get_logger

logger = get_logger(__name__)

BucketRecord = Dict[str, Dict[str, Dict[str, Any]]]


class SubscriptionStore:
    """
    Key-value store of bucket records backed by a DynamoDB table.

    The table has a single string partition key, bucket_name. Every
    operation is atomic per key; serializing read-modify-write sequences
    is left to the caller (see SubscriptionRegistry).

    Attributes:
        table_name: Name of the DynamoDB subscriptions table
        dynamodb: boto3 DynamoDB resource
        table: boto3 DynamoDB table resource

    Example:
        >>> store = SubscriptionStore(table_name="webhook-relay-subscriptions")
        >>> await store.put("my-bucket", {"rule": {"<uuid>": {"url": "https://ex.com"}}})
        >>> await store.get("my-bucket")
    """

    def __init__(self, table_name: str, region_name: Optional[str] = None):
        """
        Initialize the store.

        Args:
            table_name: Name of the DynamoDB subscriptions table
            region_name: AWS region, defaults to the boto3 session region

        Raises:
            ValueError: If table_name is empty or invalid
        """
        if not table_name or not isinstance(table_name, str):
            raise ValueError("table_name must be a non-empty string")

        self.table_name = table_name
        self.dynamodb = boto3.resource('dynamodb', region_name=region_name)
        self.table = self.dynamodb.Table(table_name)

        logger.info(
            "Subscription store initialized",
            table_name=table_name
        )

    async def get(self, bucket_name: str) -> Optional[BucketRecord]:
        """
        Retrieve the record for a bucket.

        Args:
            bucket_name: Bucket name (partition key)

        Returns:
            The bucket record, or None if the bucket has no record

        Raises:
            ClientError: If DynamoDB operation fails
        """
        try:
            response = self.table.get_item(Key={'bucket_name': bucket_name})

            if 'Item' not in response:
                logger.debug(
                    "No record for bucket",
                    bucket_name=bucket_name,
                    table_name=self.table_name
                )
                return None

            return json.loads(response['Item']['rules'])

        except ClientError as e:
            logger.error(
                "Failed to retrieve bucket record from DynamoDB",
                bucket_name=bucket_name,
                table_name=self.table_name,
                error_code=e.response['Error']['Code'],
                error_message=e.response['Error']['Message']
            )
            raise

    async def put(self, bucket_name: str, record: BucketRecord) -> None:
        """
        Store the whole record for a bucket, replacing any previous one.

        The record is serialized to a JSON string so that arbitrary JSON
        values survive DynamoDB's type system unchanged.

        Args:
            bucket_name: Bucket name (partition key)
            record: Bucket record to store

        Raises:
            ClientError: If DynamoDB operation fails
        """
        try:
            self.table.put_item(Item={
                'bucket_name': bucket_name,
                'rules': json.dumps(record)
            })

            logger.debug(
                "Bucket record stored in DynamoDB",
                bucket_name=bucket_name,
                rule_count=len(record),
                table_name=self.table_name
            )

        except ClientError as e:
            logger.error(
                "Failed to store bucket record in DynamoDB",
                bucket_name=bucket_name,
                table_name=self.table_name,
                error_code=e.response['Error']['Code'],
                error_message=e.response['Error']['Message']
            )
            raise

    async def delete(self, bucket_name: str) -> None:
        """
        Delete the record for a bucket. Deleting a missing key is a no-op.

        Args:
            bucket_name: Bucket name (partition key)

        Raises:
            ClientError: If DynamoDB operation fails
        """
        try:
            self.table.delete_item(Key={'bucket_name': bucket_name})

            logger.debug(
                "Bucket record deleted from DynamoDB",
                bucket_name=bucket_name,
                table_name=self.table_name
            )

        except ClientError as e:
            logger.error(
                "Failed to delete bucket record from DynamoDB",
                bucket_name=bucket_name,
                table_name=self.table_name,
                error_code=e.response['Error']['Code'],
                error_message=e.response['Error']['Message']
            )
            raise

    async def list(self) -> Dict[str, BucketRecord]:
        """
        Return every bucket record, keyed by bucket name.

        Scans the whole table, following LastEvaluatedKey pagination.

        Raises:
            ClientError: If DynamoDB operation fails
        """
        records: Dict[str, BucketRecord] = {}
        kwargs: Dict[str, Any] = {}

        try:
            while True:
                response = self.table.scan(**kwargs)

                for item in response.get('Items', []):
                    records[item['bucket_name']] = json.loads(item['rules'])

                if not response.get('LastEvaluatedKey'):
                    break
                kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']

        except ClientError as e:
            logger.error(
                "Failed to scan bucket records in DynamoDB",
                table_name=self.table_name,
                error_code=e.response['Error']['Code'],
                error_message=e.response['Error']['Message']
            )
            raise

        logger.debug(
            "Listed bucket records",
            count=len(records),
            table_name=self.table_name
        )

        return records
