#!/usr/bin/env python3
"""
Script: create_subscriptions_table.py
Description: Create the DynamoDB table holding bucket subscription records.

The table has a single string partition key, bucket_name, and uses
on-demand billing.

Usage:
    python scripts/create_subscriptions_table.py [--table-name my-table] [--endpoint-url http://localhost:8001]
"""

import argparse
import sys
from typing import Optional

import boto3
from botocore.exceptions import ClientError

from webhook_relay.config.settings import settings
from webhook_relay.utils.logger import get_logger

logger = get_logger(__name__)


def create_table(table_name: str, endpoint_url: Optional[str] = None) -> None:
    """
    Create the subscriptions table and wait until it is active.

    Args:
        table_name: Name of the table to create
        endpoint_url: Optional DynamoDB endpoint (e.g. DynamoDB Local)

    Raises:
        ClientError: If DynamoDB operation fails
    """
    try:
        dynamodb = boto3.resource('dynamodb', region_name=settings.aws_region, endpoint_url=endpoint_url)

        table = dynamodb.create_table(
            TableName=table_name,
            KeySchema=[{'AttributeName': 'bucket_name', 'KeyType': 'HASH'}],
            AttributeDefinitions=[{'AttributeName': 'bucket_name', 'AttributeType': 'S'}],
            BillingMode='PAY_PER_REQUEST'
        )
        table.wait_until_exists()

        logger.info("Subscriptions table created", table_name=table_name)

    except ClientError as e:
        logger.error(
            "Failed to create subscriptions table",
            error_code=e.response['Error']['Code'],
            error_message=e.response['Error']['Message'],
            table_name=table_name
        )
        raise


def main():
    """Main script execution."""
    parser = argparse.ArgumentParser(
        description="Create the webhook relay subscriptions table"
    )
    parser.add_argument(
        '--table-name',
        type=str,
        default=settings.subscriptions_table_name,
        help='Table name (default: SUBSCRIPTIONS_TABLE_NAME)'
    )
    parser.add_argument(
        '--endpoint-url',
        type=str,
        default=None,
        help='DynamoDB endpoint URL, for DynamoDB Local'
    )

    args = parser.parse_args()

    try:
        create_table(args.table_name, endpoint_url=args.endpoint_url)
    except ClientError as e:
        if e.response['Error']['Code'] == 'ResourceInUseException':
            print(f"Table {args.table_name} already exists.")
            sys.exit(0)
        print(f"Failed to create table: {e}")
        sys.exit(1)

    print(f"Created table {args.table_name}.")


if __name__ == "__main__":
    main()
