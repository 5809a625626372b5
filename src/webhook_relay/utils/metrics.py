"""
Module: metrics.py
Description: CloudWatch custom metrics publishing.

Publishes delivery outcome metrics (successful deliveries, exhausted
deliveries, pruned subscriptions) to CloudWatch.

Key Components:
- MetricsClient: CloudWatch metrics client
- put_metric(): Publish individual metrics
- Metric failures are logged and never raised

Dependencies: boto3, typing, logger
"""

import boto3
from typing import Optional

from webhook_relay.utils.logger import get_logger

logger = get_logger(__name__)


class MetricsClient:
    """CloudWatch metrics client."""

    def __init__(self, namespace: str = "WebhookRelay", region_name: Optional[str] = None):
        """
        Initialize metrics client.

        Args:
            namespace: CloudWatch metrics namespace
            region_name: AWS region, defaults to the boto3 session region
        """
        self.namespace = namespace
        self.cloudwatch = boto3.client('cloudwatch', region_name=region_name)

        logger.info(
            "Metrics client initialized",
            namespace=namespace
        )

    def put_metric(
        self,
        metric_name: str,
        value: float,
        unit: str = 'Count',
        dimensions: Optional[dict] = None
    ) -> None:
        """
        Publish a metric to CloudWatch.

        Args:
            metric_name: Name of the metric
            value: Metric value
            unit: Metric unit (Count, Seconds, etc.)
            dimensions: Optional metric dimensions
        """
        try:
            metric_data = {
                'MetricName': metric_name,
                'Value': value,
                'Unit': unit
            }

            if dimensions:
                metric_data['Dimensions'] = [
                    {'Name': k, 'Value': v}
                    for k, v in dimensions.items()
                ]

            self.cloudwatch.put_metric_data(
                Namespace=self.namespace,
                MetricData=[metric_data]
            )

            logger.debug(
                "Metric published to CloudWatch",
                metric_name=metric_name,
                value=value,
                dimensions=dimensions,
                namespace=self.namespace
            )

        except Exception as e:
            # Delivery must not fail because metrics failed
            logger.warning(
                "Failed to publish metric",
                metric_name=metric_name,
                value=value,
                error=str(e),
                namespace=self.namespace
            )
