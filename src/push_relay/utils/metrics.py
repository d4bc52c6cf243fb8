"""
Module: metrics.py
Description: CloudWatch custom metrics publishing.

Publishes relay metrics to CloudWatch for monitoring trigger document
creation and push delivery outcomes.

Key Components:
- MetricsClient: CloudWatch metrics client
- put_metric(): Publish individual metrics
- Graceful error handling for metrics failures

Dependencies: boto3, typing, logger
"""

from typing import Optional

import boto3

from push_relay.config.settings import settings
from push_relay.utils.logger import get_logger

logger = get_logger(__name__)


class MetricsClient:
    """CloudWatch metrics client."""

    def __init__(self, namespace: Optional[str] = None, enabled: Optional[bool] = None):
        """
        Initialize metrics client.

        Args:
            namespace: CloudWatch metrics namespace (defaults to settings)
            enabled: Publish metrics at all (defaults to settings)
        """
        self.namespace = namespace or settings.metrics_namespace
        self.enabled = settings.metrics_enabled if enabled is None else enabled
        self.cloudwatch = (
            boto3.client('cloudwatch', region_name=settings.aws_region)
            if self.enabled else None
        )

        logger.info(
            "Metrics client initialized",
            namespace=self.namespace,
            enabled=self.enabled
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

        Failures are logged and never raised to the caller.

        Args:
            metric_name: Name of the metric
            value: Metric value
            unit: Metric unit (Count, Seconds, etc.)
            dimensions: Optional metric dimensions
        """
        if not self.enabled:
            return

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
                unit=unit,
                dimensions=dimensions,
                namespace=self.namespace
            )

        except Exception as e:
            logger.warning(
                "Failed to publish metric",
                metric_name=metric_name,
                value=value,
                error=str(e),
                namespace=self.namespace
            )
