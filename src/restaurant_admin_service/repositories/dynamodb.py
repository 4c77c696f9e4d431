"""DynamoDB resource construction shared by the API, Lambda and seed entry points."""

import logging
import os
from typing import Any

import boto3

logger = logging.getLogger(__name__)


def create_dynamodb_resource() -> Any:
    """Create DynamoDB resource with appropriate configuration.

    DYNAMODB_ENDPOINT points at a local DynamoDB; without it the default
    credential chain and AWS_REGION are used.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        )

    logger.info(f"Using AWS DynamoDB in region {region}")
    return boto3.resource("dynamodb", region_name=region)
