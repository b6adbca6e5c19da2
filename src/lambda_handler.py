"""AWS Lambda handler for API Gateway requests.

The FastAPI application is wrapped with the Mangum ASGI adapter. The app and
its store are built once per Lambda container on the first invocation and
reused by warm invocations.
"""

import logging
from typing import Any

from mangum import Mangum

logger = logging.getLogger(__name__)

_mangum_handler: Mangum | None = None


def get_mangum_handler() -> Mangum:
    """Create or retrieve the cached Mangum adapter.

    Returns:
        Mangum handler wrapping the configured FastAPI application
    """
    global _mangum_handler

    if _mangum_handler is not None:
        return _mangum_handler

    # main builds the application at import time outside of tests
    import main

    _mangum_handler = Mangum(main.app, lifespan="off")
    logger.info("FastAPI application initialized for Lambda")
    return _mangum_handler


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda entry point for API Gateway (REST and HTTP API) events.

    Args:
        event: The API Gateway event payload
        context: The Lambda context object

    Returns:
        Response dict with statusCode and body
    """
    logger.info(f"Received Lambda invocation, request_id: {context.aws_request_id}")

    try:
        result: dict[str, Any] = get_mangum_handler()(event, context)
        return result

    except Exception as e:
        logger.exception(f"Unhandled error in Lambda handler: {e}")
        return {
            "statusCode": 500,
            "headers": {"content-type": "application/json"},
            "body": '{"message": "Error Occured!", "error": "Internal server error"}',
        }
