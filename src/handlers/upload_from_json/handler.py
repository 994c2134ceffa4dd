"""
Lambda handler for batches of inline base64 encoded images.
"""

import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.extractors.dispatch import accepts_content_type, extract_items
from core.models.formats import TransportKind
from core.models.requests import JsonBatchRequest
from core.services.ingestion_service import IngestionService
from core.utils.constants import (
    ERROR_CODE_MALFORMED_REQUEST,
    METRIC_IMAGES_FAILED,
    METRIC_IMAGES_UPLOADED,
    METRICS_NAMESPACE,
)
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_header, read_body, remaining_time_getter
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle batch uploads of base64 encoded images.

    Expected API Gateway event structure:
    {
        "headers": {"Content-Type": "application/json"},
        "body": "[{\"name\": \"cat\", \"data\": \"iVBORw0...\"}, ...]"
    }

    Every entry is processed on its own; a broken entry only fails itself.

    Args:
        event: API Gateway Lambda proxy event containing the batch
        context: AWS Lambda execution context

    Returns:
        200 with one {code, message} record per entry, or 400 if the body
        is not a valid batch
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received JSON batch upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
            "function_name": getattr(context, "function_name", None),
        },
    )

    content_type = get_header(event, "Content-Type")
    if not accepts_content_type(TransportKind.JSON, content_type):
        return ResponseBuilder.unsupported_media_type(
            "Content-Type must be application/json",
            request_id=request_id,
        )

    try:
        body = json.loads(read_body(event) or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.exception("Invalid JSON body received", exc_info=exc)
        return ResponseBuilder.bad_request(
            "Invalid JSON body",
            error=ERROR_CODE_MALFORMED_REQUEST,
            request_id=request_id,
        )

    try:
        batch = validate_request(JsonBatchRequest, body)
    except PydanticValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            "Invalid request params",
            error=ERROR_CODE_MALFORMED_REQUEST,
            details={"errors": sanitize_validation_errors(exc.errors())},
            request_id=request_id,
        )

    results = IngestionService().ingest(
        extract_items(TransportKind.JSON, batch.root),
        time_remaining_ms=remaining_time_getter(context),
    )

    uploaded = sum(1 for result in results if result.succeeded)
    metrics.add_metric(name=METRIC_IMAGES_UPLOADED, unit=MetricUnit.Count, value=uploaded)
    metrics.add_metric(
        name=METRIC_IMAGES_FAILED, unit=MetricUnit.Count, value=len(results) - uploaded
    )

    return ResponseBuilder.batch(
        [result.to_response() for result in results],
        request_id=request_id,
    )
