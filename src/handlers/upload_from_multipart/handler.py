"""
Lambda handler for batches of images uploaded as multipart/form-data.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.extractors.dispatch import accepts_content_type, extract_items
from core.models.errors import MalformedRequestError
from core.models.formats import TransportKind
from core.services.ingestion_service import IngestionService
from core.utils.constants import (
    METRIC_IMAGES_FAILED,
    METRIC_IMAGES_UPLOADED,
    METRICS_NAMESPACE,
)
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_header, iter_chunks, read_body, remaining_time_getter
from core.utils.response import ResponseBuilder

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle batch uploads sent as multipart/form-data.

    Every file part becomes one item named after its filename (without
    extension). API Gateway delivers binary bodies base64 encoded with
    ``isBase64Encoded`` set.

    Args:
        event: API Gateway Lambda proxy event containing the multipart body
        context: AWS Lambda execution context

    Returns:
        200 with one {code, message} record per part, or 400 if the
        multipart framing is broken
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received multipart batch upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
            "is_base64_encoded": bool(event.get("isBase64Encoded")),
        },
    )

    content_type = get_header(event, "Content-Type")
    if not accepts_content_type(TransportKind.MULTIPART, content_type):
        return ResponseBuilder.unsupported_media_type(
            "Content-Type must be multipart/form-data",
            request_id=request_id,
        )

    try:
        body = read_body(event)
        results = IngestionService().ingest(
            extract_items(TransportKind.MULTIPART, iter_chunks(body), content_type),
            time_remaining_ms=remaining_time_getter(context),
        )
    except MalformedRequestError as exc:
        logger.warning(
            "Malformed multipart request",
            extra={"error": exc.message, "details": exc.details},
        )
        return ResponseBuilder.bad_request(
            exc.message,
            error=exc.error_code,
            details=exc.details or None,
            request_id=request_id,
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
