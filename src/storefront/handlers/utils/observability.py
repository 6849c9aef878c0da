"""
Centralized observability utilities for the storefront Lambda handlers.

This module provides configured instances of AWS Lambda Powertools for logging,
tracing, and metrics collection. All log records are redacted before they are
written.
"""

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import Metrics
from aws_lambda_powertools.tracing import Tracer

from storefront.security.redaction import RedactingFormatter

# Metrics namespace for business KPIs
METRICS_NAMESPACE = 'Storefront'

# JSON output format, service name can be set by environment variable "POWERTOOLS_SERVICE_NAME"
logger: Logger = Logger(logger_formatter=RedactingFormatter())

# Disabled by setting POWERTOOLS_TRACE_DISABLED to "True"
tracer: Tracer = Tracer()

# Namespace can be overridden with POWERTOOLS_METRICS_NAMESPACE
metrics = Metrics(namespace=METRICS_NAMESPACE)
