import logging
import sys
import os
from types import FrameType
from loguru import logger
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry._logs import set_logger_provider

# Third-party loggers whose records are re-routed to loguru
INTERCEPTED_LOGGERS = (
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
    "gunicorn.error",
    "gunicorn.access",
    "fastapi",
    "sqlalchemy.engine",
    "apscheduler",
    "apscheduler.scheduler",
    "apscheduler.executors.default",
)

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> <level>{level}</level>: "
    "<cyan>[{name}:{line}]</cyan> - <level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """
    Redirects standard logging to Loguru.
    Includes a safety check to prevent infinite recursion with OTel.
    """

    def emit(self, record: logging.LogRecord) -> None:
        # OTel's own records would loop back through the OTel sink
        if record.name.startswith("opentelemetry"):
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame: FrameType | None = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _add_otel_sink(endpoint: str, level: str) -> None:
    """Ship loguru records to an OTLP collector; failures are printed, never raised."""
    try:
        resource = Resource.create(
            {
                "service.name": os.getenv("OTEL_SERVICE_NAME", "dealboard-analytics"),
                "deployment.environment": os.getenv("DEPLOYMENT_ENV", "production"),
            }
        )

        logger_provider = LoggerProvider(resource=resource)
        set_logger_provider(logger_provider)

        insecure = os.getenv("OTEL_EXPORTER_OTLP_INSECURE", "false").lower() == "true"
        exporter = OTLPLogExporter(endpoint=endpoint, insecure=insecure)
        logger_provider.add_log_record_processor(BatchLogRecordProcessor(exporter))

        otel_handler = LoggingHandler(level=logging.INFO, logger_provider=logger_provider)
        logger.add(otel_handler, level=level, serialize=True)

        logger.info("Logging (Loguru Sink) Active.")

    except Exception as e:
        # Logging must never keep the app from booting
        print(f"Log Setup Failed: {e}", file=sys.stderr)


def setup_logging(level: str = "INFO"):
    """
    Route every log record of the process through loguru.

    Standard-library handlers of the web server, SQLAlchemy and APScheduler are replaced by
    an InterceptHandler, loguru writes to stderr, and an OpenTelemetry sink is added when
    `OTEL_EXPORTER_OTLP_ENDPOINT` is set.

    Parameters:
        level (str): Minimum level name for the loguru sinks (for example "INFO" or "DEBUG").

    Returns:
        The configured loguru logger.
    """
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(logging.INFO)

    for name in INTERCEPTED_LOGGERS:
        log = logging.getLogger(name)
        log.handlers = []
        log.propagate = False
        log.addHandler(InterceptHandler())

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=CONSOLE_FORMAT,
        colorize=True,
        enqueue=True,  # the reset job logs from the scheduler thread
    )

    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if endpoint:
        _add_otel_sink(endpoint, level)

    return logger
