import logging
import os
import sys
from types import FrameType

from loguru import logger
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.resources import Resource

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> <level>{level}</level>: "
    "<cyan>[{name}:{line}]</cyan> - <level>{message}</level>"
)

HIJACKED_LOGGERS = (
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
    "gunicorn.error",
    "gunicorn.access",
    "fastapi",
    "sqlalchemy.engine",
)


class InterceptHandler(logging.Handler):
    """
    Route standard `logging` records into loguru.

    Records emitted by OpenTelemetry itself are dropped, otherwise the OTLP
    sink would log about its own exports forever.
    """

    def emit(self, record: logging.LogRecord) -> None:
        if record.name.startswith("opentelemetry"):
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk out of the logging module to report the real caller
        frame: FrameType | None = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _add_otlp_sink(level: str) -> None:
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not endpoint:
        return

    try:
        resource = Resource.create(
            {
                "service.name": os.getenv("OTEL_SERVICE_NAME", "deployment-engine"),
                "deployment.environment": os.getenv("DEPLOYMENT_ENV", "production"),
            }
        )
        provider = LoggerProvider(resource=resource)
        set_logger_provider(provider)

        insecure = os.getenv("OTEL_EXPORTER_OTLP_INSECURE", "false").lower() == "true"
        exporter = OTLPLogExporter(endpoint=endpoint, insecure=insecure)
        provider.add_log_record_processor(BatchLogRecordProcessor(exporter))

        handler = LoggingHandler(
            level=logging.getLevelName(level), logger_provider=provider
        )
        logger.add(handler, level=level, serialize=True)
        logger.info("OTLP log sink active")
    except Exception as e:
        # Never take the app down because the collector is unreachable
        print(f"Log setup failed: {e}", file=sys.stderr)


def setup_logging(level: str = "INFO", serialize: bool = False):
    """
    Configure loguru as the single logging backend.

    Args:
        level: Minimum level for every sink.
        serialize: Emit JSON lines on stderr instead of the colored format.

    Returns:
        The configured loguru logger.
    """
    level = level.upper()
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(level)

    for name in HIJACKED_LOGGERS:
        log = logging.getLogger(name)
        log.handlers = []
        log.propagate = False
        log.addHandler(InterceptHandler())

    logger.remove()
    if serialize:
        logger.add(sys.stderr, level=level, serialize=True, enqueue=True)
    else:
        logger.add(
            sys.stderr,
            level=level,
            format=CONSOLE_FORMAT,
            colorize=True,
            enqueue=True,
        )

    _add_otlp_sink(level)
    return logger
