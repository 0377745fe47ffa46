"""
Logging configuration for Upload Analytics
Setup structured logging with different handlers and formatters
"""

import asyncio
import functools
import logging
import logging.handlers
import sys
import time
from datetime import datetime, timezone
from pathlib import Path

from upload_analytics.config.settings import settings


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output"""

    # Color codes
    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m'       # Reset
    }

    def format(self, record):
        # Color a copy so other handlers keep the plain level name
        record = logging.makeLogRecord(record.__dict__)
        if record.levelname in self.COLORS:
            record.levelname = (
                f"{self.COLORS[record.levelname]}{record.levelname}"
                f"{self.COLORS['RESET']}"
            )

        return super().format(record)


class StructuredFormatter(logging.Formatter):
    """Structured formatter for production logging"""

    RESERVED_ATTRS = {
        'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
        'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
        'thread', 'threadName', 'processName', 'process', 'message', 'exc_info',
        'exc_text', 'stack_info', 'taskName'
    }

    def format(self, record):
        log_entry = {
            'timestamp': datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + 'Z',
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        # Add extra fields
        for key, value in record.__dict__.items():
            if key not in self.RESERVED_ATTRS:
                log_entry[key] = value

        return str(log_entry)


def setup_logging():
    """Setup logging configuration for the application"""

    if settings.ENABLE_FILE_LOGGING:
        log_dir = Path(settings.LOG_FILE_PATH).parent
        log_dir.mkdir(parents=True, exist_ok=True)

    # Remove any existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    root_logger.setLevel(level)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    if settings.DEBUG:
        console_formatter = ColoredFormatter(settings.LOG_FORMAT)
    else:
        console_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s'
        )

    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if settings.ENABLE_FILE_LOGGING:
        file_handler = logging.handlers.RotatingFileHandler(
            settings.LOG_FILE_PATH,
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5
        )
        file_handler.setLevel(logging.INFO)

        if settings.DEBUG:
            file_formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - '
                '%(module)s:%(funcName)s:%(lineno)d - %(message)s'
            )
        else:
            file_formatter = StructuredFormatter()

        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

        error_file_handler = logging.handlers.RotatingFileHandler(
            settings.LOG_FILE_PATH.replace('.log', '.error.log'),
            maxBytes=5*1024*1024,  # 5MB
            backupCount=3
        )
        error_file_handler.setLevel(logging.ERROR)
        error_file_handler.setFormatter(
            logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - '
                '%(module)s:%(funcName)s:%(lineno)d - %(message)s'
            )
        )
        root_logger.addHandler(error_file_handler)

    configure_specific_loggers()

    logger = logging.getLogger(__name__)
    logger.info("🚀 Logging system initialized")
    logger.info(f"📊 Log level: {settings.LOG_LEVEL}")
    if settings.ENABLE_FILE_LOGGING:
        logger.info(f"📁 File logging: {settings.LOG_FILE_PATH}")


def configure_specific_loggers():
    """Configure logging levels for specific modules"""

    # Reduce noise from external libraries
    logging.getLogger('multipart').setLevel(logging.WARNING)
    logging.getLogger('python_multipart').setLevel(logging.WARNING)
    logging.getLogger('openpyxl').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)

    if not settings.DEBUG:
        logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
        logging.getLogger('fastapi').setLevel(logging.WARNING)

    if settings.ENABLE_DETAILED_LOGGING:
        logging.getLogger('upload_analytics.core').setLevel(logging.DEBUG)
        logging.getLogger('upload_analytics.services').setLevel(logging.DEBUG)
        logging.getLogger('upload_analytics.api').setLevel(logging.DEBUG)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name"""
    return logging.getLogger(name)


def log_performance(func_name: str, duration_ms: float, extra_info: dict = None):
    """Log performance information"""
    logger = logging.getLogger('performance')

    message = f"⚡ {func_name} completed in {duration_ms:.2f}ms"

    if extra_info:
        message += f" - {extra_info}"

    if duration_ms > 1000:
        logger.warning(message)
    elif duration_ms > 500:
        logger.info(message)
    else:
        logger.debug(message)


def log_ingestion(filename: str, record_count: int, column_count: int, duration_ms: float):
    """Log file ingestion activity"""
    logger = logging.getLogger('ingestion')
    logger.info(
        f"📥 Ingested '{filename}': "
        f"{record_count} records, {column_count} columns, {duration_ms:.2f}ms"
    )


def log_analysis(session_id: str, numeric_count: int, chart_count: int, duration_ms: float):
    """Log an analysis refresh"""
    logger = logging.getLogger('analysis')
    logger.info(
        f"📊 Session {session_id} refreshed: "
        f"{numeric_count} numeric columns, {chart_count} charts, {duration_ms:.2f}ms"
    )


def log_session_operation(operation: str, session_id: str, hit: bool = None):
    """Log session store operations"""
    logger = logging.getLogger('sessions')

    if hit is not None:
        status = "🎯 HIT" if hit else "❌ MISS"
        logger.debug(f"{status} Session {operation}: {session_id}")
    else:
        logger.debug(f"💾 Session {operation}: {session_id}")


def monitor_performance(operation_name: str = None):
    """Decorator to monitor function performance"""
    def decorator(func):
        name = operation_name or func.__name__

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logging.getLogger('performance').error(
                    f"❌ {name} failed after {duration_ms:.2f}ms: {str(e)}"
                )
                raise
            duration_ms = (time.perf_counter() - start_time) * 1000
            log_performance(name, duration_ms, {"args_count": len(args), "kwargs_count": len(kwargs)})
            return result

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logging.getLogger('performance').error(
                    f"❌ {name} failed after {duration_ms:.2f}ms: {str(e)}"
                )
                raise
            duration_ms = (time.perf_counter() - start_time) * 1000
            log_performance(name, duration_ms, {"args_count": len(args), "kwargs_count": len(kwargs)})
            return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
