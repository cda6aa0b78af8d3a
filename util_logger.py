# ============================================================================
# CLAUDE CONTEXT - LOGGING
# ============================================================================
# STATUS: Core Infrastructure - Used by every layer
# PURPOSE: JSON-only structured logging for Azure Functions with Application Insights
# EXPORTS: ComponentType, LogLevel, LogContext, ComponentConfig, JSONFormatter,
#          LoggerFactory, log_exceptions
# INTERFACES: Dataclass models, enums, factory, JSON formatter, exception decorator
# DEPENDENCIES: enum, dataclasses, typing, datetime, logging, json, traceback (stdlib only!)
# SOURCE: Proxy architecture layers define component types
# PATTERNS: JSON-only output, Azure Functions integration, Exception decorator pattern
# ENTRY_POINTS: LoggerFactory.create_logger(), @log_exceptions decorator
# ============================================================================

"""
Unified Logger System

Component loggers emitting one JSON object per line. Every record carries
`customDimensions` with the component type/name plus any request context
(request id, backend, entity type, route) so Application Insights can
correlate the log lines of one queryContext request.

Design Principles:
- Strong typing with dataclasses (stdlib only)
- Enum safety for categories
- Component-specific loggers
- Clean factory pattern
"""

from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime, timezone
from dataclasses import dataclass
import logging
import os
import sys
import json
import traceback
from functools import wraps


# ============================================================================
# COMPONENT TYPES - Aligned with proxy layers
# ============================================================================

class ComponentType(Enum):
    """
    Component types aligned with the proxy layers.

    Request flow: TRIGGER -> SERVICE -> PARSER -> ADAPTER (-> CLIENT) -> ASSEMBLER
    """
    TRIGGER = "trigger"        # HTTP entry point layer
    SERVICE = "service"        # Request orchestration layer
    PARSER = "parser"          # Mapping grammar
    ADAPTER = "adapter"        # Backend adapters
    CLIENT = "client"          # Upstream HTTP clients
    ASSEMBLER = "assembler"    # NGSI envelope construction


# ============================================================================
# LOG LEVELS - Standard Python levels with enum safety
# ============================================================================

class LogLevel(Enum):
    """
    Standard Python log levels as enum for type safety.
    """
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_python_level(self) -> int:
        """Convert to Python logging level constant."""
        return getattr(logging, self.value)

    @classmethod
    def from_string(cls, level: str) -> 'LogLevel':
        """Create from string, case-insensitive."""
        return cls[level.upper()]


# ============================================================================
# LOG CONTEXT - Request correlation
# ============================================================================

@dataclass
class LogContext:
    """
    Context for correlating the log lines of one proxied request.
    """
    request_id: Optional[str] = None     # Per-request id generated by the trigger
    correlation_id: Optional[str] = None  # Caller supplied (Fiware-Correlator header)
    backend: Optional[str] = None         # random | static | twitter | weather
    entity_type: Optional[str] = None     # NGSI entity type being queried
    route: Optional[str] = None           # Route type and mapping, "number/temperature"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            k: v for k, v in {
                'request_id': self.request_id,
                'correlation_id': self.correlation_id,
                'backend': self.backend,
                'entity_type': self.entity_type,
                'route': self.route
            }.items() if v is not None
        }


# ============================================================================
# COMPONENT CONFIGURATION - Per-component settings
# ============================================================================

@dataclass
class ComponentConfig:
    """
    Configuration for component-specific logging.
    """
    component_type: ComponentType
    log_level: LogLevel = LogLevel.INFO


# ============================================================================
# JSON FORMATTER - Structured logging for Azure Functions
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging in Azure Functions.
    Outputs logs in a format that Application Insights can automatically parse.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON for Application Insights.

        Args:
            record: Python LogRecord to format

        Returns:
            JSON string with structured log data
        """
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if hasattr(record, 'custom_dimensions'):
            log_obj['customDimensions'] = record.custom_dimensions

        if record.exc_info:
            log_obj['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': self.formatException(record.exc_info)
            }

        return json.dumps(log_obj, default=str)


# ============================================================================
# LOGGER FACTORY - Creates component-specific loggers
# ============================================================================

# DEBUG_LOGGING=true lowers every component to DEBUG
_DEFAULT_LEVEL = LogLevel.DEBUG if os.getenv('DEBUG_LOGGING', '').lower() == 'true' else LogLevel.INFO


class LoggerFactory:
    """
    Factory for creating component-specific loggers.

    Example:
        logger = LoggerFactory.create_logger(ComponentType.ADAPTER, "weatherBackend")
        logger.info("Lookup complete", extra={'custom_dimensions': {'location': 'Germany/Berlin'}})
    """

    default_level = _DEFAULT_LEVEL

    DEFAULT_CONFIGS = {
        component_type: ComponentConfig(component_type=component_type, log_level=_DEFAULT_LEVEL)
        for component_type in ComponentType
    }

    @classmethod
    def create_logger(
        cls,
        component_type: ComponentType,
        name: str,
        context: Optional[LogContext] = None,
        config: Optional[ComponentConfig] = None
    ) -> logging.Logger:
        """
        Create a logger for a specific component.

        Args:
            component_type: Type of component
            name: Component name (e.g., "NGSIProxyService")
            context: Optional log context for correlation
            config: Optional custom configuration

        Returns:
            Configured Python logger
        """
        if config is None:
            config = cls.DEFAULT_CONFIGS.get(
                component_type,
                ComponentConfig(component_type=component_type)
            )

        logger_name = f"{component_type.value}.{name}"
        logger = logging.getLogger(logger_name)

        if isinstance(config.log_level, str):
            log_level = LogLevel.from_string(config.log_level).to_python_level()
        else:
            log_level = config.log_level.to_python_level()
        logger.setLevel(log_level)

        # Remove existing handlers to avoid duplicates
        logger.handlers.clear()

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(log_level)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)

        # Azure's root logger forwards to Application Insights
        logger.propagate = True

        # Wrap the unpatched _log so repeated create_logger calls do not nest wrappers
        original_log = getattr(logger, "_unwrapped_log", logger._log)
        logger._unwrapped_log = original_log

        def log_with_context(level, msg, args, exc_info=None, extra=None, stack_info=False, stacklevel=1):
            """Wrapper to inject context as custom dimensions."""
            extra = dict(extra) if extra else {}

            custom_dims = context.to_dict() if context else {}
            custom_dims['component_type'] = component_type.value
            custom_dims['component_name'] = name

            if 'custom_dimensions' in extra:
                custom_dims.update(extra['custom_dimensions'])

            extra['custom_dimensions'] = custom_dims

            original_log(level, msg, args, exc_info=exc_info, extra=extra,
                         stack_info=stack_info, stacklevel=stacklevel)

        logger._log = log_with_context

        return logger


# ============================================================================
# EXCEPTION DECORATOR - Automatic exception logging with context
# ============================================================================

def log_exceptions(component_type: Optional[ComponentType] = None,
                   component_name: Optional[str] = None,
                   logger: Optional[logging.Logger] = None):
    """
    Decorator to log exceptions with full context and re-raise them.

    Can be used in three ways:
    1. With existing logger: @log_exceptions(logger=my_logger)
    2. With component info: @log_exceptions(ComponentType.SERVICE, "NGSIProxyService")
    3. Simple: @log_exceptions() - uses function module and name
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if logger:
                log = logger
            elif component_type and component_name:
                log = LoggerFactory.create_logger(component_type, component_name)
            else:
                log = LoggerFactory.create_logger(
                    ComponentType.SERVICE,
                    func.__module__ or "unknown"
                )

            try:
                return func(*args, **kwargs)
            except Exception as e:
                log.error(
                    f"Exception in {func.__name__}",
                    exc_info=True,
                    extra={
                        'custom_dimensions': {
                            'function_name': func.__name__,
                            'function_module': func.__module__,
                            'exception_type': type(e).__name__,
                            'exception_message': str(e),
                            'function_args': str(args)[:500],
                            'function_kwargs': str(kwargs)[:500],
                            'traceback': traceback.format_exc()
                        }
                    }
                )
                raise
        return wrapper
    return decorator
