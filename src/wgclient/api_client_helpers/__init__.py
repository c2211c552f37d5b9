"""Helper modules for the adaptive API client."""

from .request_executor import RequestExecutor, ResponseEnvelope
from .response_parser import ResponseParser

__all__ = ["RequestExecutor", "ResponseEnvelope", "ResponseParser"]
