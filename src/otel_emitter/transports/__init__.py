# Transports module
from .interfaces import ExportTransport
from .otlp_grpc import OtlpGrpcConfig, OtlpGrpcTransport
from .in_memory import InMemoryTransport

__all__ = [
    "ExportTransport",
    "OtlpGrpcConfig",
    "OtlpGrpcTransport",
    "InMemoryTransport",
]
