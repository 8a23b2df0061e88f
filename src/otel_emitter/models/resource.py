"""
Process-wide resource descriptor attached to every span, log record and data point.
"""

from typing import Dict, Union
from pydantic import BaseModel, Field

from opentelemetry.sdk.resources import (
    Resource,
    SERVICE_INSTANCE_ID,
    SERVICE_NAME,
    SERVICE_VERSION,
)

from ..config import (
    DEFAULT_ENVIRONMENT,
    DEFAULT_INSTANCE_ID,
    DEFAULT_SERVICE_NAME,
    DEFAULT_SERVICE_VERSION,
    SessionConfig,
)

ENVIRONMENT = "environment"


class ResourceAttributes(BaseModel):
    """Identifying attributes of this process. Immutable once built."""
    service_name: str = Field(DEFAULT_SERVICE_NAME, description="service.name")
    service_version: str = Field(DEFAULT_SERVICE_VERSION, description="service.version")
    instance_id: str = Field(DEFAULT_INSTANCE_ID, description="service.instance.id")
    environment: str = Field(DEFAULT_ENVIRONMENT, description="Deployment environment")
    extra: Dict[str, Union[str, int, float, bool]] = Field(
        default_factory=dict,
        description="Additional resource attributes"
    )

    class Config:
        """Pydantic configuration."""
        frozen = True

    @classmethod
    def from_config(cls, config: SessionConfig) -> "ResourceAttributes":
        return cls(
            service_name=config.service_name,
            service_version=config.service_version,
            instance_id=config.instance_id,
            environment=config.environment,
        )

    def as_dict(self) -> Dict[str, Union[str, int, float, bool]]:
        attributes = dict(self.extra)
        attributes.update({
            SERVICE_NAME: self.service_name,
            SERVICE_VERSION: self.service_version,
            SERVICE_INSTANCE_ID: self.instance_id,
            ENVIRONMENT: self.environment,
        })
        return attributes

    def to_otel_resource(self) -> Resource:
        # Fixed attributes only; OTEL_RESOURCE_ATTRIBUTES is not merged in.
        return Resource(attributes=self.as_dict())
