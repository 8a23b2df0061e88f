"""
Unit tests for session configuration.
"""

from otel_emitter.config import (
    DEFAULT_ENDPOINT,
    ENDPOINT_ENV_VAR,
    SessionConfig,
    resolve_endpoint,
)


class TestResolveEndpoint:
    """Test cases for endpoint precedence."""

    def test_default_endpoint(self):
        """Test falling back to localhost:4317."""
        assert resolve_endpoint(environ={}) == DEFAULT_ENDPOINT == "localhost:4317"

    def test_environment_overrides_default(self):
        """Test reading the endpoint from the environment."""
        environ = {ENDPOINT_ENV_VAR: "collector:4317"}

        assert resolve_endpoint(environ=environ) == "collector:4317"

    def test_explicit_overrides_environment(self):
        """Test that an explicit endpoint wins over the environment."""
        environ = {ENDPOINT_ENV_VAR: "collector:4317"}

        assert resolve_endpoint("otel.internal:4317", environ=environ) == "otel.internal:4317"

    def test_blank_environment_value_is_ignored(self):
        """Test that a whitespace-only variable counts as unset."""
        assert resolve_endpoint(environ={ENDPOINT_ENV_VAR: "  "}) == DEFAULT_ENDPOINT

    def test_reads_process_environment(self, monkeypatch):
        """Test resolving against os.environ when no mapping is given."""
        monkeypatch.setenv(ENDPOINT_ENV_VAR, "from-env:4317")

        assert SessionConfig().resolved_endpoint() == "from-env:4317"


class TestSessionConfig:
    """Test cases for SessionConfig."""

    def test_defaults(self):
        """Test the default session configuration."""
        config = SessionConfig()

        assert config.service_name == "otel-demo-service"
        assert config.service_version == "1.0.0"
        assert config.export_interval_millis == 10_000
        assert config.endpoint is None

    def test_from_env(self):
        """Test building a configuration from environment variables."""
        environ = {
            ENDPOINT_ENV_VAR: "collector:4317",
            "OTEL_SERVICE_NAME": "checkout",
            "SERVICE_VERSION": "3.1.0",
            "SERVICE_INSTANCE_ID": "pod-2",
            "ENVIRONMENT": "production",
        }

        config = SessionConfig.from_env(environ)

        assert config.endpoint == "collector:4317"
        assert config.service_name == "checkout"
        assert config.service_version == "3.1.0"
        assert config.instance_id == "pod-2"
        assert config.environment == "production"

    def test_from_env_overrides_win_and_none_is_ignored(self):
        """Test that keyword overrides beat the environment unless they are None."""
        environ = {ENDPOINT_ENV_VAR: "collector:4317"}

        config = SessionConfig.from_env(environ, endpoint="explicit:4317", connect_timeout_seconds=None)

        assert config.endpoint == "explicit:4317"
        assert config.connect_timeout_seconds == 5.0
