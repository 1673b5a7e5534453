class TempLinksError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:templinks_error'


class ValidationError(TempLinksError):
    """Raised when a link creation request carries malformed input.

    Attributes:
        errors (dict[str, list[str]]):
            Field-level messages, e.g. {'destinationUrl': ['Please enter a valid URL']}.
    """

    error_code = 'app:validation_error'

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        fields = ', '.join(f"'{name}'" for name in errors)
        super().__init__(f'Invalid input for fields: {fields}')


class ConfigurationError(TempLinksError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError, KeyError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'

    def __str__(self) -> str:
        # KeyError.__str__ would wrap the message in quotes
        return str(self.args[0]) if self.args else ''


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
