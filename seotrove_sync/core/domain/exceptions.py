"""Base domain exceptions.

所有领域异常都应继承自 DomainException，并通过 error_code 类属性提供
机器可读的错误代码，方便宿主应用按类型处理。
"""


class DomainException(Exception):
    """Base exception for all domain errors.

    子类可以通过定义 error_code 类属性来自定义错误代码（默认 "DOMAIN_ERROR"）。
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "A domain error occurred"):
        self.message = message
        super().__init__(self.message)


class EntityNotFoundError(DomainException):
    """Raised when an entity is not found."""

    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: str | None = None):
        message = f"{entity_type} not found"
        if entity_id:
            message = f"{entity_type} with id '{entity_id}' not found"
        super().__init__(message)


class ConfigurationError(DomainException):
    """Raised when an operation cannot be resolved against current configuration."""

    error_code = "CONFIGURATION_ERROR"
