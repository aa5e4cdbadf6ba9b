"""
Standardized exception hierarchy for prime-officer
Provides rich context, consistent logging, and user-friendly error messages

The progression engines never raise: they absorb bad input and return
neutral results. These exceptions belong to the collaborator layer
(storage, services, configuration, CLI).
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class PrimeOfficerError(Exception):
    """
    Base exception for all prime-officer errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise PrimeOfficerError(
            message="Failed to save user profile",
            operation="save_user",
            context={"path": "data/user.json"}
        )
    """

    def __init__(
        self,
        message: str,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
            "request_id": self.request_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for CLI / JSON output"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (User Input)
# ==========================================

class ValidationError(PrimeOfficerError):
    """
    Raised when user input fails validation

    Examples:
    - Unparseable date on the command line
    - Non-numeric consistency rating

    Example:
        raise ValidationError(
            message="Expected YYYY-MM-DD",
            field="date",
            value="05/01/2025"
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value},
            **kwargs
        )


# ==========================================
# Storage Errors
# ==========================================

class StorageError(PrimeOfficerError):
    """Reading or writing persisted state failed"""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        **kwargs
    ):
        self.path = path
        super().__init__(
            message=message,
            user_message="We couldn't save your progress. Please try again.",
            context={"path": path},
            **kwargs
        )


class DataLoadError(StorageError):
    """Static data (cards, skill tree, phases) could not be loaded"""

    def __init__(self, message: str, **kwargs):
        super().__init__(message=message, **kwargs)
        self.user_message = "Mission data could not be loaded. Check the data folder."


class RecordNotFoundError(PrimeOfficerError):
    """Requested record (card, node, phase) does not exist"""

    def __init__(
        self,
        message: str,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        **kwargs
    ):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(
            message=message,
            user_message=f"{record_type or 'Record'} not found.",
            context={"record_type": record_type, "record_id": record_id},
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(PrimeOfficerError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The app is not properly configured. Check your .env file.",
            context={"config_key": config_key},
            **kwargs
        )
