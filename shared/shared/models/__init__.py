from shared.models.base import camel_config
from shared.models.user import CurrentUser

__all__ = ["CurrentUser", "camel_config"]
