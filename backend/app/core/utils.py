"""
Utility functions for the application.
"""
from typing import Any, Dict


def format_error(message: str, details: Any = None, **fields: Any) -> Dict[str, Any]:
    """Format error response; extra keyword fields are included when not None."""
    response = {"error": message}
    response.update({key: value for key, value in fields.items() if value is not None})
    if details:
        response["details"] = details
    return response
