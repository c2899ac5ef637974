"""Data Validation Utilities
==========================

Structural checks applied to provider payloads before they are normalized.
They only report problems; adapters decide whether a problem is fatal.
"""

from typing import Any, Dict, List, Optional

__all__ = ["DataValidator"]


class DataValidator:
    """Validation helpers for raw provider payloads."""

    @staticmethod
    def validate_structure(
        data: Any,
        required_fields: Optional[List[str]] = None,
        expected_type: Optional[type] = None,
    ) -> Dict[str, Any]:
        """Validate data structure and return validation results.

        Args:
            data: Data to validate
            required_fields: Keys that must be present (dicts, or the first item of a list)
            expected_type: Expected data type

        Returns:
            dict: ``valid`` flag, ``errors`` list, ``data_type`` and ``size``

        Example:
            ```python
            validation = DataValidator.validate_structure(
                payload,
                required_fields=["id", "symbol", "name"],
                expected_type=dict,
            )
            if not validation["valid"]:
                logger.warning(f"Payload validation failed: {validation['errors']}")
            ```
        """
        errors = []

        if expected_type and not isinstance(data, expected_type):
            errors.append(f"Expected {expected_type.__name__}, got {type(data).__name__}")

        if required_fields:
            if isinstance(data, list) and data and isinstance(data[0], dict):
                missing = [field for field in required_fields if field not in data[0]]
                if missing:
                    errors.append(f"Missing required fields in list items: {missing}")
            elif isinstance(data, dict):
                missing = [field for field in required_fields if field not in data]
                if missing:
                    errors.append(f"Missing required fields: {missing}")

        return {
            "valid": len(errors) == 0,
            "errors": errors,
            "data_type": type(data).__name__,
            "size": len(data) if hasattr(data, "__len__") else None,
        }

    @staticmethod
    def validate_sections(data: Dict[str, Any], sections: List[str]) -> Dict[str, Any]:
        """Check that each named key holds a (possibly empty) mapping.

        A section that is present but ``null`` counts as missing.
        """
        missing = [name for name in sections if not isinstance(data.get(name), dict)]
        return {
            "valid": not missing,
            "errors": [f"Missing or invalid section: {name}" for name in missing],
            "missing_sections": missing,
        }
