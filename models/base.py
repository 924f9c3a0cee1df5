from pydantic import BaseModel, ConfigDict, ValidationError
from typing import Any, Dict


class BaseGolfModel(BaseModel):
    """Shared configuration and methods."""
    model_config = ConfigDict(validate_assignment=True)

    def apply_changes(self, **changes: Any) -> Dict[str, str]:
        """Assign several fields at once.

        Every field is attempted; returns {field: error message} for the ones that
        failed validation (empty dict when everything was applied).
        """
        errors: Dict[str, str] = {}
        for field_name, value in changes.items():
            try:
                setattr(self, field_name, value)
            except ValidationError as e:
                errors[field_name] = e.errors()[0]['msg']
        return errors
