from typing import Any, Protocol, Type, TypeVar, Union, runtime_checkable

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import WhatsAppError
from ..types import ValidationMode

TModel = TypeVar("TModel", bound=BaseModel)


@runtime_checkable
class SchemaValidator(Protocol):
    def validate(self, schema: Any, value: Any) -> Any:
        ...


def _field_path(location: Any) -> str:
    return ".".join(str(part) for part in location or ())


class Validator:
    def __init__(self, mode: Union[ValidationMode, str] = ValidationMode.STRICT) -> None:
        self._mode = ValidationMode(mode)

    @property
    def mode(self) -> ValidationMode:
        return self._mode

    def set_mode(self, mode: Union[ValidationMode, str]) -> None:
        self._mode = ValidationMode(mode)

    def validate(self, schema: Type[TModel], value: Any) -> Any:
        if self._mode == ValidationMode.OFF:
            return value
        try:
            return schema.model_validate(value)
        except PydanticValidationError as exc:
            errors = exc.errors()
            if self._mode == ValidationMode.RELAXED:
                raise WhatsAppError.validation(
                    "Validation failed in relaxed mode",
                    details=errors,
                ) from exc
            first = errors[0] if errors else {}
            raise WhatsAppError.validation(
                str(first.get("msg") or "Validation failed in strict mode"),
                field=_field_path(first.get("loc")) or None,
                details=errors,
            ) from exc
