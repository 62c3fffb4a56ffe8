import math
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, AnyUrl, BaseModel, Field, TypeAdapter, ValidationError

from catalog.exceptions import ProductValidationError, RequestBodyError

_url_adapter = TypeAdapter(AnyUrl)


def _valid_url(value: str) -> str:
    # validate only, the stored string stays exactly as sent
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError("Invalid url")
    return value


def _positive_number(value: Any):
    # ints stay ints, floats stay floats
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("Input should be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("Input should be a finite number")
    if value <= 0:
        raise ValueError("Input should be greater than 0")
    return value


UrlString = Annotated[str, Field(strict=True), AfterValidator(_valid_url)]
Price = Annotated[Any, AfterValidator(_positive_number)]


class ProductCreate(BaseModel):
    title: Annotated[str, Field(strict=True, min_length=1)]
    price: Price
    imageUrl: UrlString
    amazonUrl: UrlString


class LoginRequest(BaseModel):
    username: Optional[Any] = None
    password: Optional[Any] = None


def format_errors(errors) -> list[dict]:
    """Flatten pydantic error dicts into {field, message, type} entries."""
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in errors
    ]


def validate_product(payload: Any) -> dict:
    """
    Check a decoded request body against ProductCreate.

    Returns only the declared fields. Raises ProductValidationError with one
    entry per violation when the payload does not fit.
    """
    try:
        product = ProductCreate.model_validate(payload)
    except ValidationError as e:
        raise ProductValidationError(format_errors(e.errors()))
    return product.model_dump()


async def read_json_body(request) -> Any:
    """Decode the request body, a missing or broken body is a 400."""
    try:
        return await request.json()
    except ValueError:
        raise RequestBodyError([{"field": "body", "message": "Invalid JSON", "type": "json_invalid"}])


async def read_json_object(request) -> dict:
    body = await read_json_body(request)
    if not isinstance(body, dict):
        raise RequestBodyError([{"field": "body", "message": "Input should be a JSON object", "type": "dict_type"}])
    return body
