class CatalogError(Exception):
    """All errors that map to an API response"""
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message}


class MissingTokenError(CatalogError):
    """No bearer token on a guarded route"""
    status_code = 401
    message = "No token provided"


class InvalidTokenError(CatalogError):
    """Bad signature, expired token or malformed Authorization header"""
    status_code = 403
    message = "Invalid token"


class InvalidCredentialsError(CatalogError):
    """Login with anything but the configured admin pair"""
    status_code = 401
    message = "Invalid credentials"


class InvalidProductIdError(CatalogError):
    """Id is not a structurally valid ObjectId"""
    status_code = 400
    message = "Invalid product ID"


class ProductNotFoundError(CatalogError):
    status_code = 404
    message = "Product not found"


class ProductValidationError(CatalogError):
    """Product payload rejected by the schema, carries per-field errors"""
    status_code = 400
    message = "Invalid product data"

    def __init__(self, errors: list[dict], message: str = None):
        self.errors = errors
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}


class StoreError(CatalogError):
    """Unexpected database failure, cause is logged and never returned"""
    status_code = 500


class RequestBodyError(ProductValidationError):
    """Body missing, not JSON, or not the expected shape"""
    message = "Invalid request body"
