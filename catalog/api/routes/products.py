import logging

from fastapi import APIRouter, Depends, Request, Response

from catalog.exceptions import CatalogError, InvalidProductIdError, StoreError
from catalog.models import read_json_body, read_json_object, validate_product
from catalog.services.auth_service import require_token, require_token_on_update
from catalog.services.product_service import ProductStore, get_product_store, serialize_product

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_products(id: str | None = None, store: ProductStore = Depends(get_product_store)):
    """All products newest first, or a single one when ?id= is given."""
    try:
        if id:
            return serialize_product(await store.get_by_id(id))
        docs = await store.list_all()
        return [serialize_product(doc) for doc in docs]
    except InvalidProductIdError:
        # reads never report a malformed id as a client error
        logger.error(f"Error fetching products: malformed id '{id}'")
        raise StoreError("Failed to fetch products")
    except CatalogError:
        raise
    except Exception as e:
        logger.exception(f"Error fetching products (id={id}): {e}")
        raise StoreError("Failed to fetch products")


# bodies are read inside the handlers so the token guard always runs first
@router.post("", status_code=201, dependencies=[Depends(require_token)])
async def create_product(request: Request, store: ProductStore = Depends(get_product_store)):
    product = validate_product(await read_json_body(request))
    try:
        return await store.create(product)
    except Exception as e:
        logger.exception(f"Error creating product: {e}")
        raise StoreError("Failed to create product")


@router.put("/{product_id}", dependencies=[Depends(require_token_on_update)])
async def update_product(
    product_id: str,
    request: Request,
    store: ProductStore = Depends(get_product_store),
):
    # no schema check here, any fields given are merged into the document
    fields = await read_json_object(request)
    try:
        await store.update(product_id, fields)
    except CatalogError:
        raise
    except Exception as e:
        logger.exception(f"Error updating product {product_id}: {e}")
        raise StoreError("Failed to update product")
    return {"message": "Product updated successfully"}


@router.delete("/{product_id}", status_code=204, dependencies=[Depends(require_token)])
async def delete_product(product_id: str, store: ProductStore = Depends(get_product_store)):
    try:
        await store.delete(product_id)
    except CatalogError:
        raise
    except Exception as e:
        logger.exception(f"Error deleting product {product_id}: {e}")
        raise StoreError("Failed to delete product")
    return Response(status_code=204)
