# app/routers/cart.py
from fastapi import APIRouter, Depends, Path, Query, status

from app.core.auth import RequestContext, require_auth
from app.core.deps import get_cart_service
from app.core.errors import NotFound
from app.schemas.cart import (
    CartCountResponse,
    CartItemCreate,
    CartItemResponse,
    CartListResponse,
    CartStatusResponse,
)
from app.schemas.common import MAX_ID, Envelope
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=CartListResponse)
def get_my_cart(
    bought: bool = Query(default=False, description="true lists purchased courses"),
    current: RequestContext = Depends(require_auth),
    service: CartService = Depends(get_cart_service),
):
    """
    List the current user's cart (or purchase history with `bought=true`),
    newest first.
    """
    items = service.get_items(current.id, bought)
    return CartListResponse(message="Cart retrieved successfully", cart=items)


@router.get("/count", response_model=CartCountResponse)
def get_cart_count(
    current: RequestContext = Depends(require_auth),
    service: CartService = Depends(get_cart_service),
):
    """Number of courses in the active cart."""
    count = service.get_cart_item_count(current.id)
    return CartCountResponse(message="Cart item count retrieved successfully", count=count)


@router.get("/recent", response_model=CartListResponse)
def get_recent_items(
    limit: int = Query(default=5, ge=1, le=50),
    current: RequestContext = Depends(require_auth),
    service: CartService = Depends(get_cart_service),
):
    """Most recently added courses still in the active cart."""
    items = service.get_recently_added(current.id, limit)
    return CartListResponse(message="Recent cart items retrieved successfully", cart=items)


@router.get("/items/{course_id}", response_model=CartStatusResponse)
def check_item_in_cart(
    course_id: int = Path(gt=0, le=MAX_ID),
    current: RequestContext = Depends(require_auth),
    service: CartService = Depends(get_cart_service),
):
    """Whether a course is in the active cart."""
    return CartStatusResponse(
        message="Cart item status retrieved successfully",
        is_in_cart=service.is_in_cart(current.id, course_id),
    )


@router.post("", response_model=CartItemResponse, status_code=status.HTTP_201_CREATED)
def add_to_cart(
    payload: CartItemCreate,
    current: RequestContext = Depends(require_auth),
    service: CartService = Depends(get_cart_service),
):
    """
    Add a course to the current user's cart.

    409 when the course is already in the cart or already bought.
    """
    item = service.add_to_cart(current.id, payload.course_id)
    return CartItemResponse(message="Course added to cart successfully", item=item)


@router.delete("/items/{course_id}", response_model=Envelope)
def remove_cart_item(
    course_id: int = Path(gt=0, le=MAX_ID),
    current: RequestContext = Depends(require_auth),
    service: CartService = Depends(get_cart_service),
):
    """
    Remove a course from the active cart. Purchased courses stay.
    """
    if not service.remove_from_cart(current.id, course_id):
        raise NotFound("Course not found in cart")
    return Envelope(message="Course removed from cart successfully")


@router.delete("/clear", response_model=Envelope)
def clear_cart(
    bought: bool = Query(default=False, description="true commits checkout, false empties the cart"),
    current: RequestContext = Depends(require_auth),
    service: CartService = Depends(get_cart_service),
):
    """
    Bulk operation over the active cart:

      - bought=true  => checkout: every item becomes purchased
      - bought=false => abandon: every item is removed
    """
    if bought:
        changed = service.checkout(current.id)
        message = "Checkout completed successfully"
    else:
        changed = service.abandon_cart(current.id)
        message = "Cart cleared successfully"

    if not changed:
        raise NotFound("Cart is already empty")
    return Envelope(message=message)
