"""Products, subscriptions, checkout."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from api.deps import StoreDep, require_user
from schemas.requests import CheckoutRequest, ProductUpsert
from services.payments import (
    create_checkout_session,
    get_customer_portal_url,
    get_pricing_table,
    get_subscription_for_user,
)

router = APIRouter(prefix="/api/billing", tags=["billing"])


@router.get("/products")
async def list_products(db: StoreDep):
    return JSONResponse({"products": get_pricing_table(db)})


@router.put("/products")
async def put_product(body: ProductUpsert, db: StoreDep):
    fields = body.model_dump(exclude_unset=True)
    if "price_cents" in fields:
        fields["priceCents"] = fields.pop("price_cents")
    product = db.upsert_product(fields)
    return JSONResponse(product)


@router.post("/checkout")
async def checkout(body: CheckoutRequest, db: StoreDep):
    return JSONResponse(create_checkout_session(body.product_id, db))


@router.get("/subscription")
async def my_subscription(user: Annotated[dict, Depends(require_user)], db: StoreDep):
    found = get_subscription_for_user(user["id"], db)
    if not found:
        raise HTTPException(404, "No subscription")
    return JSONResponse({**found, "portalUrl": get_customer_portal_url(user["id"])})
