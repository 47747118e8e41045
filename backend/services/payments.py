"""Pricing, subscriptions and mock checkout. No payment provider is called."""

import urllib.parse
from typing import Optional

from repositories import Collection, DocumentStore
from store import get_database
from utils import create_id, format_currency

from .errors import PaymentsError, require_feature


def get_pricing_table(db: Optional[DocumentStore] = None) -> list[dict]:
    db = db or get_database()
    return [
        {**p, "formattedPrice": f"{format_currency(p.get('priceCents', 0))}/{p.get('interval', 'month')}"}
        for p in db.get_products()
    ]


def get_subscription_for_user(user_id: str, db: Optional[DocumentStore] = None) -> Optional[dict]:
    """Return {"subscription", "product"} or None when the user has none or its product is gone."""
    db = db or get_database()
    matches = db.list_by(Collection.SUBSCRIPTIONS, userId=user_id)
    if not matches:
        return None
    subscription = matches[0]
    product = db.find(Collection.PRODUCTS, subscription.get("productId"))
    if product is None:
        return None
    return {"subscription": subscription, "product": product}


def create_checkout_session(product_id: str, db: Optional[DocumentStore] = None) -> dict:
    require_feature("payments")
    db = db or get_database()
    product = db.find(Collection.PRODUCTS, product_id)
    if product is None:
        raise PaymentsError("Product not found", code="product_not_found")
    session_id = create_id("evt")
    return {
        "id": session_id,
        "url": f"https://checkout.example.com/session/{session_id}",
        "product": product,
    }


def get_customer_portal_url(user_id: str) -> str:
    return f"https://billing.example.com/portal?user={urllib.parse.quote(user_id, safe='')}"
