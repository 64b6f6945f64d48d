"""Plain-dict views of aggregates for API responses."""

import json


def _iso(value):
    return value.isoformat() if value else None


def _summary(summary) -> dict:
    if summary is None:
        return {"subtotal": 0.0, "discount": 0.0, "shipping": 0.0, "tax": 0.0, "total": 0.0}
    return {
        "subtotal": summary.subtotal,
        "discount": summary.discount,
        "shipping": summary.shipping,
        "tax": summary.tax,
        "total": summary.total,
    }


def _address(address) -> dict | None:
    if address is None:
        return None
    return {
        "street": address.street,
        "city": address.city,
        "state": address.state,
        "postal_code": address.postal_code,
        "country": address.country,
    }


def product_to_dict(product) -> dict:
    return {
        "id": str(product.id),
        "name": product.name,
        "slug": product.slug,
        "brand": product.brand,
        "description": product.description,
        "category_id": str(product.category_id) if product.category_id else None,
        "specifications": json.loads(product.specifications) if product.specifications else {},
        "price": {
            "base_price": product.price.base_price,
            "discount_percent": product.price.discount_percent,
            "final_price": product.price.final_price,
            "currency": product.price.currency,
        },
        "inventory": {
            "quantity": product.inventory.quantity,
            "in_stock": product.inventory.in_stock,
        },
        "rating": {
            "average": product.rating.average if product.rating else 0.0,
            "count": product.rating.count if product.rating else 0,
            "distribution": product.rating.buckets if product.rating else [0, 0, 0, 0, 0],
        },
        "created_at": _iso(product.created_at),
        "updated_at": _iso(product.updated_at),
    }


def category_to_dict(category) -> dict:
    return {
        "id": str(category.id),
        "name": category.name,
        "slug": category.slug,
        "parent_id": str(category.parent_id) if category.parent_id else None,
        "product_count": category.product_count,
    }


def cart_to_dict(cart) -> dict:
    return {
        "user_id": str(cart.user_id),
        "items": [
            {
                "product_id": str(item.product_id),
                "quantity": item.quantity,
                "selected_specs": item.specs,
                "base_price": item.price.base_price,
                "discount_percent": item.price.discount_percent,
                "final_price": item.price.final_price,
                "added_at": _iso(item.added_at),
            }
            for item in cart.items
        ],
        "coupon": (
            {
                "code": cart.coupon.code,
                "discount_percentage": cart.coupon.discount_percentage,
                "expires_at": _iso(cart.coupon.expires_at),
            }
            if cart.coupon
            else None
        ),
        "item_count": cart.item_count,
        "summary": _summary(cart.summary),
        "last_updated": _iso(cart.last_updated),
    }


def order_to_dict(order, include_verification_code=False) -> dict:
    """Order view. The delivery verification code is for admins and agents only."""
    payment = {
        "method": order.payment.method,
        "status": order.payment.status,
        "collection_date": _iso(order.payment.collection_date),
        "collected_by": order.payment.collected_by,
    }
    if include_verification_code:
        payment["verification_code"] = order.payment.verification_code

    return {
        "id": str(order.id),
        "user_id": str(order.user_id),
        "status": order.status,
        "items": [
            {
                "product_id": str(item.product_id),
                "name": item.name,
                "quantity": item.quantity,
                "base_price": item.base_price,
                "discount_percent": item.discount_percent,
                "final_price": item.final_price,
                "line_total": item.line_total,
            }
            for item in order.items
        ],
        "payment": payment,
        "billing": {
            "name": order.billing_name,
            "email": order.billing_email,
            "phone": order.billing_phone,
            "address": _address(order.billing_address),
        },
        "shipping": {
            "address": _address(order.shipping_address),
            "method": order.shipping_method,
            "tracking_number": order.tracking_number,
            "estimated_delivery": _iso(order.estimated_delivery),
            "delivery_attempts": [
                {
                    "attempted_at": _iso(attempt.attempted_at),
                    "status": attempt.status,
                    "code_verified": attempt.code_verified,
                    "notes": attempt.notes,
                }
                for attempt in order.delivery_attempts
            ],
        },
        "coupon_code": order.coupon_code,
        "summary": _summary(order.summary),
        "notes": order.notes,
        "cancellation_reason": order.cancellation_reason,
        "created_at": _iso(order.created_at),
        "updated_at": _iso(order.updated_at),
        "delivered_at": _iso(order.delivered_at),
        "cancelled_at": _iso(order.cancelled_at),
    }


def review_to_dict(review) -> dict:
    metadata = review.review_metadata
    return {
        "id": str(review.id),
        "user_id": str(review.user_id),
        "product_id": str(review.product_id),
        "order_id": str(review.order_id),
        "rating": review.rating.score,
        "title": review.title,
        "content": review.content,
        "pros": json.loads(review.pros) if review.pros else [],
        "cons": json.loads(review.cons) if review.cons else [],
        "images": [{"url": image.url, "caption": image.caption} for image in review.images],
        "verified": review.verified,
        "helpful_count": review.helpful_count,
        "status": review.status,
        "admin_comment": review.admin_comment,
        "is_edited": metadata.is_edited if metadata else False,
        "created_at": _iso(review.created_at),
        "updated_at": _iso(review.updated_at),
    }


def wishlist_to_dict(wishlist) -> dict:
    return {
        "user_id": str(wishlist.user_id),
        "products": [
            {
                "product_id": str(entry.product_id),
                "added_at": _iso(entry.added_at),
                "notify_price_drops": entry.notify_price_drops,
                "notify_back_in_stock": entry.notify_back_in_stock,
            }
            for entry in wishlist.entries
        ],
        "product_count": wishlist.product_count,
        "last_modified": _iso(wishlist.last_modified),
    }


def related_product_to_dict(product) -> dict:
    return {
        "id": str(product.id),
        "name": product.name,
        "slug": product.slug,
        "brand": product.brand,
        "final_price": product.price.final_price,
    }


def user_to_dict(user) -> dict:
    return {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "role": user.role,
        "is_verified": user.is_verified,
        "created_at": _iso(user.created_at),
    }
