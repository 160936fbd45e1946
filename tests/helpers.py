from cakestore.services.auth_service import create_access_token

PASSWORD = "secret123"


def auth_header(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


def shipping_fields() -> dict:
    return {
        "payment_method": "COD",
        "shipping_address": "1 Le Loi",
        "shipping_city": "Hanoi",
        "shipping_postal_code": "100000",
        "shipping_country": "Vietnam",
    }
