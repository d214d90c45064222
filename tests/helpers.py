from app.domain.schemas import CheckoutIn


def address(**overrides):
    data = {
        "street": "123 Main Street",
        "city": "New York",
        "state": "NY",
        "zip_code": "10001",
        "country": "USA",
    }
    data.update(overrides)
    return data


def checkout_payload(session_id="sess-1", email="john.smith@example.com", **overrides) -> dict:
    data = {
        "session_id": session_id,
        "customer": {"name": "John Smith", "email": email},
        "shipping_address": address(),
    }
    data.update(overrides)
    return data


def checkout_in(session_id="sess-1", email="john.smith@example.com", **overrides) -> CheckoutIn:
    return CheckoutIn(**checkout_payload(session_id, email, **overrides))
