"""Routes bound at module level and again under a ``default`` mapping."""


async def list_orders(req):
    return {"status": 200, "body": []}


async def create_order(req):
    return {"status": 201, "body": {}}


get_orders_route = {
    "path": "/api/orders",
    "method": "GET",
    "handler": list_orders,
    "response": {200: {"content_type": "application/json", "body": {}}},
}

create_order_route = {
    "path": "/api/orders",
    "method": "POST",
    "handler": create_order,
    "request": {"body": {}},
    "response": {201: {"content_type": "application/json", "body": {}}},
}

default = {
    "get_orders_route": get_orders_route,
    "create_order_route": create_order_route,
}
