from prism_router import create_api_route


async def hello(req):
    return {"status": 200, "body": {"message": "hello"}}


default = create_api_route(
    path="/api/hello",
    method="GET",
    response={200: {"content_type": "application/json", "body": {"type": "object", "properties": {"message": {"type": "string"}}, "required": ["message"]}}},
    handler=hello,
)
