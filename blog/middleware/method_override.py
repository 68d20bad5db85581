from urllib.parse import parse_qs


class MethodOverrideMiddleware:
    """Let HTML forms reach PUT/PATCH/DELETE routes by posting to ``?_method=``."""

    allowed = ("PUT", "PATCH", "DELETE")

    def __init__(self, app, *, param: str = "_method"):
        self.app = app
        self.param = param

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http" and scope["method"] == "POST":
            query = parse_qs(scope.get("query_string", b"").decode("latin-1"))
            override = (query.get(self.param) or [""])[0].upper()
            if override in self.allowed:
                scope = dict(scope, method=override)
        return await self.app(scope, receive, send)
