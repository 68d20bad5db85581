from pathlib import Path

import markdown
import nh3
from fastapi import Request
from fastapi.templating import Jinja2Templates
from markupsafe import Markup

from blog.web.session import csrf_token, pop_flashes, pop_form_state, session_user_id

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


POST_TAGS = {
    "a", "blockquote", "br", "code", "em", "h1", "h2", "h3", "h4", "h5", "h6", "hr",
    "img", "li", "ol", "p", "pre", "strong", "ul",
}
POST_ATTRIBUTES = {"a": {"href", "title"}, "img": {"src", "alt", "title"}}
URL_SCHEMES = {"http", "https", "mailto"}


def render_markdown(text: str | None) -> Markup:
    if not text:
        return Markup("")
    html = markdown.markdown(text, extensions=["fenced_code", "nl2br"])
    return Markup(nh3.clean(html, tags=POST_TAGS, attributes=POST_ATTRIBUTES, url_schemes=URL_SCHEMES))


templates.env.filters["markdown"] = render_markdown


def render(request: Request, name: str, context: dict | None = None, status_code: int = 200):
    errors, old = pop_form_state(request)
    ctx = {
        "request": request,
        "logged_in": session_user_id(request) is not None,
        "csrf_token": csrf_token(request),
        "messages": pop_flashes(request),
        "errors": errors,
        "old": old,
    }
    ctx.update(context or {})
    return templates.TemplateResponse(request, name, ctx, status_code=status_code)
