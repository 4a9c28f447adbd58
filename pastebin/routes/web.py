"""
HTML routes.
Serves the create form, the "paste created" page and the paste viewer.
"""
import html
import re
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse

from pastebin.errors import ClientError, EmptyText, PasteError
from pastebin.routes.deps import get_store, http_error
from pastebin.store import PasteStore

router = APIRouter()

DEFAULT_EXPIRY = timedelta(hours=24)

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)([hms])")
_UNITS = {"h": "hours", "m": "minutes", "s": "seconds"}

_STYLE = """
        body {
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Arial, sans-serif;
            max-width: 800px;
            margin: 0 auto;
            padding: 20px;
            color: #333;
        }
        textarea { width: 100%; height: 200px; margin: 10px 0; }
        button { padding: 10px 15px; background: #4CAF50; color: white; border: none; cursor: pointer; }
        .paste {
            background: #f5f5f5;
            padding: 15px;
            margin: 10px 0;
            border-left: 3px solid #4CAF50;
            border-radius: 5px;
            font-family: "Courier New", monospace;
            white-space: pre-wrap;
            overflow-wrap: break-word;
        }
        a { color: #4CAF50; }
"""


def parse_duration(value: str) -> Optional[timedelta]:
    """
    Parse a duration such as "1h", "30m" or "1h30m".

    Returns:
        The duration, or None if value is not a duration
    """
    value = value.strip()
    if not value:
        return None

    total = timedelta()
    pos = 0
    for match in _DURATION_PART.finditer(value):
        if match.start() != pos:
            return None
        try:
            total += timedelta(**{_UNITS[match.group(2)]: float(match.group(1))})
        except OverflowError:
            return None
        pos = match.end()

    if pos != len(value):
        return None
    return total


def _page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(title)}</title>
    <style>{_STYLE}</style>
</head>
<body>
    <h1>Pastebin</h1>
{body}
</body>
</html>"""


@router.get("/", response_class=HTMLResponse)
def create_form() -> str:
    """Serve the create paste form."""
    return _page("Pastebin", """    <form action="/create" method="post" accept-charset="utf-8">
        <textarea name="text" placeholder="Paste your text here..." required></textarea><br>
        <label>Expires after:
            <select name="expires">
                <option value="1h">1 hour</option>
                <option value="24h" selected>1 day</option>
                <option value="168h">1 week</option>
            </select>
        </label>
        <button type="submit">Create</button>
    </form>""")


@router.get("/create", include_in_schema=False)
def create_redirect() -> RedirectResponse:
    return RedirectResponse("/", status_code=303)


@router.post("/create", response_class=HTMLResponse)
def create_from_form(
    text: str = Form(""),
    expires: str = Form(""),
    store: PasteStore = Depends(get_store),
) -> HTMLResponse:
    """Create a paste from the HTML form and link to it."""
    ttl = parse_duration(expires)
    if ttl is None or ttl <= timedelta():
        ttl = DEFAULT_EXPIRY

    try:
        slug = store.create(text, ttl)
    except EmptyText:
        return HTMLResponse(_error_page("The text must not be empty."), status_code=400)
    except PasteError as e:
        raise http_error(e)

    link = f"/paste/{slug}"
    return HTMLResponse(_page("Paste created", f"""    <h2>Paste created!</h2>
    <div class="paste">
        <p>Link: <a href="{link}">{link}</a></p>
    </div>
    <p><a href="/">Create a new paste</a></p>"""))


@router.get("/paste/{slug}", response_class=HTMLResponse)
def view_paste(slug: str, store: PasteStore = Depends(get_store)) -> HTMLResponse:
    """View a paste as HTML, or a 404 page if it is missing or expired."""
    try:
        text = store.get(slug)
    except ClientError:
        return HTMLResponse(
            _error_page("This paste was not found or has expired."),
            status_code=404,
        )
    except PasteError as e:
        raise http_error(e)

    return HTMLResponse(_page(f"Paste {slug}", f"""    <div class="paste">{html.escape(text)}</div>
    <p><a href="/">Create a new paste</a></p>"""))


def _error_page(message: str) -> str:
    return _page("Pastebin", f"""    <p>{html.escape(message)}</p>
    <p><a href="/">Create a new paste</a></p>""")
