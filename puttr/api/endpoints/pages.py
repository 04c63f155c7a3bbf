"""
Landing page.

Plain HTML describing how to obtain a token and upload content.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from ...core.security import TokenStore
from ..deps import get_token_store

router = APIRouter()

INDEX_HTML = """<!doctype html>
<html><head><title>puttr</title></head>
<body>
    <h1>puttr</h1>
    <p>Request a token with <code>GET /token</code>. It is valid for
    {ttl_minutes} minutes.</p>
    <p>Then send your form-data as a PUT request to <code>/data</code> with
    the key <code>content</code> and the header
    <code>Authorization: Token &lt;token&gt;</code>, e.g.:</p>
    <pre>
    curl -X PUT -H "Authorization: Token $(curl -s localhost:3000/token)" \\
         -F content="hello world" localhost:3000/data
    </pre>
    <p>The file extension follows the <code>Content-Type</code> you send.</p>
</body>
</html>
"""


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index(token_store: TokenStore = Depends(get_token_store)) -> HTMLResponse:
    """Usage instructions."""
    ttl_minutes = int(token_store.ttl.total_seconds() // 60)
    return HTMLResponse(INDEX_HTML.format(ttl_minutes=ttl_minutes))
