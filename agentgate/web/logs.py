"""Logs section — tab strip switching between the LLM proxy and MCP gateway views.

``/logs`` itself has no content and redirects to the default tab.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse

LOGS_ROOT = "/logs"
DEFAULT_TAB_HREF = "/logs/llm-proxy"


@dataclass(frozen=True)
class LogsTab:
    label: str
    href: str
    description: str

    def is_active(self, pathname: str | None) -> bool:
        if not pathname:
            return False
        return pathname == self.href or pathname.startswith(self.href + "/")


TABS: tuple[LogsTab, ...] = (
    LogsTab(
        label="LLM Proxy",
        href="/logs/llm-proxy",
        description="Requests forwarded through the LLM proxy.",
    ),
    LogsTab(
        label="MCP Gateway",
        href="/logs/mcp-gateway",
        description="Tool calls forwarded through the MCP gateway.",
    ),
)

_LINK_BASE = "relative pb-3 text-sm font-medium transition-colors hover:text-foreground"
_UNDERLINE = '<span class="absolute bottom-0 left-0 right-0 h-0.5 bg-primary"></span>'


def _render_tab(tab: LogsTab, pathname: str) -> str:
    active = tab.is_active(pathname)
    colour = "text-foreground" if active else "text-muted-foreground"
    current = ' aria-current="page"' if active else ""
    marker = _UNDERLINE if active else ""
    return (
        f'<a href="{tab.href}" class="{_LINK_BASE} {colour}"{current}>'
        f"{tab.label}{marker}</a>"
    )


def render_logs_layout(pathname: str, children: str = "") -> str | None:
    """Render the logs page frame around *children* (already-safe HTML).

    Returns ``None`` for the bare ``/logs`` path, which has no page of its
    own and must be redirected to :data:`DEFAULT_TAB_HREF`.
    """
    if pathname.rstrip("/") == LOGS_ROOT:
        return None

    tabs = "\n            ".join(_render_tab(tab, pathname) for tab in TABS)
    return f"""\
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Logs</title></head>
<body>
<div class="flex h-full w-full flex-col">
  <div class="border-b border-border bg-card/30">
    <div class="mx-auto max-w-7xl px-4 py-8 md:px-8">
      <h1 class="mb-2 text-2xl font-semibold tracking-tight">Logs</h1>
      <p class="text-sm text-muted-foreground">
        View all logs including LLM proxy interactions and MCP gateway tool calls.
      </p>
      <nav class="mt-6 flex gap-4 border-b border-border">
            {tabs}
      </nav>
    </div>
  </div>
  {children}
</div>
</body>
</html>
"""


def _page(pathname: str) -> HTMLResponse:
    tab = next((t for t in TABS if t.is_active(pathname)), None)
    body = f'<main class="p-8"><p>{tab.description}</p></main>' if tab else ""
    return HTMLResponse(render_logs_layout(pathname, body))


router = APIRouter(include_in_schema=False)


@router.get(LOGS_ROOT)
async def logs_index() -> RedirectResponse:
    return RedirectResponse(DEFAULT_TAB_HREF)


@router.get("/logs/llm-proxy")
@router.get("/logs/llm-proxy/{rest:path}")
async def llm_proxy_logs(request: Request) -> HTMLResponse:
    return _page(request.url.path)


@router.get("/logs/mcp-gateway")
@router.get("/logs/mcp-gateway/{rest:path}")
async def mcp_gateway_logs(request: Request) -> HTMLResponse:
    return _page(request.url.path)
