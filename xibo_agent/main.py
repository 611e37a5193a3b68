"""FastAPI application exposing the Xibo tools over HTTP."""

import time
from contextlib import asynccontextmanager
from typing import Any, Dict

import structlog
import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from xibo_agent.config import settings
from xibo_agent.mcp.server import UnknownToolError, XiboMCPServer, create_mcp_server
from xibo_agent.observability import setup_logging

setup_logging()

logger = structlog.get_logger(__name__)

# Global server instance
mcp_server: XiboMCPServer = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global mcp_server

    logger.info(
        "xibo_agent_starting",
        version=settings.service_version,
        env=settings.env,
        cms_url=settings.cms_url or None,
    )
    if not settings.cms_url:
        logger.warning("cms_url_not_configured", message="CMS tools will fail until CMS_URL is set")

    mcp_server = create_mcp_server(settings)
    logger.info("xibo_agent_started", tools=len(mcp_server.tools))

    yield

    logger.info("xibo_agent_stopping")
    await mcp_server.close()
    logger.info("xibo_agent_stopped")


app = FastAPI(
    title="Xibo Agent",
    description="Xibo CMS operations exposed as agent tools",
    version=settings.service_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing."""
    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000

    if request.url.path not in ["/health", "/healthz"]:
        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )

    return response


# =============================================================================
# Health & Status Endpoints
# =============================================================================


@app.get("/health")
@app.get("/healthz")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.service_name}


@app.get("/status")
async def status():
    """Configuration summary and tool call metrics."""
    if mcp_server is None:
        raise HTTPException(status_code=503, detail="Server not initialized")

    return {
        "status": "healthy" if settings.cms_url else "degraded",
        "service": settings.service_name,
        "version": settings.service_version,
        "env": settings.env,
        "cms": {
            "url": settings.cms_url or None,
            "configured": bool(settings.cms_url and settings.xibo_client_id),
        },
        "metrics": mcp_server.get_metrics(),
    }


# =============================================================================
# Tool Endpoints
# =============================================================================


@app.get("/mcp/tools")
async def list_tools():
    """List available tools."""
    if mcp_server is None:
        raise HTTPException(status_code=503, detail="Server not initialized")

    return {"tools": mcp_server.list_tool_schemas()}


class ToolCallRequest(BaseModel):
    """Request body for tool calls."""
    arguments: Dict[str, Any] = {}


@app.post("/mcp/tools/{tool_name}")
async def call_tool(tool_name: str, body: ToolCallRequest):
    """Call a tool; failures are reported in the returned envelope."""
    if mcp_server is None:
        raise HTTPException(status_code=503, detail="Server not initialized")

    try:
        return await mcp_server.call_tool_http(tool_name, body.arguments)
    except UnknownToolError as e:
        raise HTTPException(status_code=404, detail=str(e))


if __name__ == "__main__":
    uvicorn.run(
        "xibo_agent.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
