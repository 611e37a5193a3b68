"""Run the Xibo tools as an MCP server over stdio."""

import asyncio

from xibo_agent.mcp.server import create_mcp_server
from xibo_agent.observability import setup_logging


async def main():
    setup_logging()
    server = create_mcp_server()
    try:
        await server.handle_stdio()
    finally:
        await server.close()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
