"""
Spotify FastMCP Server

Main MCP server definition. Tools and the OAuth callback route are
registered via imports.
"""

import sys

from loguru import logger

from spotify_mcp.config import settings

# Configure logging
logger.remove()  # Remove default handler
logger.add(
    sys.stderr,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    level=settings.log_level,
    colorize=True,
)

logger.info("🚀 Spotify MCP Server")
logger.info(f"✓ Spotify Web API: {settings.api_base_url}")
logger.info(f"✓ OAuth redirect URI: {settings.redirect_uri}")
if settings.session_scoped:
    logger.info("🔐 SESSION-SCOPED MODE: each MCP session signs in separately")
else:
    logger.info("✓ Single-session mode: one Spotify sign-in shared by all clients")

# Import MCP server instance (created in mcp_instance.py)
from spotify_mcp.mcp_instance import mcp  # noqa: E402

# Import tools and routes to register them with the server
# This triggers the @tool / @custom_route decorators
from spotify_mcp.tools import auth  # noqa: F401, E402
from spotify_mcp.tools import player  # noqa: F401, E402
from spotify_mcp.tools import playlists  # noqa: F401, E402
from spotify_mcp.tools import tracks  # noqa: F401, E402
from spotify_mcp.tools import search  # noqa: F401, E402
from spotify_mcp.tools import users  # noqa: F401, E402
from spotify_mcp import callback  # noqa: F401, E402

logger.info("✓ Spotify MCP server initialized")

# Create ASGI app for Streamable HTTP transport
# Exposes /mcp for MCP clients and /callback for the OAuth redirect.
# http_app() instead of mcp.run() keeps explicit control over uvicorn shutdown
app = mcp.http_app()


def main() -> None:
    import asyncio
    import signal

    import uvicorn

    logger.info(f"🌐 Starting Uvicorn on {settings.host}:{settings.port} (path=/mcp)")
    logger.info(f"✓ Graceful shutdown timeout: {settings.shutdown_timeout_seconds}s")

    async def serve() -> None:
        """Run uvicorn with explicit signal handling for graceful shutdown."""
        config = uvicorn.Config(
            "spotify_mcp.server:app",
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
            access_log=settings.uvicorn_access_log,
            timeout_graceful_shutdown=settings.shutdown_timeout_seconds,
        )
        server = uvicorn.Server(config)

        loop = asyncio.get_running_loop()

        def handle_exit(sig: int, *_: object) -> None:
            """Handle SIGTERM/SIGINT gracefully without noisy stack traces."""
            logger.info(f"Received signal {sig}, initiating graceful shutdown")
            server.should_exit = True

        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, handle_exit, sig)
            except NotImplementedError:
                # Non-POSIX platforms
                pass

        await server.serve()

    asyncio.run(serve())


if __name__ == "__main__":
    main()
