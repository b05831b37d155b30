"""FastMCP entry point: wires all tools and runs the server."""

from __future__ import annotations

from fastmcp import FastMCP

from .config import Settings, load_settings
from .connection import (
    configure,
    connect_connection_string,
    connect_server,
    disconnect,
    get_state,
)
from .logging_config import setup_logging
from .tom import load_tom
from . import translations


def create_server(settings: Settings | None = None) -> FastMCP:
    """Build and configure the MCP server with all tools."""
    settings = settings or Settings()
    configure(settings.languages_file)

    mcp = FastMCP(
        "metadata-translator",
        instructions="Translate captions, descriptions and display folders of a Power BI / AS tabular model",
    )

    @mcp.tool()
    def connect_to_server(server: str, database: str) -> dict:
        """Connect to a tabular model by server and database name.

        For Power BI Desktop use the local port, e.g. server='localhost:54321'.
        """
        return connect_server(server, database)

    @mcp.tool()
    def connect_with_connection_string(connection_string: str) -> dict:
        """Connect with a full connection string (Data Source=...;Initial Catalog=...)."""
        return connect_connection_string(connection_string)

    @mcp.tool()
    def disconnect_server() -> dict:
        """Disconnect from the current model."""
        return disconnect()

    @mcp.tool()
    def get_connection_status() -> dict:
        """Get connection status, cultures and grid row counts."""
        return get_state().summary

    translations.register_tools(mcp, settings)

    return mcp


def main() -> None:
    """Load settings and DLLs, create server, run on stdio."""
    settings = load_settings()
    setup_logging(settings.log_level)
    load_tom(settings.dll_dir)
    mcp = create_server(settings)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
