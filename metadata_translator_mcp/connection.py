"""Connection state for the translation session."""

from __future__ import annotations

from dataclasses import dataclass

from .data_model import DataModel
from .languages import LanguageRegistry
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ConnectionState:
    data_model: DataModel | None = None
    connection_string: str = ""

    @property
    def is_connected(self) -> bool:
        return self.data_model is not None

    @property
    def summary(self) -> dict:
        info: dict = {"connected": self.is_connected}
        if self.data_model is not None:
            dm = self.data_model
            info.update({
                "server": dm.server_name,
                "database": dm.database_name,
                "default_culture": dm.default_culture,
                "cultures": dm.culture_names,
                "selected_languages": dm.grid_cultures,
                "row_counts": {
                    "captions": len(dm.captions),
                    "descriptions": len(dm.descriptions),
                    "display_folders": len(dm.display_folders),
                },
            })
        return info


# One connection at a time
_state = ConnectionState()
_languages_file = None


def configure(languages_file=None) -> None:
    """Set the language catalog override used by later connections."""
    global _languages_file
    _languages_file = languages_file


def get_state() -> ConnectionState:
    return _state


def require_connected() -> DataModel:
    """Return the connected DataModel or raise if there is none."""
    if _state.data_model is None:
        raise RuntimeError("Not connected. Use connect_to_server or connect_with_connection_string first.")
    return _state.data_model


def attach(data_model: DataModel, connection_string: str = "") -> dict:
    """Make ``data_model`` the current session, replacing any previous one."""
    global _state
    disconnect()
    _state = ConnectionState(data_model=data_model, connection_string=connection_string)
    return {"status": "connected", **_state.summary}


def connect_server(server: str, database: str) -> dict:
    """Connect by server and database name (e.g. localhost:54321 for Power BI Desktop)."""
    disconnect()
    dm = DataModel.connect(server, database, LanguageRegistry.load(_languages_file))
    return attach(dm, f"Data Source={server};Initial Catalog={database}")


def connect_connection_string(connection_string: str) -> dict:
    disconnect()
    dm = DataModel.connect_with_connection_string(connection_string, LanguageRegistry.load(_languages_file))
    return attach(dm, connection_string)


def disconnect() -> dict:
    """Disconnect current connection and clean up."""
    global _state

    was_connected = _state.is_connected
    if _state.data_model is not None:
        try:
            _state.data_model.disconnect()
        except Exception as exc:
            logger.warning("Error while disconnecting: %s", exc)

    _state = ConnectionState()
    return {
        "status": "disconnected",
        "was_connected": was_connected,
    }
