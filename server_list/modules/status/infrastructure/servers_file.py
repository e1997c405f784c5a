"""servers.toml loader."""

from pathlib import Path

from server_list.modules.status.domain.entities import ServersConfig
from server_list.modules.status.domain.exceptions import ServersConfigError


def load_servers_config(path: Path) -> ServersConfig:
    """Read and validate the server list file.

    Raises:
        ServersConfigError: if the file is missing, not UTF-8 or invalid.
    """
    try:
        source = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ServersConfigError(str(path), "file not found") from e
    except UnicodeDecodeError as e:
        raise ServersConfigError(str(path), "not valid UTF-8") from e
    except OSError as e:
        raise ServersConfigError(str(path), str(e)) from e
    return ServersConfig.from_toml(source, str(path))
