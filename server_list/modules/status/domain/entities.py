"""Status domain entities."""

import tomllib
from dataclasses import dataclass

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from server_list.modules.status.domain.exceptions import ServersConfigError

DEFAULT_MINECRAFT_PORT = 25565


class ServerConfig(BaseModel):
    """One ``[[servers]]`` table of servers.toml."""

    ip: str = Field(..., min_length=1, description="Host name or address")
    port: int | None = Field(default=None, ge=1, le=65535, description="Explicit port")
    icon: str = Field(..., description="Display icon identifier")
    name: str = Field(..., description="Display name")
    description: str = Field(default="", description="Free text, may contain line breaks")

    @property
    def effective_port(self) -> int:
        return self.port or DEFAULT_MINECRAFT_PORT


class ServersConfig(BaseModel):
    servers: list[ServerConfig] = Field(default_factory=list)

    @classmethod
    def from_toml(cls, source: str, path: str = "<string>") -> "ServersConfig":
        try:
            return cls.model_validate(tomllib.loads(source))
        except tomllib.TOMLDecodeError as e:
            raise ServersConfigError(path, f"invalid TOML: {e}") from e
        except PydanticValidationError as e:
            raise ServersConfigError(path, f"{e.error_count()} validation error(s)") from e


@dataclass(frozen=True)
class MinecraftServerInfo:
    """Result of a Server List Ping."""

    host: str
    port_effective: int  # 实际连接使用的端口
    resolved: str  # 连接到的 IP:port
    connect_ms: int
    rtt_ms: int
    version_name: str
    version_protocol: int
    players_online: int
    players_max: int
    motd: str

    def __str__(self) -> str:
        return "\n".join(
            [
                "=== Minecraft Java Server Status ===",
                f"Address : {self.host}:{self.port_effective} (resolved: {self.resolved})",
                "Online  : YES (status retrieved)",
                f"Connect : ~{self.connect_ms} ms",
                f"RTT     : ~{self.rtt_ms} ms (ping)",
                f"Version : {self.version_name} (protocol {self.version_protocol})",
                f"Players : {self.players_online}/{self.players_max}",
                f"MOTD    : {self.motd}",
            ]
        )
