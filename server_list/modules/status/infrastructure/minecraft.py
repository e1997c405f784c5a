"""Minecraft Java Edition Server List Ping client.

Handshake -> Status Request -> Status Response (JSON) -> Ping -> Pong.
All packets are framed as ``VarInt length + VarInt packet id + payload``.
Hosts without an explicit port are resolved through their
``_minecraft._tcp`` SRV record first.
"""

import asyncio
import contextlib
import json
import socket
import struct
import time
from collections.abc import Awaitable, Callable
from typing import Any

import dns.asyncresolver
import dns.exception
import dns.name
from loguru import logger
from pydantic import BaseModel, Field

from server_list.core.config import settings
from server_list.modules.status.domain.entities import (
    DEFAULT_MINECRAFT_PORT,
    MinecraftServerInfo,
)
from server_list.modules.status.domain.exceptions import StatusQueryError

# status 阶段对协议版本不敏感，使用兼容性最好的 47
HANDSHAKE_PROTOCOL_VERSION = 47
NEXT_STATE_STATUS = 1
MAX_VARINT_BYTES = 5
HAPPY_EYEBALLS_DELAY_SEC = 0.25
SRV_SERVICE = "_minecraft._tcp"

STATUS_REQUEST = b"\x01\x00"

SrvLookup = Callable[[str, float], Awaitable[list[tuple[str, int]]]]


class _VersionInfo(BaseModel):
    name: str
    protocol: int


class _PlayerSample(BaseModel):
    name: str
    id: str


class _PlayersInfo(BaseModel):
    max: int
    online: int
    sample: list[_PlayerSample] | None = None


class StatusResponse(BaseModel):
    version: _VersionInfo
    players: _PlayersInfo
    description: Any = Field(default="")


# ============================================
# Protocol helpers
# ============================================


def encode_varint(value: int) -> bytes:
    """Encode a 32-bit signed integer as a VarInt."""
    value &= 0xFFFFFFFF
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


async def read_varint(reader: asyncio.StreamReader) -> int:
    result = 0
    for position in range(MAX_VARINT_BYTES):
        (byte,) = await reader.readexactly(1)
        result |= (byte & 0x7F) << (7 * position)
        if not byte & 0x80:
            if result & 0x80000000:
                result -= 1 << 32
            return result
    raise ValueError("VarInt too big")


def encode_string(value: str) -> bytes:
    data = value.encode("utf-8")
    return encode_varint(len(data)) + data


def frame(payload: bytes) -> bytes:
    return encode_varint(len(payload)) + payload


def handshake_packet(host: str, port: int) -> bytes:
    return frame(
        b"\x00"
        + encode_varint(HANDSHAKE_PROTOCOL_VERSION)
        + encode_string(host)
        + struct.pack(">H", port)
        + encode_varint(NEXT_STATE_STATUS)
    )


def ping_packet(payload: int = 0) -> bytes:
    return frame(b"\x01" + struct.pack(">q", payload))


def description_to_text(description: Any) -> str:
    """Flatten a MOTD given as a plain string or chat component tree."""
    if isinstance(description, str):
        return description
    if isinstance(description, dict):
        text = description.get("text")
        out = text if isinstance(text, str) else ""
        extra = description.get("extra")
        if isinstance(extra, list):
            out += "".join(description_to_text(item) for item in extra)
        return out
    if isinstance(description, list):
        return "".join(description_to_text(item) for item in description)
    return ""


# ============================================
# SRV resolution
# ============================================


async def lookup_minecraft_srv(
    host: str, timeout_sec: float | None = None
) -> list[tuple[str, int]]:
    """Connection targets published as ``_minecraft._tcp.<host>`` SRV records.

    Only the lowest-priority group is returned, heaviest weight first.
    An empty list means there is no usable record.
    """
    lifetime = (
        settings.STATUS_CONNECT_TIMEOUT_SEC if timeout_sec is None else timeout_sec
    )
    try:
        answer = await dns.asyncresolver.resolve(
            f"{SRV_SERVICE}.{host}", "SRV", lifetime=lifetime
        )
    except (dns.exception.DNSException, ValueError) as e:
        logger.debug(f"No SRV record for {host}: {e!r}")
        return []

    records = list(answer)
    if not records:
        return []
    lowest = min(record.priority for record in records)
    group = sorted(
        (record for record in records if record.priority == lowest),
        key=lambda record: record.weight,
        reverse=True,
    )
    targets = []
    for record in group:
        if record.target == dns.name.root:  # "." 表示服务不可用
            continue
        targets.append((record.target.to_text(omit_final_dot=True), record.port))
    return targets


# ============================================
# Query
# ============================================


async def query_server_status(
    host: str,
    port: int | None = None,
    *,
    connect_timeout_sec: float | None = None,
    io_timeout_sec: float | None = None,
    force_ipv4: bool | None = None,
    srv_lookup: SrvLookup = lookup_minecraft_srv,
) -> MinecraftServerInfo:
    """Ping a Minecraft server and return its status.

    Without an explicit ``port`` the SRV record of ``host`` is consulted
    first; when there is none the default port 25565 is used.

    Raises:
        StatusQueryError: on resolution, connection, timeout or protocol errors.
    """
    connect_timeout = (
        settings.STATUS_CONNECT_TIMEOUT_SEC
        if connect_timeout_sec is None
        else connect_timeout_sec
    )
    io_timeout = (
        settings.STATUS_IO_TIMEOUT_SEC if io_timeout_sec is None else io_timeout_sec
    )
    if force_ipv4 is None:
        force_ipv4 = settings.MC_FORCE_IPV4
    family = socket.AF_INET if force_ipv4 else socket.AF_UNSPEC

    if port is not None:
        targets = [(host, port)]
    else:
        targets = await srv_lookup(host, connect_timeout) or [
            (host, DEFAULT_MINECRAFT_PORT)
        ]

    connect_start = time.perf_counter()
    reader, writer, port = await _connect(host, targets, family, connect_timeout)
    connect_ms = int((time.perf_counter() - connect_start) * 1000)

    try:
        return await _exchange(reader, writer, host, port, connect_ms, io_timeout)
    except (OSError, TimeoutError, EOFError, ValueError) as e:
        raise StatusQueryError(host, f"{type(e).__name__}: {e}") from e
    finally:
        writer.close()
        with contextlib.suppress(OSError):
            await writer.wait_closed()


async def _connect(
    host: str,
    targets: list[tuple[str, int]],
    family: int,
    timeout: float,
) -> tuple[asyncio.StreamReader, asyncio.StreamWriter, int]:
    """Connect to the first reachable target; returns the port used."""
    errors: list[str] = []
    for target_host, target_port in targets:
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(
                    target_host,
                    target_port,
                    family=family,
                    happy_eyeballs_delay=HAPPY_EYEBALLS_DELAY_SEC,
                ),
                timeout=timeout,
            )
        # UnicodeError: 主机名无法进行 IDNA 编码
        except (OSError, TimeoutError, ValueError) as e:
            errors.append(f"{target_host}:{target_port} {e!r}")
            continue
        return reader, writer, target_port
    raise StatusQueryError(host, f"TCP connect failed: {'; '.join(errors)}")


async def _exchange(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    host: str,
    port: int,
    connect_ms: int,
    io_timeout: float,
) -> MinecraftServerInfo:
    async def within_deadline(awaitable):
        return await asyncio.wait_for(awaitable, timeout=io_timeout)

    # 握手地址使用原始主机名（兼容 Bungee 等代理）
    writer.write(handshake_packet(host, port))
    writer.write(STATUS_REQUEST)
    await within_deadline(writer.drain())

    await within_deadline(read_varint(reader))  # packet length
    packet_id = await within_deadline(read_varint(reader))
    if packet_id != 0x00:
        raise ValueError(f"Unexpected packet id (expected 0x00), got {packet_id}")
    json_length = await within_deadline(read_varint(reader))
    raw = await within_deadline(reader.readexactly(json_length))
    status = StatusResponse.model_validate(json.loads(raw.decode("utf-8")))

    ping_start = time.perf_counter()
    writer.write(ping_packet(0))
    await within_deadline(writer.drain())
    await within_deadline(read_varint(reader))  # packet length
    pong_id = await within_deadline(read_varint(reader))
    if pong_id != 0x01:
        raise ValueError(f"Unexpected pong packet id (expected 0x01), got {pong_id}")
    await within_deadline(reader.readexactly(8))
    rtt_ms = int((time.perf_counter() - ping_start) * 1000)

    return MinecraftServerInfo(
        host=host,
        port_effective=port,
        resolved=_format_peer(writer.get_extra_info("peername"), host, port),
        connect_ms=connect_ms,
        rtt_ms=rtt_ms,
        version_name=status.version.name,
        version_protocol=status.version.protocol,
        players_online=status.players.online,
        players_max=status.players.max,
        motd=description_to_text(status.description),
    )


def _format_peer(peer: Any, host: str, port: int) -> str:
    if not isinstance(peer, tuple) or len(peer) < 2:
        return f"{host}:{port}"
    address, peer_port = peer[0], peer[1]
    if ":" in str(address):
        return f"[{address}]:{peer_port}"
    return f"{address}:{peer_port}"
