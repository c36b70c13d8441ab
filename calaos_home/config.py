"""Local XML configuration storage and LAN discovery of the home server."""

from __future__ import annotations

import logging
import os
import socket
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from .events import Signal

log = logging.getLogger(__name__)

NAMESPACE = "http://www.calaos.fr"
LOCAL_CONFIG = "local_config.xml"
HOME_CONFIG_PATH = ".config/calaos"
HOME_CACHE_PATH = ".cache/calaos"
ETC_CONFIG_PATH = "/etc/calaos"
PREFIX_CONFIG_PATH = "/usr/local/etc/calaos"
BCAST_UDP_PORT = 4545
BROADCAST_ADDRESS = "255.255.255.255"
DISCOVER_MESSAGE = b"CALAOS_DISCOVER"
REPLY_PREFIX = b"CALAOS_IP"

DEFAULT_USER = "user"
DEFAULT_PASSWORD = "password"

_DEFAULT_OPTIONS = (
    ("fw_version", "0"),
    ("show_cursor", "true"),
    ("dpms_enable", "false"),
    ("cn_user", DEFAULT_USER),
    ("cn_pass", DEFAULT_PASSWORD),
    ("longitude", "2.322235"),
    ("latitude", "48.864715"),
)

ET.register_namespace("calaos", NAMESPACE)


class ConfigError(RuntimeError):
    """Raised when the configuration or cache location cannot be used."""


class LocalConfig:
    """Key/value options kept in ``local_config.xml``.

    The configuration directory is, in order of preference: the one given,
    ``$HOME/.config/calaos``, ``/etc/calaos``, the install prefix's
    ``etc/calaos``; if none exists ``$HOME/.config/calaos`` is created.
    """

    _SYSTEM_CONFIG_DIRS = (ETC_CONFIG_PATH, PREFIX_CONFIG_PATH)

    def __init__(
        self,
        config_dir: Optional[os.PathLike | str] = None,
        cache_dir: Optional[os.PathLike | str] = None,
        home: Optional[os.PathLike | str] = None,
    ) -> None:
        self._home = Path(home) if home is not None else Path.home()
        self._config_base: Optional[Path] = None
        self._cache_base: Optional[Path] = None

        if config_dir:
            self._config_base = Path(config_dir)
            self._config_base.mkdir(parents=True, exist_ok=True)
        if cache_dir:
            self._cache_base = Path(cache_dir)
            self._cache_base.mkdir(parents=True, exist_ok=True)

        conf_file = self.config_file(LOCAL_CONFIG)
        log.info("Using config path: %s", self.config_file(""))
        log.info("Using cache path: %s", self.cache_file(""))

        if not os.access(self.config_file(""), os.W_OK):
            raise ConfigError("config path is not writable")
        if not os.access(self.cache_file(""), os.W_OK):
            raise ConfigError("cache path is not writable")

        if not conf_file.exists():
            self._write_empty(conf_file)
            for key, value in _DEFAULT_OPTIONS:
                self.set_option(key, value)
            log.warning(
                "no %s found, generating default config with username: %r",
                LOCAL_CONFIG,
                DEFAULT_USER,
            )

    def _resolve_config_base(self) -> Path:
        if self._config_base is None:
            home_conf = self._home / HOME_CONFIG_PATH
            candidates = [home_conf, *map(Path, self._SYSTEM_CONFIG_DIRS)]
            found = next((d for d in candidates if d.is_dir()), None)
            if found is None:
                home_conf.mkdir(parents=True, exist_ok=True)
                found = home_conf
            self._config_base = found
        return self._config_base

    def _resolve_cache_base(self) -> Path:
        if self._cache_base is None:
            self._cache_base = self._home / HOME_CACHE_PATH
            self._cache_base.mkdir(parents=True, exist_ok=True)
        return self._cache_base

    def config_file(self, name: str) -> Path:
        """Path of a file inside the configuration directory."""
        return self._resolve_config_base() / name

    def cache_file(self, name: str) -> Path:
        """Path of a file inside the cache directory."""
        return self._resolve_cache_base() / name

    @staticmethod
    def _write_empty(path: Path) -> None:
        try:
            path.write_text(
                '<?xml version="1.0" encoding="UTF-8" ?>\n'
                f'<calaos:config xmlns:calaos="{NAMESPACE}">\n'
                "</calaos:config>",
                encoding="utf-8",
            )
        except OSError as exc:
            raise ConfigError("config path is not writable") from exc

    def all_options(self) -> dict[str, str]:
        """Read every option; a malformed file yields the options read so far."""
        path = self.config_file(LOCAL_CONFIG)
        values: dict[str, str] = {}
        try:
            with path.open("rb") as handle:
                try:
                    for _event, elem in ET.iterparse(handle, events=("start",)):
                        if elem.tag.rpartition("}")[2] == "option":
                            values[elem.get("name", "")] = elem.get("value", "")
                except ET.ParseError as exc:
                    log.warning("Failed to parse config XML file! %s", exc)
        except OSError as exc:
            raise ConfigError("config file is not readable") from exc
        return values

    def get_option(self, key: str) -> str:
        """Value of an option, or an empty string when it is not set."""
        return self.all_options().get(key, "")

    def set_option(self, key: str, value: str) -> None:
        """Set an option and rewrite the whole file."""
        values = self.all_options()
        values[key] = value

        root = ET.Element(f"{{{NAMESPACE}}}config")
        for name, val in values.items():
            ET.SubElement(root, f"{{{NAMESPACE}}}option", {"name": name, "value": val})
        tree = ET.ElementTree(root)
        ET.indent(tree)
        try:
            tree.write(self.config_file(LOCAL_CONFIG), encoding="UTF-8", xml_declaration=True)
        except OSError as exc:
            raise ConfigError("config file is not writable") from exc

    def load_auth(self) -> tuple[str, str]:
        """Return the stored (user e-mail, password) pair."""
        return self.get_option("cn_user"), self.get_option("cn_pass")

    def save_auth(self, email: str, password: str) -> None:
        """Store the user e-mail and password."""
        self.set_option("cn_user", email)
        self.set_option("cn_pass", password)


def parse_discovery_reply(data: bytes) -> Optional[str]:
    """Return the server address from a ``CALAOS_IP`` reply, or None."""
    if data[: len(REPLY_PREFIX)] != REPLY_PREFIX:
        return None
    return data[len(REPLY_PREFIX):].decode("utf-8", errors="replace").strip()


class ServerDiscovery:
    """Finds the home server by UDP broadcast, unless one is forced in config."""

    def __init__(self, config: LocalConfig, port: int = BCAST_UDP_PORT) -> None:
        self.config = config
        self.port = port
        self.detected = Signal()
        self.forced_host = config.get_option("calaos_server_host")
        self.server_host = self.forced_host

    def send_discover(self, sock: socket.socket) -> bool:
        """Broadcast a discovery request; returns False when a host is forced."""
        if self.config.get_option("calaos_server_host"):
            return False
        sock.sendto(DISCOVER_MESSAGE, (BROADCAST_ADDRESS, self.port))
        return True

    def handle_datagram(self, data: bytes) -> Optional[str]:
        """Process a reply; returns the detected host and emits ``detected``."""
        host = parse_discovery_reply(data)
        if host is None:
            return None
        if host != self.server_host:
            self.server_host = host
            log.info("Found calaos_server on %s", host)
        self.detected.emit(host)
        return host