"""
Companion service port discovery.

Resolution order, first success wins:
1. ``.port`` marker file in one of the candidate locations derived from
   the installation root
2. the persisted ``node_wp_bridge_port`` option
3. the default port
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .storage import OptionStore
from ...utils.logging_config import get_logger

logger = get_logger(__name__)

PORT_OPTION = "node_wp_bridge_port"
DEFAULT_PORT = 3000


@dataclass(frozen=True)
class PortResolution:
    port: int
    method: str  # file | option | default
    source: Optional[str] = None


def candidate_port_files(
    install_root,
    dir_name: str = "node-wp-bridge",
    file_name: str = ".port",
) -> List[Path]:
    """
    Marker file locations for an installation root, in probe order.

    The root is usually ``<site>/app/public``:
    - two levels up (standard layout)
    - three levels up (extra nesting)
    - the root with ``/app/public`` removed
    """
    root = str(install_root).rstrip("/") or "/"
    root_path = Path(root)
    parents = root_path.parents

    bases = []
    for level in (2, 3):
        # Path.parents is zero-based: parents[1] is two levels up
        if len(parents) >= level:
            bases.append(parents[level - 1])
    bases.append(Path(root.replace("/app/public", "")))

    candidates: List[Path] = []
    for base in bases:
        path = base / dir_name / file_name
        if path not in candidates:
            candidates.append(path)
    return candidates


def read_port_file(path: Path) -> Optional[int]:
    """Return the integer in a marker file, or None if missing or not numeric."""
    try:
        content = path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError):
        return None
    if not (content.isascii() and content.isdigit()):
        return None
    return int(content)


def resolve_port(
    install_root,
    options: Optional[OptionStore] = None,
    default: int = DEFAULT_PORT,
    dir_name: str = "node-wp-bridge",
    file_name: str = ".port",
) -> PortResolution:
    """Resolve the companion port. Never fails."""
    for port_file in candidate_port_files(install_root, dir_name, file_name):
        port = read_port_file(port_file)
        if port is not None:
            logger.info("Node Service Bridge: Found port %s in %s", port, port_file)
            return PortResolution(port=port, method="file", source=str(port_file))

    if options is not None:
        saved = options.get(PORT_OPTION)
        try:
            saved_port = int(saved) if saved else 0
        except (TypeError, ValueError):
            saved_port = 0
        if saved_port:
            logger.info("Node Service Bridge: Using database port %s", saved_port)
            return PortResolution(port=saved_port, method="option", source=PORT_OPTION)

    logger.info("Node Service Bridge: Using default port %s. root=%s", default, install_root)
    return PortResolution(port=default, method="default")
