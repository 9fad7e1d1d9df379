"""Read and write the line-oriented ``key = value`` configuration format.

Interface files hold an opaque ``[Interface]`` preamble followed by any
number of ``[Peer]`` blocks. Peer files are flat ``key = value`` lines
rendered from a template. Nothing here interprets values beyond the few
keys used to identify a peer.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .exceptions import TemplateUnreadableError

logger = logging.getLogger(__name__)

PEER_HEADER = "[Peer]"


def split_field(line: str) -> Optional[Tuple[str, str]]:
    """Split a ``key = value`` line into a stripped (key, value) pair."""
    if '=' not in line:
        return None
    key, value = line.split('=', 1)
    return key.strip(), value.strip()


def extract_field(text: str, key: str) -> Optional[str]:
    """
    Find the value of the first ``key = value`` line in ``text``.

    Whitespace around the key and the ``=`` is ignored. Base64 padding in
    the value is kept because only the first ``=`` separates key from value.

    Returns:
        The trimmed value, or None if no line carries ``key``
    """
    for line in text.splitlines():
        pair = split_field(line)
        if pair is not None and pair[0] == key:
            return pair[1]
    return None


def render_block(template_path: Path, substitutions: Dict[str, str]) -> str:
    """
    Render a peer file from a template.

    Every template line whose key appears in ``substitutions`` becomes
    ``key = <value>``; all other lines pass through unchanged.

    Args:
        template_path: Template file to copy
        substitutions: Mapping of key to replacement value

    Returns:
        Rendered file text

    Raises:
        TemplateUnreadableError: If the template cannot be read as UTF-8 text
    """
    try:
        with open(template_path, 'r', encoding="utf-8", newline='') as f:
            lines = f.readlines()
    except OSError as e:
        raise TemplateUnreadableError(
            f"Failed to read template configuration {template_path}: {e.strerror}"
        ) from e
    except UnicodeDecodeError as e:
        raise TemplateUnreadableError(
            f"Template configuration {template_path} is not valid UTF-8: {e}"
        ) from e

    rendered = []
    applied = set()
    for line in lines:
        key = line.split('=', 1)[0].strip()
        if key in substitutions:
            ending = line[len(line.rstrip('\r\n')):] or '\n'
            rendered.append(f"{key} = {substitutions[key]}{ending}")
            applied.add(key)
        else:
            rendered.append(line)

    for key in substitutions:
        if key not in applied:
            logger.warning(f"Template {template_path} has no {key} line")

    return ''.join(rendered)


@dataclass
class PeerBlock:
    """A ``[Peer]`` header and the lines that follow it up to a separator."""
    lines: List[str]

    @property
    def text(self) -> str:
        return ''.join(self.lines)

    @property
    def public_key(self) -> Optional[str]:
        return extract_field(self.text, "PublicKey")

    @property
    def allowed_ips(self) -> Optional[str]:
        return extract_field(self.text, "AllowedIPs")


def is_separator(line: str) -> bool:
    """True for lines that close a peer block: blank lines and section headers."""
    stripped = line.strip()
    return not stripped or stripped.startswith('[')


def scan_blocks(lines: Iterable[str]) -> Iterator[Union[str, PeerBlock]]:
    """
    Classify interface file lines into plain lines and peer blocks.

    A ``[Peer]`` header opens a block; the block extends over every
    following line until a blank line, another section header or the end
    of input. The closing line is not part of the block and is yielded on
    its own (or opens the next block). Lines outside blocks are yielded
    unchanged, so joining everything yielded reproduces the input exactly.
    """
    block: Optional[List[str]] = None

    for line in lines:
        if block is not None:
            if not is_separator(line):
                block.append(line)
                continue
            yield PeerBlock(block)
            block = None

        if line.strip() == PEER_HEADER:
            block = [line]
        else:
            yield line

    if block is not None:
        yield PeerBlock(block)


def format_peer_block(public_key: str, allowed_ips: str) -> str:
    """Text appended to an interface file for a new peer."""
    return f"\n{PEER_HEADER}\nPublicKey = {public_key}\nAllowedIPs = {allowed_ips}\n"
