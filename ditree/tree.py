"""Image derivation forest: build, prune, profile and render.

The forest is built once per run from flat inventory records, optionally
pruned of anonymous pass-through layers, profiled for column widths and
then rendered line by line.
"""

import logging
from typing import Iterator, NamedTuple

from .formatting import format_age, format_size

logger = logging.getLogger(__name__)

UNTAGGED = "<none>:<none>"
ROOT_ID = "<root>"

# Glyphs
BRANCH_MIDDLE = "├─"
BRANCH_LAST = "└─"
CONTINUATION = "│ "
LEAF_RUN = "──"
FORK_RUN = "┬─"
UNTAGGED_LEAF = "*"
UNTAGGED_BRANCH = "-"
ROOT_PLACEHOLDER = "."
CONTAINER_SEPARATOR = "  => "

ID_PREFIX = "sha256:"
ID_EXCERPT_LEN = 12


class InconsistentInventoryError(Exception):
    """A container references an image that is not in the image list."""


class ImageRecord(NamedTuple):
    id: str
    parent: str
    tags: str
    size: int
    created: int


class ContainerRecord(NamedTuple):
    id: str
    image_id: str
    names: tuple


class Node:
    """One image in the forest, or the synthetic root."""

    def __init__(self, id: str, parent_id: str = "", tags: str = "",
                 size: str = "", created: str = "", is_root: bool = False):
        self.id = id
        self.parent_id = parent_id
        self.tags = tags
        self.size = size
        self.created = created
        self.children = []
        self.containers = []
        self.is_root = is_root
        # Layout fields, valid after profile_outline()
        self.depth = 1 if is_root else 0
        self.is_end = False

    def __repr__(self):
        return f"Node({self.id!r}, tags={self.tags!r}, children={len(self.children)})"

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def is_intermediate(self) -> bool:
        """Untagged, has children and no container runs from it."""
        return self.tags == UNTAGGED and bool(self.children) and not self.containers


class PrintContext:
    """Column layout statistics gathered by profile_outline()."""

    def __init__(self, print_size: bool = False, print_created: bool = False,
                 print_header: bool = True):
        self.print_size = print_size
        self.print_created = print_created
        self.print_header = print_header
        self.max_depth = 0
        self.max_tags_len = 0
        self.max_size_len = 0
        self.max_created_len = 0
        self.print_containers = False


def strip_container_name(name: str) -> str:
    """Docker reports container names with a leading slash."""
    return name[1:] if name.startswith("/") else name


def _links_back(nodes, node_id: str) -> bool:
    """True if following parent references from node_id returns to it."""
    seen = set()
    current = nodes[node_id].parent_id
    while current in nodes and current not in seen:
        if current == node_id:
            return True
        seen.add(current)
        current = nodes[current].parent_id
    return False


def build_tree(images, containers, size_formatter=format_size,
               age_formatter=format_age) -> Node:
    """Build the forest and return its synthetic root.

    Images whose parent reference does not resolve to a listed image hang off
    the root. Every container's image must be listed.
    """
    root = Node(ROOT_ID, is_root=True)
    nodes = {root.id: root}

    for image in images:
        nodes[image.id] = Node(
            image.id,
            parent_id=image.parent or "",
            tags=image.tags,
            size=size_formatter(image.size),
            created=age_formatter(image.created),
        )

    # Second pass so a child listed before its parent still resolves
    for image in images:
        node = nodes[image.id]
        parent = nodes.get(node.parent_id)
        if parent is None or parent.is_root or _links_back(nodes, node.id):
            if node.parent_id:
                logger.debug(f"Parent {node.parent_id} of {node.id} does not resolve, attaching to root")
            root.children.append(node)
        else:
            parent.children.append(node)

    for container in containers:
        node = nodes.get(container.image_id)
        if node is None or node.is_root:
            raise InconsistentInventoryError(
                f"Container {container.id} references unknown image {container.image_id}"
            )
        for name in container.names:
            node.containers.append(strip_container_name(name))

    logger.debug(f"Built forest of {len(images)} images, {len(root.children)} top-level")
    return root


def remove_intermediates(node: Node):
    """Splice out intermediate children, keeping their descendants in place.

    Spliced-in children are re-checked before moving on, so chains of
    intermediates collapse in a single pass.
    """
    pending = list(reversed(node.children))
    kept = []
    while pending:
        child = pending.pop()
        if child.is_intermediate:
            pending.extend(reversed(child.children))
            continue
        kept.append(child)
    node.children = kept

    for child in node.children:
        remove_intermediates(child)


def profile_outline(node: Node, ctx: PrintContext):
    """Sort siblings by tags, stamp depth/is_end and collect column widths."""
    ctx.max_depth = max(ctx.max_depth, node.depth)
    # Untagged rows print a one-glyph placeholder, so the tags column only
    # needs to be wide when something is printed after it
    if node.containers or ctx.print_size or ctx.print_created:
        ctx.max_tags_len = max(ctx.max_tags_len, len(node.tags))
    ctx.max_size_len = max(ctx.max_size_len, len(node.size))
    ctx.max_created_len = max(ctx.max_created_len, len(node.created))
    if node.containers:
        ctx.print_containers = True

    # sorted() is stable, equal tags keep their discovery order
    node.children = sorted(node.children, key=lambda child: child.tags)

    last = len(node.children) - 1
    for i, child in enumerate(node.children):
        child.depth = node.depth + 1
        child.is_end = i == last
        profile_outline(child, ctx)


def short_id(image_id: str) -> str:
    if image_id.startswith(ID_PREFIX):
        image_id = image_id[len(ID_PREFIX):]
    return image_id[:ID_EXCERPT_LEN]


def header_title(ctx: PrintContext) -> str:
    title = " " + "IMAGE ID".ljust(ID_EXCERPT_LEN)
    title += " " + "TAGS".ljust(ctx.max_tags_len)
    if ctx.print_size:
        title += "  " + "SIZE".rjust(ctx.max_size_len)
    if ctx.print_created:
        title += "  " + "CREATED".rjust(ctx.max_created_len)
    if ctx.print_containers:
        title += "     CONTAINERS"
    return title


def node_tags(node: Node) -> str:
    if node.tags == UNTAGGED:
        return UNTAGGED_LEAF if node.is_leaf else UNTAGGED_BRANCH
    return node.tags


def node_title(node: Node, ctx: PrintContext) -> str:
    """Columns of a non-root row: id, tags, size, created, containers."""
    title = " " + short_id(node.id)
    title += " " + node_tags(node).ljust(ctx.max_tags_len)
    if ctx.print_size:
        title += "  " + node.size.rjust(ctx.max_size_len)
    if ctx.print_created:
        title += "  " + node.created.rjust(ctx.max_created_len)
    if ctx.print_containers and node.containers:
        title += CONTAINER_SEPARATOR + ", ".join(node.containers)
    return title


def render_tree(node: Node, ctx: PrintContext, prefix: str = "",
                branch: str = "") -> Iterator[str]:
    """Yield the rendered lines of node and its subtree in pre-order."""
    if node.is_root:
        if ctx.print_header:
            yield prefix + branch + "  " * (ctx.max_depth - 1) + header_title(ctx)
        else:
            yield prefix + branch + ROOT_PLACEHOLDER
        child_prefix = prefix
    else:
        if node.is_leaf:
            padding = LEAF_RUN * (ctx.max_depth - node.depth)
        else:
            padding = FORK_RUN + LEAF_RUN * (ctx.max_depth - node.depth - 1)
        yield prefix + branch + padding + node_title(node, ctx)
        child_prefix = prefix + ("  " if node.is_end else CONTINUATION)

    for child in node.children:
        child_branch = BRANCH_LAST if child.is_end else BRANCH_MIDDLE
        yield from render_tree(child, ctx, child_prefix, child_branch)
