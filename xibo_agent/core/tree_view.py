"""Tree view generation for hierarchical CMS data.

Per-endpoint builders turn validated API payloads into ``TreeNode`` forests.
This module turns a forest into

* a depth-first listing with depth, sibling position and breadcrumb path,
* an indented text diagram drawn with box characters,
* the tree-view success envelope returned by list tools.

Forests are assumed to be acyclic; a node that contains itself recurses
until the interpreter's recursion limit.
"""

from typing import Any, Callable, List, Optional

from xibo_agent.schemas.common import TreeViewResponse
from xibo_agent.schemas.tree import FlatTreeNode, TreeNode

NodeFormatter = Callable[[TreeNode], str]

BRANCH = "├─ "
LAST_BRANCH = "└─ "
PIPE = "│  "
SPACE = "   "
PATH_SEPARATOR = " > "


def default_node_label(node: TreeNode) -> str:
    """Default ``type: name`` label; widgets also show their duration."""
    label = f"{node.type}: {node.name}"
    duration = getattr(node, "duration", None)
    if node.type == "widget" and duration is not None:
        label += f" ({duration}s)"
    return label


def generate_tree_view(
    tree: List[TreeNode],
    indent: str = "",
    node_formatter: Optional[NodeFormatter] = None,
) -> str:
    """Render a forest as text, one newline-terminated line per node."""
    format_node = node_formatter or default_node_label
    lines: List[str] = []

    def walk(nodes: List[TreeNode], prefix: str) -> None:
        for idx, node in enumerate(nodes):
            last = idx == len(nodes) - 1
            branch = LAST_BRANCH if last else BRANCH
            lines.append(f"{prefix}{branch}{format_node(node)}\n")
            if node.children:
                walk(node.children, prefix + (SPACE if last else PIPE))

    walk(tree, indent)
    return "".join(lines)


def flatten_tree(
    tree: List[TreeNode],
    node_path_formatter: Optional[NodeFormatter] = None,
) -> List[FlatTreeNode]:
    """Flatten a forest in pre-order, parents before their descendants."""
    path_label = node_path_formatter or (lambda node: node.name)
    result: List[FlatTreeNode] = []

    def walk(nodes: List[TreeNode], depth: int, parent_path: str) -> None:
        for idx, node in enumerate(nodes):
            label = path_label(node)
            path = f"{parent_path}{PATH_SEPARATOR}{label}" if parent_path else label

            extra = {}
            duration = getattr(node, "duration", None)
            if duration is not None:
                extra["duration"] = duration

            result.append(
                FlatTreeNode(
                    id=node.id,
                    name=node.name,
                    type=node.type,
                    depth=depth,
                    is_last=idx == len(nodes) - 1,
                    path=path,
                    **extra,
                )
            )

            if node.children:
                walk(node.children, depth + 1, path)

    walk(tree, 0, "")
    return result


def format_tree_view_text(rendered: str) -> str:
    """Wrap rendered tree text in a markdown code block."""
    return "```text\n" + rendered + "```"


def create_tree_view_response(
    data: Any,
    tree: List[TreeNode],
    node_formatter: Optional[NodeFormatter] = None,
) -> TreeViewResponse:
    """Build the success envelope carrying both the raw data and its tree view.

    Only call this for operations that already succeeded.
    """
    return TreeViewResponse(
        data=data,
        tree=flatten_tree(tree),
        tree_view_text=format_tree_view_text(
            generate_tree_view(tree, node_formatter=node_formatter)
        ),
    )


def count_nodes(tree: List[TreeNode]) -> int:
    """Total number of nodes in a forest."""
    return sum(1 + count_nodes(node.children) for node in tree)
