# Tree renderer — expandable view of the server's file tree.
# Created: 2026-10-19

from __future__ import annotations

from collections.abc import Iterator

from rich.text import Text
from rich.tree import Tree

from filedrop.api.schemas.files import DirectoryNode, FileNode, TreeNode


def format_size(size: int) -> str:
    """Human-readable size: ``0 Bytes``, ``1.5 KB``, ``2 MB``..."""
    if not size:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB", "TB"]
    value = float(size)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 2):g} {units[i]}"


def iter_nodes(nodes: list[TreeNode]) -> Iterator[TreeNode]:
    """Every node in *nodes*, depth first."""
    for node in nodes:
        yield node
        if isinstance(node, DirectoryNode):
            yield from iter_nodes(node.children)


def confirm_delete_message(node: TreeNode) -> str:
    if isinstance(node, DirectoryNode):
        return (
            f'Delete folder "{node.name}" and everything in it? '
            "This cannot be undone."
        )
    return f'Delete file "{node.name}"? This cannot be undone.'


class TreeView:
    """UI state for one listing: which folders are expanded.

    Folders start expanded. The state lives only as long as the view; a
    refreshed listing keeps the toggles of folders that still exist.
    """

    def __init__(self, nodes: list[TreeNode] | None = None):
        self.nodes: list[TreeNode] = []
        self.expanded: set[str] = set()
        self._known: set[str] = set()
        self.update(nodes or [])

    def _directories(self) -> set[str]:
        return {n.relativePath for n in iter_nodes(self.nodes) if isinstance(n, DirectoryNode)}

    def update(self, nodes: list[TreeNode]) -> None:
        """Replace the listing; new folders start expanded."""
        self.nodes = list(nodes)
        directories = self._directories()
        self.expanded = (self.expanded & directories) | (directories - self._known)
        self._known = directories

    def find(self, relative_path: str) -> TreeNode | None:
        for node in iter_nodes(self.nodes):
            if node.relativePath == relative_path:
                return node
        return None

    def is_expanded(self, relative_path: str) -> bool:
        return relative_path in self.expanded

    def toggle(self, relative_path: str) -> bool:
        """Flip one folder; returns whether it is now expanded."""
        if relative_path not in self._known:
            raise KeyError(f"Not a folder in this listing: {relative_path}")
        if relative_path in self.expanded:
            self.expanded.discard(relative_path)
            return False
        self.expanded.add(relative_path)
        return True

    def expand_all(self) -> None:
        self.expanded = set(self._known)

    def collapse_all(self) -> None:
        self.expanded.clear()

    def _label(self, node: TreeNode) -> Text:
        if isinstance(node, FileNode):
            label = Text(f"\U0001f4c4 {node.name}")
            label.append(f"  {format_size(node.size)}", style="dim")
            label.append(f"  {node.modifiedAt:%Y-%m-%d %H:%M}", style="dim")
            return label
        marker = "\U0001f4c2" if self.is_expanded(node.relativePath) else "\U0001f4c1"
        label = Text(f"{marker} {node.name}", style="bold blue")
        if not self.is_expanded(node.relativePath) and node.children:
            label.append(f"  ({len(node.children)} items)", style="dim")
        return label

    def _add(self, parent: Tree, nodes: list[TreeNode]) -> None:
        for node in nodes:
            branch = parent.add(self._label(node))
            if isinstance(node, DirectoryNode) and self.is_expanded(node.relativePath):
                self._add(branch, node.children)

    def render(self, title: str = "Files") -> Tree:
        tree = Tree(Text(title, style="bold"), guide_style="dim")
        if not self.nodes:
            tree.add(Text("No files yet", style="dim italic"))
        self._add(tree, self.nodes)
        return tree
