"""Graphviz rendering of an evaluated gem dependency file."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from graphviz import Digraph

if TYPE_CHECKING:
    from .api import GemDependencyAPI


def _gem_label(declaration: list[Any]) -> str:
    name, *rest = declaration
    requirements = [r for r in rest if isinstance(r, str)]
    if requirements:
        return f"{name}\n{', '.join(requirements)}"
    return name


def to_dot(gem_deps: GemDependencyAPI) -> Digraph:
    """Render the groups of `gem_deps` and the gems requested from its file.

    Gems outside of any group hang directly off the file node. Excluded groups are dashed.
    """
    dot = Digraph(comment=f"Dependencies for {gem_deps.gem_deps_file}")
    dot.node("file", label=gem_deps.gem_deps_file, shape="folder")
    gem_ids: dict[str, str] = {}

    def add_gem(name: str, label: str) -> str:
        if name not in gem_ids:
            gem_id = f"gem{len(gem_ids)}"
            gem_ids[name] = gem_id
            dot.node(gem_id, label=label, shape="rectangle")
        return gem_ids[name]

    grouped = {declaration[0] for declarations in gem_deps.dependency_groups.values() for declaration in declarations}
    for dependency in gem_deps.request_set.dependencies:
        if dependency.name not in grouped:
            dot.edge("file", add_gem(dependency.name, _gem_label([dependency.name, *dependency.requirements])))

    for i, (group, declarations) in enumerate(sorted(gem_deps.dependency_groups.items())):
        group_id = f"group{i}"
        style = "dashed" if group in gem_deps.without_groups else "solid"
        dot.node(group_id, label=str(group), shape="oval", style=style)
        dot.edge("file", group_id)
        for declaration in declarations:
            dot.edge(group_id, add_gem(declaration[0], _gem_label(declaration)), style=style)
    return dot
