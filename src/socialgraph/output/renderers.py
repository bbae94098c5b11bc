"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from socialgraph.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from socialgraph.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    # List results print ids only, one per line
    items = result.data.get("items") or result.data.get("nodes")
    if items and isinstance(items, list):
        return "\n".join(_extract_id(item) for item in items if _extract_id(item))

    single = result.data.get("id")
    if single is not None:
        return str(single)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    if isinstance(item, dict):
        val = item.get("id")
        if val is not None:
            return str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="sg.ok")
    op = Text(f"  {result.op}", style="sg.op")
    console.print(label, op, sep="")


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="sg.key")
    if key == "id" or key.endswith("_id") or key in ("user_lo", "user_hi"):
        v = Text(str(value), style="sg.id")
    elif key == "name":
        v = Text(str(value), style="sg.name")
    elif key == "popularity_score":
        v = Text(_score(value), style="sg.score")
    elif key == "hobby":
        v = Text(str(value), style="sg.hobby")
    elif isinstance(value, list):
        v = Text(", ".join(str(x) for x in value) or "-")
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


def _score(value: Any) -> str:
    return f"{float(value):.2f}" if isinstance(value, (int, float)) else str(value)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}", markup=False)


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{ak}={av}" for ak, av in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _user_table(users: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    """Build a Rich Table of aggregated user views."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="sg.id", no_wrap=True)
    table.add_column("Name", style="sg.name")
    table.add_column("Age", justify="right")
    table.add_column("Friends", justify="right")
    table.add_column("Hobbies", style="sg.hobby")
    table.add_column("Score", style="sg.score", justify="right")
    if verbose:
        table.add_column("Created", style="dim")

    for user in users:
        row: list[Any] = [
            str(user.get("id", "")),
            str(user.get("name", "")),
            str(user.get("age", "")),
            str(len(user.get("friends", []))),
            Text(", ".join(user.get("hobbies", []))),
            _score(user.get("popularity_score", 0.0)),
        ]
        if verbose:
            row.append(str(user.get("created_at", "")))
        table.add_row(*row)
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    label = Text("ERROR", style="sg.error")
    op = Text(f"  {result.op}{code}", style="sg.op")
    console.print(label, op, Text(": "), Text(msg), sep="")

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}", markup=False)


# ── User renderers ────────────────────────────────────────────────────


def _render_user(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create_user / get_user / update_user as a panel."""
    d = result.data
    lines = [
        f"id: {d.get('id', '?')}",
        f"age: {d.get('age', '?')}",
        f"popularity_score: {_score(d.get('popularity_score', 0.0))}",
        f"friends: {', '.join(d.get('friends', [])) or '-'}",
        f"hobbies: {', '.join(d.get('hobbies', [])) or '-'}",
    ]
    if verbose:
        lines.append(f"created_at: {d.get('created_at', '')}")
    if "fields_changed" in d:
        lines.append(f"fields_changed: {', '.join(d['fields_changed']) or '-'}")

    _status_line(console, result)
    console.print(Panel(Text("\n".join(lines)), title=str(d.get("name", "?")), expand=False))
    if verbose:
        _render_meta(console, result)


def _render_user_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    console.print(_user_table(items, verbose=verbose))
    console.print(f"\n{result.data.get('count', len(items))} users")
    if verbose:
        _render_meta(console, result)


# ── Mutation renderer ─────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render delete / link / unlink / attach / detach results."""
    _status_line(console, result)
    mutation_keys = (
        "id",
        "name",
        "user_id",
        "user_lo",
        "user_hi",
        "hobby",
        "hobby_id",
        "created_hobby",
        "attached",
        "removed_hobby_links",
    )
    for key in mutation_keys:
        if key in result.data:
            _field(console, key, result.data[key])
    user = result.data.get("user")
    if isinstance(user, dict):
        _field(console, "hobbies", user.get("hobbies", []))
        _field(console, "popularity_score", user.get("popularity_score", 0.0))
    if verbose:
        _render_meta(console, result)


# ── Hobby / graph renderers ───────────────────────────────────────────


def _render_hobby_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    if verbose:
        table.add_column("ID", style="sg.id", no_wrap=True)
    table.add_column("Hobby", style="sg.hobby")
    table.add_column("Users", justify="right")
    for item in items:
        row: list[Any] = [Text(str(item.get("name", ""))), str(item.get("user_count", 0))]
        if verbose:
            row.insert(0, str(item.get("id", "")))
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} hobbies")


def _render_graph(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render graph_view as a node table followed by an edge table."""
    nodes = result.data.get("nodes", [])
    edges = result.data.get("edges", [])
    names = {n.get("id"): n.get("name", "") for n in nodes}

    node_table = Table(title="Users", show_header=True, pad_edge=False, expand=False)
    node_table.add_column("ID", style="sg.id", no_wrap=True)
    node_table.add_column("Name", style="sg.name")
    node_table.add_column("Age", justify="right")
    node_table.add_column("Hobbies", style="sg.hobby")
    node_table.add_column("Score", style="sg.score", justify="right")
    for node in nodes:
        node_table.add_row(
            str(node.get("id", "")),
            str(node.get("name", "")),
            str(node.get("age", "")),
            Text(", ".join(node.get("hobbies", []))),
            _score(node.get("popularity_score", 0.0)),
        )
    console.print(node_table)

    if edges:
        edge_table = Table(title="Friendships", show_header=True, pad_edge=False, expand=False)
        edge_table.add_column("Source", style="sg.name")
        edge_table.add_column("Target", style="sg.name")
        if verbose:
            edge_table.add_column("ID", style="sg.id", no_wrap=True)
        for edge in edges:
            row = [
                names.get(edge.get("source"), str(edge.get("source", ""))),
                names.get(edge.get("target"), str(edge.get("target", ""))),
            ]
            if verbose:
                row.append(str(edge.get("id", "")))
            edge_table.add_row(*row)
        console.print()
        console.print(edge_table)

    console.print(f"\n{len(nodes)} users, {len(edges)} friendships")
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, dict) or (
            isinstance(value, list) and any(isinstance(v, dict) for v in value)
        ):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Users
    "create_user": _render_user,
    "get_user": _render_user,
    "update_user": _render_user,
    "delete_user": _render_mutation,
    "list_users": _render_user_list,
    # Friendships
    "link": _render_mutation,
    "unlink": _render_mutation,
    # Hobbies
    "attach_hobby": _render_mutation,
    "detach_hobby": _render_mutation,
    "list_hobbies": _render_hobby_list,
    # Graph
    "graph_view": _render_graph,
}
