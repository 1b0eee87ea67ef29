"""CLI entrypoint: Typer app definition and command registration"""

import typer

from chatsaver.cli.commands import (
    delete_cmd,
    export_cmd,
    extract_cmd,
    init_cmd,
    list_cmd,
    render_cmd,
    save_cmd,
    search_cmd,
    show_cmd,
    stats_cmd,
)


app = typer.Typer(name="chatsaver", no_args_is_help=True, help="Save, search and export AI chat conversations")

app.command(name="init")(init_cmd)
app.command(name="extract")(extract_cmd)
app.command(name="render")(render_cmd)
app.command(name="save")(save_cmd)
app.command(name="list")(list_cmd)
app.command(name="search")(search_cmd)
app.command(name="show")(show_cmd)
app.command(name="delete")(delete_cmd)
app.command(name="stats")(stats_cmd)
app.command(name="export")(export_cmd)
