"""CLI entrypoint: Typer app definition and command registration"""

import typer

from wxpub.cli.commands import (
    digest_cmd,
    draft_cmd,
    main_callback,
    publish_cmd,
    render_cmd,
    status_cmd,
    upload_thumb_cmd,
)


app = typer.Typer(name="wxpub", no_args_is_help=True, help="WeChat official account markdown publisher")

app.callback()(main_callback)
app.command(name="upload-thumb")(upload_thumb_cmd)
app.command(name="draft")(draft_cmd)
app.command(name="publish")(publish_cmd)
app.command(name="status")(status_cmd)
app.command(name="digest")(digest_cmd)
app.command(name="render")(render_cmd)
