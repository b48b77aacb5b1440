"""Command line interface for the Brandfolder client."""

import logging
from typing import Any, Optional

import click

from .api import BrandfolderClient
from .config import config
from .exceptions import BrandfolderConfigError, BrandfolderError
from .labels import flatten_label_tree
from .output import OutputFormatter

logger = logging.getLogger(__name__)


def _get_client(ctx: Any) -> BrandfolderClient:
    """Build a client from the global options, exiting if none is possible."""
    out: OutputFormatter = ctx.obj["out"]
    api_key = ctx.obj.get("api_key")
    if not api_key and not config.is_configured():
        out.error("API key not configured.")
        out.info("Run 'pybrandfolder init' to configure your API key")
        ctx.exit(1)

    client = BrandfolderClient(
        api_key=api_key, brandfolder_id=ctx.obj.get("brandfolder")
    )
    if ctx.obj.get("verbose"):
        client.enable_verbose_logging()
    return client


@click.group()
@click.option(
    "--api-key", "-k", envvar="BRANDFOLDER_API_KEY", help="Brandfolder API key"
)
@click.option(
    "--brandfolder",
    "-b",
    envvar="BRANDFOLDER_ID",
    help="Brandfolder ID used when a command needs one",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="pybrandfolder")
@click.pass_context
def main(
    ctx: Any,
    api_key: Optional[str],
    brandfolder: Optional[str],
    quiet: bool,
    json: bool,
    verbose: bool,
) -> None:
    """PyBrandfolder - Browse Brandfolder organizations, assets and labels."""
    ctx.ensure_object(dict)
    ctx.obj["api_key"] = api_key
    ctx.obj["brandfolder"] = brandfolder
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["verbose"] = verbose

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("pybrandfolder").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.option(
    "--api-key",
    "-k",
    prompt="Enter your Brandfolder API key",
    hide_input=True,
    help="Brandfolder API key",
)
@click.option("--brandfolder", "-b", help="Default Brandfolder ID to store")
@click.pass_context
def init(ctx: Any, api_key: str, brandfolder: Optional[str]) -> None:
    """Initialize Brandfolder configuration.

    Stores your API key in ~/.config/pybrandfolder/config for future use.
    """
    out: OutputFormatter = ctx.obj["out"]

    out.info("Validating API key...")
    try:
        with BrandfolderClient(api_key=api_key) as client:
            client.list_brandfolders({"per": 1})
        out.success("✓ API key is valid")
    except BrandfolderError as e:
        out.error(f"API key validation failed: {e}")
        if not click.confirm("Save API key anyway?", default=False):
            out.warning("Configuration cancelled.")
            ctx.exit(1)

    config.save_api_key(api_key)
    if brandfolder:
        config.save_default_brandfolder(brandfolder)

    out.print_summary(
        "Initialization Complete",
        [
            ("Status", "✓ Configuration saved successfully"),
            ("Config file", str(config.get_config_path())),
        ],
    )


@main.command()
@click.pass_context
def brandfolders(ctx: Any) -> None:
    """List all brandfolders you can access."""
    out: OutputFormatter = ctx.obj["out"]
    with _get_client(ctx) as client:
        try:
            names = client.list_all_brandfolder_names()
        except BrandfolderError as e:
            out.error(str(e))
            ctx.exit(1)

    if not names:
        out.warning("No brandfolders found.")
        return
    out.output_table(
        [{"id": bf_id, "name": name} for bf_id, name in names.items()],
        ["id", "name"],
        {"id": "ID", "name": "Name"},
    )


@main.command()
@click.option("--simple", is_flag=True, help="List label names without hierarchy")
@click.pass_context
def labels(ctx: Any, simple: bool) -> None:
    """Show the label hierarchy of a brandfolder."""
    out: OutputFormatter = ctx.obj["out"]
    with _get_client(ctx) as client:
        try:
            result = client.list_labels_in_brandfolder(simple_format=simple)
        except BrandfolderConfigError as e:
            out.error(str(e))
            out.info("Pass --brandfolder or set BRANDFOLDER_ID")
            ctx.exit(1)
        except BrandfolderError as e:
            out.error(str(e))
            ctx.exit(1)

    if not result:
        out.warning("No labels found.")
        return
    if simple:
        out.output_table(
            [{"id": label_id, "name": name} for label_id, name in result.items()],
            ["id", "name"],
            {"id": "ID", "name": "Name"},
        )
    else:
        out.output_label_tree(result)
        out.info(f"{len(flatten_label_tree(result))} labels")


@main.command()
@click.option("--collection", "-c", help="Collection ID (default: whole brandfolder)")
@click.option("--all", "fetch_all", is_flag=True, help="Fetch every page")
@click.option("--per", type=int, default=None, help="Assets per page")
@click.pass_context
def assets(
    ctx: Any, collection: Optional[str], fetch_all: bool, per: Optional[int]
) -> None:
    """List assets with their attachment counts."""
    out: OutputFormatter = ctx.obj["out"]
    query_params: dict[str, Any] = {"include": "attachments"}
    if per:
        query_params["per"] = per
    with _get_client(ctx) as client:
        try:
            result = client.list_assets(
                query_params, collection=collection, should_get_all=fetch_all
            )
        except BrandfolderError as e:
            out.error(str(e))
            ctx.exit(1)

    rows = [
        {
            "id": asset.get("id"),
            "name": (asset.get("attributes") or {}).get("name"),
            "attachments": len(asset.get("attachments") or {}),
        }
        for asset in result.get("data") or []
    ]
    if not rows:
        out.warning("No assets found.")
        return
    out.output_table(
        rows,
        ["id", "name", "attachments"],
        {"id": "ID", "name": "Name", "attachments": "Attachments"},
    )
    if (result.get("meta") or {}).get("truncated"):
        out.warning("Results truncated: request limit reached.")


@main.command("custom-fields")
@click.option("--values", is_flag=True, help="Show the values in use for each field")
@click.pass_context
def custom_fields(ctx: Any, values: bool) -> None:
    """List the custom fields of a brandfolder."""
    out: OutputFormatter = ctx.obj["out"]
    with _get_client(ctx) as client:
        try:
            fields = client.list_custom_fields(
                include_values=values, simple_format=True
            )
        except BrandfolderError as e:
            out.error(str(e))
            ctx.exit(1)

    if not fields:
        out.warning("No custom fields found.")
        return
    if values:
        rows = [
            {"name": name, "values": ", ".join(str(v) for v in field_values or [])}
            for name, field_values in fields.items()
        ]
        out.output_table(rows, ["name", "values"], {"name": "Name", "values": "Values"})
    else:
        rows = [{"id": field_id, "name": name} for field_id, name in fields.items()]
        out.output_table(rows, ["id", "name"], {"id": "ID", "name": "Name"})


@main.command()
@click.option("--collection", "-c", help="Collection ID (default: whole brandfolder)")
@click.pass_context
def tags(ctx: Any, collection: Optional[str]) -> None:
    """List the tags used in a brandfolder or collection."""
    out: OutputFormatter = ctx.obj["out"]
    with _get_client(ctx) as client:
        try:
            tag_list = client.get_tags(collection=collection)
        except BrandfolderError as e:
            out.error(str(e))
            ctx.exit(1)

    if not tag_list:
        out.warning("No tags found.")
        return
    out.output_table(
        [
            {"id": tag.get("id"), "name": (tag.get("attributes") or {}).get("name")}
            for tag in tag_list
        ],
        ["id", "name"],
        {"id": "ID", "name": "Name"},
    )


if __name__ == "__main__":
    main()
