"""CLI commands for global configuration management."""

import typer

from gitlane import config as gitlane_config

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage global gitlane configuration in ~/.gitlane/",
    add_completion=False,
)


@config_app.command("show")
def config_show() -> None:
    """Show the effective global configuration."""
    try:
        config = gitlane_config.load_config()
    except gitlane_config.ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    config_file = gitlane_config.get_config_file_path()
    source = str(config_file) if config_file.exists() else "defaults (no config file)"
    typer.echo(f"Current gitlane configuration ({source}):")
    typer.echo()
    for key, value in config.model_dump().items():
        typer.echo(f"  {key}: {value}")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Configuration key (e.g., commit_limit, log_level)"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Set one key in ~/.gitlane/config.yaml."""
    try:
        config = gitlane_config.set_config_value(key, value)
    except gitlane_config.ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Set {key} = {getattr(config, key)}")
