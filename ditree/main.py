import logging

import docker
import typer

from . import config
from .inventory import DockerInventory
from .logging_setup import setup_logging
from .tree import (
    InconsistentInventoryError,
    PrintContext,
    build_tree,
    profile_outline,
    remove_intermediates,
    render_tree,
)

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False)

def connect() -> DockerInventory:
    """Connects to the Docker daemon configured in the environment."""
    timeout = int(config.get_config_value("docker_timeout_seconds") or 60)
    return DockerInventory.from_env(timeout=timeout)

def report_docker_error(e):
    error_msg = str(e)
    if "Permission denied" in error_msg:
        logger.error("Could not connect to Docker daemon: Permission denied. Please ensure the user is in the 'docker' group.")
        logger.error("To fix this, run: sudo usermod -a -G docker $USER && newgrp docker")
    else:
        logger.error(f"Docker request failed: {e}")

@app.command()
def main(
    show_all: bool = typer.Option(False, "-a", "--all", help="Print all images, including untagged intermediate layers."),
    show_size: bool = typer.Option(False, "-s", "--size", help="Print image size."),
    show_created: bool = typer.Option(False, "-c", "--created", help="Print image created time."),
):
    """Print Docker images as a tree, with the containers running from them."""
    setup_logging()

    # Build everything before printing anything
    try:
        inventory = connect()
        images = inventory.list_images()
        containers = inventory.list_containers()
        root = build_tree(images, containers)
    except docker.errors.DockerException as e:
        report_docker_error(e)
        raise typer.Exit(code=1)
    except InconsistentInventoryError as e:
        logger.error(f"Inventory changed while reading it: {e}")
        raise typer.Exit(code=1)

    if not show_all:
        remove_intermediates(root)

    ctx = PrintContext(print_size=show_size, print_created=show_created)
    profile_outline(root, ctx)

    for line in render_tree(root, ctx):
        typer.echo(line)

if __name__ == "__main__":
    app()
