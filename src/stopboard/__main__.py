"""Entry point for stopboard."""

import logging
import os
import sys

import requests

from stopboard.config import load_config
from stopboard.errors import ConfigError, RenderError, StopDataError

logger = logging.getLogger(__name__)


def load_stops(config):
    """Load stop data from the configured URL or file (URL wins)."""
    from stopboard.api import StopDataClient, load_stop_data

    if config.stops_url:
        return StopDataClient().fetch(config.stops_url)
    if config.stops:
        return load_stop_data(config.stops)
    logger.warning("No stop data source configured, rendering an empty board")
    return {}


def render(config):
    """Render the board, or an error screen if stop data cannot be loaded."""
    from stopboard.display import error_png, render_board

    try:
        stop_data = load_stops(config)
    except (OSError, StopDataError, requests.RequestException) as e:
        logger.error("Failed to load stop data: %s", e)
        return error_png(config.target, config.layout, e)
    return render_board(config.target, stop_data, config.layout)


def emit(config, png):
    """Hand the PNG to its destination: a file, a preview window, or stdout."""
    if config.output:
        with open(config.output, "wb") as f:
            f.write(png)
        logger.info("Wrote %d bytes to %s", len(png), config.output)
    elif config.preview:
        from stopboard.preview import show_png

        show_png(png)
    else:
        sys.stdout.buffer.write(png)
        sys.stdout.buffer.flush()


def main():
    """CLI entry point for the stopboard renderer.

    Loads configuration (defaults -> YAML -> CLI args), sets up logging
    to stderr, loads stop data and renders the board. Any failure to load
    config or data, or to render the board, is shown as an error screen
    instead. Exits non-zero only when even the error screen fails.
    """
    config_error = None
    try:
        config = load_config()
    except ConfigError as e:
        # Keep the CLI flags but drop the broken YAML, so the error screen
        # is drawn on the default layout.
        config_error = e
        config = load_config(yaml_path=os.devnull)

    # Log to stderr so stdout stays clean for PNG output.
    level = logging.DEBUG if config.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        if config_error is not None:
            from stopboard.display import error_png

            logger.error("Invalid configuration: %s", config_error)
            png = error_png(config.target, config.layout, config_error)
        else:
            logger.debug(
                "Config loaded: %dx%d, %d+%d section(s), target=%s",
                config.layout.width,
                config.layout.height,
                len(config.layout.left.sections),
                len(config.layout.right.sections),
                config.target.value,
            )
            png = render(config)
        emit(config, png)
    except KeyboardInterrupt:
        print("\nShutting down.", file=sys.stderr)
        sys.exit(0)
    except RenderError as e:
        logger.error("Error screen could not be rendered: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
