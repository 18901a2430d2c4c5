# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
import logging

import click
import uvicorn

from gift_storage_frame.app import create_app
from gift_storage_frame.types import FrameServerConfig


@click.command()
@click.option("--host", "host", default="localhost")
@click.option("--port", "port", default=5173)
@click.option("--log-level", "log_level", default="info", type=click.Choice(["debug", "info", "warning", "error"]))
@click.option("--env-file", "env_file", default=None, help="Path to a .env file")
def main(host: str, port: int, log_level: str, env_file: str):
    """Runs the gift storage frame server."""
    logging.basicConfig(level=log_level.upper())

    config = FrameServerConfig.from_env(env_file)
    if config.base_url == FrameServerConfig().base_url:
        config = config.model_copy(update={"base_url": f"http://{host}:{port}"})

    click.echo(f"Serving frame at {config.frame_url}/")
    app = create_app(config)
    uvicorn.run(app, host=host, port=port, log_level=log_level)


if __name__ == "__main__":
    main()
