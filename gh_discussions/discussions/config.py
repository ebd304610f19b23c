"""Discussions server configuration."""

from typing import Literal

from gh_discussions.shared.config import BaseServerSettings


class DiscussionsSettings(BaseServerSettings):
    """Settings specific to the Discussions server."""

    server_name: str = "discussions"
    host: str = "0.0.0.0"
    port: int = 8005
    transport: Literal["stdio", "sse"] = "stdio"
    read_only: bool = False

    class Config(BaseServerSettings.Config):
        env_prefix = "DISCUSSIONS_"
