"""
Base configuration for the MCP servers.

Uses Pydantic Settings for environment-based configuration.
Each server extends BaseServerSettings with its own prefix.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class BaseServerSettings(BaseSettings):
    """Base settings shared by all MCP servers."""

    server_name: str = "base"

    # GitHub GraphQL endpoint
    github_graphql_url: str = "https://api.github.com/graphql"
    github_token: str = Field(
        default="",
        validation_alias=AliasChoices(
            "github_token",
            "GITHUB_PERSONAL_ACCESS_TOKEN",
            "GITHUB_TOKEN",
        ),
    )
    request_timeout: float = 30.0

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        populate_by_name = True
