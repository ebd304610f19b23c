"""
GraphQL package: the GitHub GraphQL transport.
"""

from .client import GitHubGraphQLClient, GraphQLExecutor

__all__ = ["GitHubGraphQLClient", "GraphQLExecutor"]
