"""Shared configuration, logging, errors and the GraphQL transport."""
