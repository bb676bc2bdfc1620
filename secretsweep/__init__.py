"""secretsweep: find and prune stale AWS Secrets Manager secrets from the terminal."""

__version__ = "0.1.0"
