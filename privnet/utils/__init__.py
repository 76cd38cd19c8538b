"""Cross-cutting helpers: logging setup and environment-backed settings."""
