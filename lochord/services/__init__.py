"""Service layer: playlist file operations used by the CLI and embedders."""
