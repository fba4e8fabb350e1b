"""pathgate: confine untrusted relative paths to a configured base directory."""
