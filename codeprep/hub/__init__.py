"""HTTP service: persistence, editor workspaces and code execution."""
