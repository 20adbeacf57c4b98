"""External services used by the bridge: client registry and transactions."""
