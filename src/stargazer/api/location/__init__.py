"""Location subpackage: weather forecasts and light pollution."""
