"""HTTP surface for a linecfg registry."""
