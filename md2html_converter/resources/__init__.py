"""Packaged default stylesheets and scripts, one file per AssetSlot."""
