"""Command-line tools for operating a FateFi deployment."""
