"""compdbgen - generate compile_commands.json from compiler build logs."""

__version__ = "0.3.0"
