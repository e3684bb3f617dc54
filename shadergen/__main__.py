# shadergen/__main__.py
"""
Entry point for `python -m shadergen`.
Logging is configured by the CLI group from --debug/--quiet and the config file.
"""

from shadergen.cli.main import cli

if __name__ == "__main__":
    cli(prog_name="shadergen")
