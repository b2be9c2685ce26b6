"""compdbgen CLI - main entry point and command registration hub."""
# ruff: noqa: E402 - commands imported after cli group definition

import click

from compdbgen import __version__


@click.group()
@click.version_option(version=__version__, prog_name="compdbgen")
@click.help_option("-h", "--help")
def cli():
    """compdbgen - compile_commands.json from compiler build logs

    \b
    QUICK START:
      compdbgen generate -i msbuild.log -d path/to/src
      compdbgen generate -i build.log -d src -c clang-cl.exe -o out.json

    \b
    For detailed options: compdbgen <command> --help"""
    pass


from compdbgen.commands.generate import generate

cli.add_command(generate)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
