"""Generate a compilation database from a build log."""

import click

from compdbgen.utils.error_handler import handle_exceptions
from compdbgen.utils.exit_codes import ExitCodes


@click.command()
@handle_exceptions
@click.option(
    "-i", "--input-file", required=True, type=click.Path(dir_okay=False),
    help="Build log to scan (e.g. msbuild.log)",
)
@click.option(
    "-o", "--output-file", default=None, type=click.Path(dir_okay=False),
    help="Output JSON file [default: compile_commands.json]",
)
@click.option(
    "-d", "--source-directory", required=True, type=click.Path(),
    help="Root of the source tree used to locate bare file names",
)
@click.option(
    "-c", "--compiler-executable", "compiler", metavar="EXE", default=None,
    help="Compiler executable name to match in the log [default: cl.exe]",
)
@click.option(
    "--follow-symlinks/--no-follow-symlinks", default=None,
    help="Descend into symlinked directories while indexing",
)
@click.option("--strict", is_flag=True, help="Exit with status 1 if any diagnostic was reported")
@click.option("--quiet", is_flag=True, help="Only print warnings and errors")
@click.pass_context
def generate(ctx, input_file, output_file, source_directory, compiler, follow_symlinks, strict, quiet):
    """Convert a compiler build log into compile_commands.json.

    Every log line containing the compiler executable name (case-insensitive)
    is treated as one compile invocation: quotes are stripped, the line is
    split on whitespace, and the last token is taken as the compiled file.

    When that token has no directory, the file name is looked up in an index
    of the source directory. Names found in more than one directory are
    reported and skipped rather than guessed.

    \b
    Examples:
      compdbgen generate -i msbuild.log -d C:/work/project
      compdbgen generate -i build.log -d src -c clang-cl.exe --strict

    \b
    Configuration (lowest to highest precedence):
      .compdbgen.json in the working directory
      COMPDBGEN_<SECTION>_<KEY> environment variables
      command-line options

    Rejected lines are printed as warnings; the database is still written
    with every record that could be built."""
    from compdbgen.config_runtime import load_runtime_config
    from compdbgen.pipeline.ui import console, print_header, print_success, print_warning, render_summary
    from compdbgen.pipelines import generate_compile_commands
    from compdbgen.utils.logging import set_console_level

    if quiet:
        set_console_level("WARNING")

    config = load_runtime_config(".")
    if output_file is None:
        output_file = config["output"]["path"]
    if compiler is None:
        compiler = config["input"]["compiler"]
    if follow_symlinks is None:
        follow_symlinks = config["indexer"]["follow_symlinks"]

    report = generate_compile_commands(
        input_file=input_file,
        output_file=output_file,
        source_directory=source_directory,
        compiler=compiler,
        encoding=config["input"]["encoding"],
        indent=config["output"]["indent"],
        follow_symlinks=follow_symlinks,
        skip_dirs=config["indexer"]["skip_dirs"],
    )

    if not quiet:
        print_header("SUMMARY")
        console.print(render_summary(report))
        if report.total_diagnostics:
            print_warning(f"{report.total_diagnostics} diagnostics reported; see warnings above")
        print_success(f"Wrote {report.pipeline.stats.records} records to {report.output_file}")

    if strict and report.total_diagnostics:
        ctx.exit(ExitCodes.DIAGNOSTICS_REPORTED)
