# snippet_autocompleter/cli - command line front end
from snippet_autocompleter.cli.cli import CLI, build_parser, main

__all__ = ["CLI", "build_parser", "main"]
