"""refitter — generate Refit HTTP-client interfaces from OpenAPI specifications.

The command-line tool validates its input, builds a single generation
request, runs the generation engine once and writes one C# file.
"""

from refitter.version import __version__

__all__: list[str] = ["__version__"]
