"""
Extraction of build argument names declared in a Dockerfile.
"""
from typing import List
from ..exceptions import BuildFileError

ARG_KEYWORD = "ARG"

class BuildArgParser:
    """
    Line-based scanner for ``ARG`` declarations.

    Only the first two whitespace-separated tokens of each line are looked at;
    continuations, comments and quoting are not interpreted.
    """
    def parse(self, dockerfile_path: str) -> List[str]:
        """
        Reads a Dockerfile and returns the names of its declared build arguments.

        Args:
            dockerfile_path (str): Path to the Dockerfile.

        Returns:
            List[str]: Argument names, in order of first declaration.

        Raises:
            BuildFileError: If the file cannot be read.
        """
        try:
            with open(dockerfile_path, 'r') as f:
                content = f.read()
        except OSError as e:
            raise BuildFileError(dockerfile_path, e.strerror or str(e)) from e
        except UnicodeDecodeError as e:
            raise BuildFileError(dockerfile_path, str(e)) from e
        return self.parse_from_string(content)

    def parse_from_string(self, content: str) -> List[str]:
        """
        Returns the build argument names declared in Dockerfile content.

        Args:
            content (str): Content of the Dockerfile.

        Returns:
            List[str]: Argument names, in order of first declaration.
        """
        names = []
        for line in content.splitlines():
            name = self.parse_line(line)
            if name and name not in names:
                names.append(name)
        return names

    @staticmethod
    def parse_line(line: str) -> str:
        """
        Returns the argument name declared on a single line, or an empty string.

        ``ARG NAME=default`` yields ``NAME``; a bare ``ARG`` is skipped.
        """
        tokens = line.split()
        if len(tokens) < 2 or tokens[0] != ARG_KEYWORD:
            return ""
        return tokens[1].split("=", 1)[0]
