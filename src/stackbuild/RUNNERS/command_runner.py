# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Execution of external build-tool commands with output streaming.
"""
import subprocess
from typing import List, Optional, TextIO
from ..exceptions import CommandError

DEFAULT_DOCKER_BINARY = "docker"


def docker_command(*args: str, binary: str = DEFAULT_DOCKER_BINARY) -> List[str]:
    """
    Builds the argument list for a docker CLI invocation.

    Args:
        *args (str): Arguments following the binary, e.g. ``"tag", src, dst``.
        binary (str): The docker executable to call.

    Returns:
        List[str]: The full command.
    """
    return [binary, *args]


class CommandRunner:
    """
    Runs external commands to completion, one at a time.
    """
    def __init__(self, env: Optional[dict] = None):
        """
        Initializes the command runner.

        Args:
            env (Optional[dict]): Environment for the commands; inherited when None.
        """
        self.env = env

    def run(self, sink: TextIO, command: List[str]):
        """
        Runs a command, streaming its combined stdout/stderr into the sink
        line by line as it is produced.

        Args:
            sink (TextIO): Receives the command output.
            command (List[str]): Command and arguments to execute.

        Raises:
            CommandError: If the command cannot be started or exits non-zero.
        """
        try:
            process = subprocess.Popen(
                command,
                env=self.env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                # Avoid shell=True for security reasons (CWE-78)
                shell=False
            )
        except OSError as e:
            raise CommandError(command, None, str(e)) from e

        with process:
            for line in process.stdout:
                sink.write(line)
                if hasattr(sink, "flush"):
                    sink.flush()
            returncode = process.wait()

        if returncode != 0:
            raise CommandError(command, returncode)

    def combined_output(self, command: List[str]) -> str:
        """
        Runs a command and returns its combined stdout/stderr.

        Args:
            command (List[str]): Command and arguments to execute.

        Returns:
            str: Everything the command printed.

        Raises:
            CommandError: If the command cannot be started or exits non-zero.
        """
        try:
            result = subprocess.run(
                command,
                env=self.env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                shell=False
            )
        except OSError as e:
            raise CommandError(command, None, str(e)) from e

        if result.returncode != 0:
            raise CommandError(command, result.returncode, result.stdout)
        return result.stdout
