import pytest
from stackbuild.exceptions import CommandError


class FakeRunner:
    """
    Records every command instead of running it.

    ``fail`` maps a command prefix (a tuple of leading arguments after the
    binary) to the exit status to report; ``images`` maps an image reference
    to the output of ``docker images -q``.
    """
    def __init__(self, fail=None, images=None):
        self.calls = []
        self.fail = fail or {}
        self.images = images or {}

    def _check(self, command):
        for prefix, status in self.fail.items():
            if tuple(command[1:1 + len(prefix)]) == prefix:
                raise CommandError(command, status)

    def run(self, sink, command):
        self.calls.append(command[1:])
        self._check(command)
        sink.write(f"ran {' '.join(command[1:])}\n")

    def combined_output(self, command):
        self.calls.append(command[1:])
        self._check(command)
        return self.images.get(command[-1], "")

    def commands(self, verb):
        return [call for call in self.calls if call[0] == verb]


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def write_dockerfile(tmp_path):
    def _write(relative="Dockerfile", content="FROM alpine\n"):
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path
    return _write
