from pathlib import Path

import pytest

from scalar_kiota.runner import ProcessResult, ProcessRunner

SPEC_URL = "http://localhost:5000/openapi/v1.json"
SPEC = '{"openapi": "3.1.0", "info": {"title": "Todos", "version": "v1"}, "paths": {}}'


def _arg_after(args, flag):
    return args[args.index(flag) + 1]


class FakeProcessRunner(ProcessRunner):
    """Records calls instead of running processes and fakes their outputs.

    ``kiota generate`` writes a client file into ``--output``, ``npm`` creates
    node_modules plus a lock file and ``npx esbuild`` writes ``--outfile``.
    """

    def __init__(self, fail_when=None, missing=()):
        self.calls = []
        self.opened = []
        self.fail_when = fail_when or (lambda command, args: False)
        self.missing = set(missing)

    async def execute(self, command, args=(), cwd=None):
        args = [str(a) for a in args]
        self.calls.append((command, args, cwd))
        if command in self.missing:
            return ProcessResult(command, args, None, "", f"[Errno 2] No such file or directory: '{command}'")
        if self.fail_when(command, args):
            return ProcessResult(command, args, 1, "", f"Mock failure for {command}")
        self._simulate(command, args, cwd)
        return ProcessResult(command, args, 0)

    def open_url(self, url):
        self.opened.append(url)

    def commands(self):
        return [c[0] for c in self.calls]

    def _simulate(self, command, args, cwd):
        if command == "kiota" and args and args[0] == "generate":
            out = Path(_arg_after(args, "--output"))
            out.mkdir(parents=True, exist_ok=True)
            (out / "apiClient.ts").write_text("export function createApiClient() {}", encoding="utf-8")
            (out / "index.d.ts").write_text("// declarations", encoding="utf-8")
        elif command == "npm":
            (Path(cwd) / "node_modules").mkdir(exist_ok=True)
            (Path(cwd) / "package-lock.json").write_text("{}", encoding="utf-8")
        elif command == "npx":
            outfile = next(a for a in args if a.startswith("--outfile="))
            Path(outfile.split("=", 1)[1]).write_text("export{};", encoding="utf-8")


@pytest.fixture
def fake_runner():
    return FakeProcessRunner()


@pytest.fixture
def output_root(tmp_path):
    return tmp_path / ".scalar-kiota"
